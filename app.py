# app.py - FreeNetHub routes: accounts, catalog listings and simulated telco provisioning
import logging
import os
import time

from flask import Flask, request, jsonify
from flask_cors import CORS
from dotenv import load_dotenv

import auth
import db
import telco
from errors import ApiError, Forbidden

load_dotenv()

logger = logging.getLogger(__name__)

app = Flask(__name__, static_folder="public", static_url_path="")
CORS(app)

app.config["JWT_SECRET"] = os.environ.get("JWT_SECRET", "dev_secret")
PORT = int(os.environ.get("PORT", "3000"))

GOOGLE_OAUTH_MESSAGE = (
    "Use full Google OAuth by enabling passport and SESSION in production. "
    "Visit the README for setup."
)


@app.errorhandler(ApiError)
def handle_api_error(e):
    return jsonify({"error": e.code}), e.status_code


def _body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _session(user):
    return jsonify({"user": auth.public_user(user), "token": auth.create_token(user, app.config["JWT_SECRET"])})


@app.route("/", methods=["GET"])
def index():
    return app.send_static_file("index.html")


@app.route("/api/status", methods=["GET"])
def status():
    data = db.load()
    data["analytics"]["visits"] = (data["analytics"].get("visits") or 0) + 1
    db.save(data)
    return jsonify({"ok": True, "time": int(time.time() * 1000)})


@app.route("/api/register", methods=["POST"])
def register():
    body = _body()
    data = db.load()
    user = auth.register_user(data, body.get("name"), body.get("email"), body.get("password"))
    db.save(data)
    return _session(user)


@app.route("/api/login", methods=["POST"])
def login():
    body = _body()
    data = db.load()
    user = auth.login_user(data, body.get("email"), body.get("password"))
    return _session(user)


@app.route("/api/create-admin", methods=["GET"])
def create_admin():
    """Unauthenticated convenience endpoint for demos."""
    email = request.args.get("email")
    data = db.load()
    auth.promote_admin(data, email)
    db.save(data)
    return jsonify({"ok": True, "message": f"User {email} promoted to admin."})


@app.route("/auth/google", methods=["GET"])
def google_auth():
    # OAuth needs sessions and a callback URL; only the instructions are served here.
    return jsonify({"message": GOOGLE_OAUTH_MESSAGE})


@app.route("/api/marketplace", methods=["GET"])
def marketplace():
    return jsonify({"items": db.load().get("marketplace") or []})


@app.route("/api/tasks", methods=["GET"])
def tasks():
    return jsonify({"tasks": db.load().get("tasks") or []})


@app.route("/api/leaderboard", methods=["GET"])
def leaderboard():
    return jsonify({"leaderboard": db.load().get("leaderboard") or []})


@app.route("/api/subscriptions", methods=["GET"])
def subscriptions():
    return jsonify({"subscriptions": db.load().get("subscriptions") or []})


@app.route("/api/telco/register-sim", methods=["POST"])
def register_sim():
    body = _body()
    data = db.load()
    sim, created = telco.register_sim(data, body.get("msisdn"), body.get("operator"), body.get("ownerEmail"))
    if created:
        db.save(data)
    return jsonify({"sim": sim})


@app.route("/api/admin/wifi-source", methods=["POST"])
def wifi_source():
    # demo admin gate: ?admin=1
    if request.args.get("admin") != "1":
        raise Forbidden("forbidden")
    body = _body()
    data = db.load()
    source = telco.add_wifi_source(data, body.get("name"), body.get("ssid"), body.get("bundles"))
    db.save(data)
    return jsonify(source)


@app.route("/api/telco/bundles", methods=["GET"])
def bundles():
    return jsonify(telco.list_bundles(db.load()))


@app.route("/api/telco/provision", methods=["POST"])
def provision():
    body = _body()
    data = db.load()
    result = telco.provision(
        data,
        body.get("bundle_code"),
        msisdn=body.get("msisdn"),
        wifi_id=body.get("wifi_id"),
        owner_email=body.get("ownerEmail"),
    )
    db.save(data)
    return jsonify(result)


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    db.init_db()  # creates db.json if missing
    logger.info("FreeNetHub backend listening on %s", PORT)
    app.run(host="0.0.0.0", port=PORT)
