# auth.py - Local accounts: register, login, admin promotion and session tokens
import logging
import random
import string
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from werkzeug.security import generate_password_hash, check_password_hash

import db
from errors import ValidationError, ConflictError, InvalidCredentials, NotFound

logger = logging.getLogger(__name__)

TOKEN_TTL = timedelta(days=30)
TOKEN_ALGORITHM = "HS256"


def new_id():
    return uuid.uuid4().hex[:10]


def _referral_code():
    return "REF" + "".join(random.choices(string.ascii_uppercase + string.digits, k=6))


def public_user(user):
    return {
        "id": user["id"],
        "name": user.get("name"),
        "email": user["email"],
        "credits": user.get("credits", 0),
        "referralCode": user.get("referralCode"),
        "data_balance_mb": user.get("data_balance_mb", 0),
    }


def create_token(user, secret):
    payload = {
        "id": user["id"],
        "email": user["email"],
        "name": user.get("name"),
        "is_admin": bool(user.get("is_admin", False)),
        "exp": datetime.now(timezone.utc) + TOKEN_TTL,
    }
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_token(token, secret):
    """Verify signature and expiry. Raises jwt.InvalidTokenError on a bad token."""
    return jwt.decode(token, secret, algorithms=[TOKEN_ALGORITHM])


def register_user(data, name, email, password):
    if not email or not password:
        raise ValidationError("missing")
    if db.find_user(data, email):
        raise ConflictError("exists")
    user = {
        "id": new_id(),
        "name": name or "User",
        "email": email,
        "password": generate_password_hash(password),
        "credits": 0,
        "is_admin": False,
        "referralCode": _referral_code(),
        "data_balance_mb": 0,
    }
    data["users"].append(user)
    logger.info("registered user %s (%s)", user["id"], email)
    return user


def login_user(data, email, password):
    user = db.find_user(data, email)
    if not user or not password or not check_password_hash(user.get("password", ""), password):
        raise InvalidCredentials("invalid")
    return user


def promote_admin(data, email):
    if not email:
        raise ValidationError("missing_email")
    user = db.find_user(data, email)
    if not user:
        raise NotFound("user_not_found")
    user["is_admin"] = True
    logger.info("promoted %s to admin", email)
    return user
