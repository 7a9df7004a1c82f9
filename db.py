# db.py - Persistence in a single JSON document (no SQL)
import copy
import json
import logging
import os

logger = logging.getLogger(__name__)

# overrides the DATA_FILE environment variable when set
DATA_FILE = None

DEFAULT_SUBSCRIPTIONS = [
    {"id": "sub_basic", "name": "Basic", "price": 0},
    {"id": "sub_pro", "name": "Pro", "price": 299},
    {"id": "sub_premium", "name": "Premium", "price": 499},
]

COLLECTIONS = ("users", "marketplace", "tasks", "transactions", "leaderboard", "sims", "wifi_sources", "subscriptions")


def _path():
    return DATA_FILE or os.environ.get("DATA_FILE", "db.json")


def _empty():
    data = {name: [] for name in COLLECTIONS}
    data["analytics"] = {}
    return data


def load():
    """Read the whole document. Missing or broken files come back as an empty document with defaults."""
    path = _path()
    data = None
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("could not read %s, starting from empty document: %s", path, e)
    if not isinstance(data, dict):
        data = _empty()

    for name in COLLECTIONS:
        if not isinstance(data.get(name), list):
            data[name] = []
    if not isinstance(data.get("analytics"), dict):
        data["analytics"] = {}
    if not data["subscriptions"]:
        data["subscriptions"] = copy.deepcopy(DEFAULT_SUBSCRIPTIONS)
    return data


def save(data):
    with open(_path(), "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def init_db():
    """Create the data file (or fill in its missing defaults) at startup."""
    data = load()
    save(data)
    logger.info("data file ready at %s", os.path.abspath(_path()))
    return data


def find_user(data, email):
    if not email:
        return None
    for u in data["users"]:
        if u.get("email") == email:
            return u
    return None


def find_by_id(items, item_id):
    for item in items:
        if item.get("id") == item_id:
            return item
    return None
