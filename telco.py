# telco.py - SIMs, WiFi sources, bundle catalog and simulated provisioning
import logging
import time

import db
from auth import new_id
from errors import ValidationError

logger = logging.getLogger(__name__)

SIM_BUNDLES = [
    {"code": "SIM-100MB", "label": "100MB", "mb": 100},
    {"code": "SIM-1GB", "label": "1GB", "mb": 1024},
    {"code": "SIM-5GB", "label": "5GB", "mb": 5120},
]
DEFAULT_MB = 100


def register_sim(data, msisdn, operator=None, owner_email=None):
    """Return (sim, created). An msisdn that is already registered is returned unchanged."""
    if not msisdn:
        raise ValidationError("missing")
    for s in data["sims"]:
        if s.get("msisdn") == msisdn:
            return s, False
    sim = {
        "id": new_id(),
        "msisdn": msisdn,
        "operator": operator or "unknown",
        "ownerEmail": owner_email or None,
        "bundles": [],
    }
    data["sims"].append(sim)
    logger.info("registered SIM %s (%s)", msisdn, sim["operator"])
    return sim, True


def add_wifi_source(data, name, ssid, bundles=None):
    source = {"id": new_id(), "name": name, "ssid": ssid, "bundles": bundles or []}
    data["wifi_sources"].append(source)
    logger.info("added WiFi source %s (%s) with %d bundles", source["id"], ssid, len(source["bundles"]))
    return source


def list_bundles(data):
    bundles = [dict(b) for b in SIM_BUNDLES]
    for source in data["wifi_sources"]:
        advertised = source.get("bundles") or []
        # bundles are stored unvalidated; a non-list value is listed as a single entry
        if isinstance(advertised, list):
            bundles.extend(advertised)
        else:
            bundles.append(advertised)
    return {"source": "local", "bundles": bundles}


def _wifi_bundle_mb(data, wifi_id, bundle_code):
    source = db.find_by_id(data["wifi_sources"], wifi_id)
    if not source:
        return DEFAULT_MB
    advertised = source.get("bundles")
    if not isinstance(advertised, list):
        return DEFAULT_MB
    for b in advertised:
        if isinstance(b, dict) and b.get("code") == bundle_code:
            return b.get("mb") or DEFAULT_MB
    return DEFAULT_MB


def _sim_bundle(bundle_code):
    for b in SIM_BUNDLES:
        if b["code"] == bundle_code:
            return b
    return {"code": bundle_code, "mb": DEFAULT_MB}


def provision(data, bundle_code, msisdn=None, wifi_id=None, owner_email=None):
    """Simulate a bundle purchase and credit the owner's data balance.

    A transaction is logged before anything is resolved, whatever the outcome.
    No provider is contacted.
    """
    if not msisdn and not wifi_id:
        raise ValidationError("missing")

    data["transactions"].append({
        "id": new_id(),
        "provider": "telco",
        "type": "provision",
        "external_order_id": "prov_%d" % int(time.time() * 1000),
        "msisdn": msisdn,
        "wifi_id": wifi_id,
        "bundle_code": bundle_code,
        "credited": 0,
        "raw_payload": {"requested": True},
    })

    if wifi_id:
        mb = _wifi_bundle_mb(data, wifi_id, bundle_code)
    else:
        mb = _sim_bundle(bundle_code)["mb"]

    user = db.find_user(data, owner_email)
    if user:
        user["data_balance_mb"] = (user.get("data_balance_mb") or 0) + mb
        logger.info("credited %s MB to %s", mb, owner_email)
    else:
        logger.info("provisioned %s MB (%s) with no account to credit", mb, bundle_code)

    return {
        "success": True,
        "simulated": True,
        "added_mb": mb,
        "new_balance": user["data_balance_mb"] if user else None,
    }
