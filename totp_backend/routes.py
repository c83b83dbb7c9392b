"""
TOTP TILES API ROUTES - FLASK BLUEPRINT

Every endpoint lives under /api. The account list is kept in memory by the
app (see models.AccountList); the clock is read here, never in totp_core.

EXAMPLES:
curl -X POST http://localhost:5000/api/accounts -H "Content-Type: application/json" \
     -d '{"uri": "otpauth://totp/Example:alice@example.com?secret=JBSWY3DPEHPK3PXP&issuer=Example"}'
curl http://localhost:5000/api/codes
curl -X DELETE http://localhost:5000/api/accounts/<id>
"""

import base64
import io
import logging
import time

import qrcode
from flask import Blueprint, current_app, jsonify, request

from totp_core import CorruptCredentialError, ParseError, format_otpauth_uri, parse
from totp_core.totp_generator import MAX_COUNTER

from .models import AccountList, snapshot, tile_state

logger = logging.getLogger(__name__)

ACCOUNTS_EXTENSION = "totp_accounts"

api_bp = Blueprint("api", __name__, url_prefix="/api")


def get_accounts() -> AccountList:
    return current_app.extensions[ACCOUNTS_EXTENSION]


def _request_time():
    """Unix time for this request: ?at=<seconds> if given, else now. None if ?at is invalid or too large."""
    raw = request.args.get("at")
    if raw is None:
        return int(time.time())
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()):
        return None
    at_time = int(raw)
    if at_time > MAX_COUNTER:
        return None
    return at_time


def _invalid_time():
    return jsonify({"error": "InvalidTime", "message": "'at' must be a non-negative integer"}), 400


def _not_found(account_id: str):
    return jsonify({"error": "NotFound", "message": f"Account '{account_id}' not found"}), 404


# --- error handlers ---------------------------------------------------------
@api_bp.errorhandler(ParseError)
def handle_parse_error(e: ParseError):
    logger.info("Rejected provisioning URI: %s (%s)", e.code, e)
    return jsonify({"error": e.code, "message": str(e)}), 400


@api_bp.errorhandler(CorruptCredentialError)
def handle_corrupt_credential(e: CorruptCredentialError):
    logger.exception("Stored credential could not produce a code")
    return jsonify({"error": e.code, "message": "Internal error computing the code"}), 500


# --- accounts ---------------------------------------------------------------
@api_bp.route("/accounts", methods=["POST"])
def add_account():
    """
    ADD AN ACCOUNT FROM A SCANNED QR CODE

      curl -X POST http://localhost:5000/api/accounts -H "Content-Type: application/json" \
           -d '{"uri": "otpauth://totp/Example:alice?secret=JBSWY3DPEHPK3PXP"}'

    Input (JSON body):
      {"uri": "otpauth://totp/..."}   # text decoded from the QR code

    Output (201):
      {"id": "...", "issuer": "Example", "account_name": "alice", "algorithm": "SHA1", "digits": 6, "period": 30}

    A URI that fails to parse is rejected as a whole (400, {"error": "<code>"}).
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict) or "uri" not in data:
        return jsonify({"error": "MissingURI", "message": "uri is required"}), 400

    credential = parse(data["uri"])
    account = get_accounts().add(credential)
    return jsonify(account.to_dict()), 201


@api_bp.route("/accounts", methods=["GET"])
def list_accounts():
    """
    LIST ACCOUNTS IN DISPLAY ORDER (no secrets)

      curl http://localhost:5000/api/accounts
    """
    return jsonify({"accounts": [account.to_dict() for account in get_accounts()]})


@api_bp.route("/accounts/<string:account_id>", methods=["DELETE"])
def delete_account(account_id):
    """
    REMOVE AN ACCOUNT

      curl -X DELETE http://localhost:5000/api/accounts/<id>
    """
    try:
        get_accounts().remove(account_id)
    except KeyError:
        return _not_found(account_id)
    return jsonify({"deleted": account_id})


@api_bp.route("/accounts/<string:account_id>/code", methods=["GET"])
def get_account_code(account_id):
    """
    CURRENT CODE FOR ONE ACCOUNT

      curl http://localhost:5000/api/accounts/<id>/code
      curl "http://localhost:5000/api/accounts/<id>/code?at=1111111109"

    Output:
      {"id": "...", "code": "081804", "remaining": 1, "fraction": 0.033, "expiring": true, "at": 1111111109}
    """
    now = _request_time()
    if now is None:
        return _invalid_time()
    try:
        account = get_accounts().get(account_id)
    except KeyError:
        return _not_found(account_id)

    state = tile_state(account, now)
    return jsonify({
        "id": state.id,
        "code": state.code,
        "remaining": state.remaining,
        "fraction": state.fraction,
        "expiring": state.expiring,
        "at": now,
    })


@api_bp.route("/accounts/<string:account_id>/qr", methods=["GET"])
def get_account_qr(account_id):
    """
    EXPORT AN ACCOUNT AS A QR CODE IMAGE

      curl http://localhost:5000/api/accounts/<id>/qr

    Output:
      {"id": "...", "qr_code": "data:image/png;base64,..."}

    The image encodes the full provisioning URI, secret included, so another
    authenticator can import the account.
    """
    try:
        account = get_accounts().get(account_id)
    except KeyError:
        return _not_found(account_id)

    uri = format_otpauth_uri(account.credential)

    qr = qrcode.QRCode(
        version=None,
        box_size=current_app.config["QR_BOX_SIZE"],
        border=current_app.config["QR_BORDER"],
    )
    qr.add_data(uri)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    img_str = base64.b64encode(buffer.getvalue()).decode()

    return jsonify({"id": account.id, "qr_code": f"data:image/png;base64,{img_str}"})


# --- ticks ------------------------------------------------------------------
@api_bp.route("/codes", methods=["GET"])
def get_codes():
    """
    ONE TICK FOR EVERY TILE

    The frontend polls this once per second and renders the result.

      curl http://localhost:5000/api/codes
      curl "http://localhost:5000/api/codes?at=59"

    Output:
      {"at": 59, "tiles": [{"id": "...", "issuer": "...", "account_name": "...",
                            "code": "287082", "remaining": 1, "fraction": 0.033, "expiring": true}]}
    """
    now = _request_time()
    if now is None:
        return _invalid_time()
    tiles = snapshot(get_accounts(), now)
    return jsonify({"at": now, "tiles": [tile.to_dict() for tile in tiles]})


@api_bp.route("/parse", methods=["POST"])
def parse_uri():
    """
    VALIDATE A PROVISIONING URI WITHOUT STORING IT

      curl -X POST http://localhost:5000/api/parse -H "Content-Type: application/json" \
           -d '{"uri": "otpauth://totp/SoloName?secret=JBSWY3DPEHPK3PXP"}'

    Output:
      {"valid": true, "credential": {"issuer": "SoloName", "account_name": "SoloName", ...}}
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict) or "uri" not in data:
        return jsonify({"error": "MissingURI", "message": "uri is required"}), 400

    credential = parse(data["uri"])
    return jsonify({
        "valid": True,
        "credential": {
            "issuer": credential.issuer,
            "account_name": credential.account_name,
            "algorithm": credential.algorithm.value,
            "digits": credential.digits,
            "period": credential.period,
        },
    })
