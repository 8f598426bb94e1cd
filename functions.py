import re
from datetime import date, datetime

import pytz
from flask import current_app, jsonify

ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def check_api_key(request):
    """Checks the x-api-key header against the configured API_KEY.

    Returns an error response tuple when the key is wrong, None when the
    request may proceed. No key configured means no check.
    """
    expected = current_app.config.get("API_KEY")
    if not expected:
        return None
    if request.headers.get("x-api-key") != expected:
        current_app.logger.warning(f"Failed API Key attempt from IP: {request.remote_addr}")
        return jsonify(error={"Not Authorised": "Incorrect or missing api_key."}), 403
    return None


def parse_id_list(ids_csv):
    """Parse a comma-separated id list.

    Only plain ASCII decimal integers are kept; "1.5", "1_000" or "abc" are dropped.
    """
    ids = []
    for part in (ids_csv or "").split(","):
        part = part.strip()
        if ID_PATTERN.fullmatch(part):
            ids.append(int(part))
    return ids


def farm_today():
    """Today's date in the configured farm timezone."""
    tz = pytz.timezone(current_app.config.get("FARM_TIMEZONE") or "UTC")
    return datetime.now(tz).date()


def parse_as_of(value):
    """Reference date for a summary request: ``as_of`` if given, else today.

    Raises ValueError for a malformed ``as_of``.
    """
    if not value:
        return farm_today()
    return date.fromisoformat(value.strip())
