"""Signed principal tokens. The engine trusts an already-authenticated owner id carried in the token."""
import base64
import hashlib
import hmac
import time

from scenario_sim.core.config import get_settings


# Token: base64(owner_id:timestamp).hmac
def _signature(payload: bytes) -> str:
    settings = get_settings()
    return hmac.new(settings.secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def _sign_payload(payload: bytes) -> str:
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=") + "." + _signature(payload)


def create_session_token(owner_id: str, issued_at: int | None = None) -> str:
    """Create a signed token for the principal (auth cookie or bearer).

    The engine only verifies tokens. This is the issuing side, used by whatever
    layer authenticates users before handing them to the API.
    """
    ts = int(time.time()) if issued_at is None else issued_at
    payload = f"{owner_id}:{ts}".encode("utf-8")
    return _sign_payload(payload)


def verify_session_token(token: str | None) -> str | None:
    """Verify signed token and return owner_id if valid; None otherwise."""
    if not token or "." not in token:
        return None
    try:
        encoded, sig = token.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not hmac.compare_digest(_signature(payload), sig):
            return None
        owner_id, ts = payload.decode("utf-8").rsplit(":", 1)
        if not owner_id:
            return None
        if abs(time.time() - int(ts)) > get_settings().auth_cookie_max_age:
            return None
        return owner_id
    except (ValueError, UnicodeDecodeError):
        return None
