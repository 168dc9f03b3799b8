from datetime import datetime, timedelta, timezone
import secrets
from typing import Iterable, Optional
from jose import jwt
from storefront.config.settings import config_settings


def create_access_token(user_pid, user_roles: Optional[Iterable[str]] = None,
                        expires_dur: int = config_settings.ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    """Mint a bearer token the way the identity service does. Used by tooling and tests."""
    now=datetime.now(timezone.utc)
    expiry= now + timedelta(minutes=expires_dur)

    payload = {
        "sub": str(user_pid),
        "iat": int(now.timestamp()),
        "exp": int(expiry.timestamp()),
        "jti": secrets.token_hex(16),
        "roles": list(user_roles or []),
    }
    return jwt.encode(claims=payload,key=config_settings.JWT_SECRET,algorithm=config_settings.JWT_ALGO)
