from datetime import datetime, timedelta, timezone
from typing import NamedTuple

import jwt

from backend.auth.errors import InvalidSignature, MalformedToken, TokenExpired
from backend.core.config import TokenSettings, get_token_settings

REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


class TokenClaims(NamedTuple):
    subject: str
    role: str


def issue_token(
    user_id: str,
    role: str,
    ttl: timedelta | None = None,
    settings: TokenSettings | None = None,
    now: datetime | None = None,
) -> str:
    settings = settings or get_token_settings()
    lifetime = ttl if ttl is not None else timedelta(minutes=settings.expires_minutes)
    issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def verify_token(token: str, settings: TokenSettings | None = None) -> TokenClaims:
    """Check signature and expiry and return the token's subject and role.

    The signature is checked before expiry, so a forged token that is also
    expired reports ``InvalidSignature``.
    """
    settings = settings or get_token_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired() from exc
    except jwt.InvalidSignatureError as exc:
        raise InvalidSignature() from exc
    except jwt.InvalidTokenError as exc:
        raise MalformedToken(str(exc)) from exc

    subject = payload["sub"]
    role = payload["role"]
    if not isinstance(subject, str) or not subject:
        raise MalformedToken("sub must be a non-empty string")
    if not isinstance(role, str) or not role:
        raise MalformedToken("role must be a non-empty string")
    return TokenClaims(subject=subject, role=role)
