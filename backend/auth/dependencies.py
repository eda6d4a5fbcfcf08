import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.errors import AuthError, MissingHeader, UserNotFound
from backend.auth.users import UserStore
from backend.core.config import TokenSettings
from backend.database import get_db
from backend.models.user import User

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(header: str | None) -> str:
    if not header or not header.startswith(BEARER_PREFIX):
        raise MissingHeader()
    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise MissingHeader()
    return token


def authenticate_request(
    header: str | None,
    users: UserStore,
    settings: TokenSettings | None = None,
) -> User:
    """Resolve an ``Authorization`` header to the live user record.

    The stored user is returned rather than the token claims, so role or
    name changes made since the token was issued apply immediately.
    """
    token = extract_bearer_token(header)
    claims = jwt_handler.verify_token(token, settings=settings)
    user = users.find_by_id(claims.subject)
    if user is None:
        raise UserNotFound(claims.subject)
    return user


def unauthorized(exc: AuthError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=exc.public_message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    try:
        return authenticate_request(authorization, UserStore(db))
    except AuthError as exc:
        logger.info("Rejected request: %s", exc.reason)
        raise unauthorized(exc) from exc
