"""FastAPI dependencies shared by the finance routers."""

import logging

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from src.models.user import User
from src.services import get_db
from src.services.errors import UnauthorizedError

logger = logging.getLogger(__name__)


def get_current_owner(
    x_user_id: str | None = Header(None),
    db: Session = Depends(get_db),  # noqa: B008
) -> User:
    """Resolve the owner of the request from the X-User-Id header.

    Credential checks happen upstream (gateway / login service); this only
    maps the identity it forwards to an active user row.

    Raises:
        UnauthorizedError: If the header is missing, malformed or names no
            active user
    """
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-Id header")
    try:
        user_id = int(x_user_id)
    except ValueError as e:
        raise UnauthorizedError("Invalid X-User-Id header") from e

    user = db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
    if not user:
        logger.warning("auth: unknown or inactive user_id=%s", user_id)
        raise UnauthorizedError("Unknown or inactive user")
    return user


__all__ = ["get_current_owner"]
