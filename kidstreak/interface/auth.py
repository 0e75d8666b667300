"""Shared-password authentication for the storage API."""

import hashlib
import logging
import secrets

from fastapi import HTTPException, Request, status

from kidstreak.core.config import constants, settings


logger = logging.getLogger(__name__)


def make_token(secret: str | None) -> str:
    """Derive the bearer token clients send for a given app password."""
    return hashlib.sha256((secret or constants.OPEN_ACCESS_SECRET).encode("utf-8")).hexdigest()


def check_password(password: str | None) -> bool:
    """Validate a login attempt (always true when no password is configured)."""
    if not settings.auth_enabled:
        return True
    if not password:
        return False
    return secrets.compare_digest(password, str(settings.app_password))


async def require_auth(request: Request) -> None:
    """Reject requests without a valid bearer token when a password is configured."""
    if not settings.auth_enabled:
        return

    header = request.headers.get("authorization", "")
    token = header.removeprefix("Bearer ") if header.startswith("Bearer ") else None

    if token and secrets.compare_digest(token, make_token(settings.app_password)):
        return

    logger.warning("storage_auth_rejected", extra={"path": request.url.path})
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
