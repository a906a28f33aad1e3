"""
Request identity.

Authentication happens upstream; this service trusts the X-User-Id header set by
the session layer in front of it and scopes every operation to that user.
"""
import logging
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"


async def get_current_user_id(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
    settings: Settings = Depends(get_settings),
) -> UUID:
    """
    Dependency that returns the id of the user making the request.

    In DEV_MODE a request without the header acts as the configured dev user.

    Raises:
        HTTPException: 401 if the header is missing (outside DEV_MODE) or is not a UUID.
    """
    if not x_user_id:
        if settings.dev_mode:
            return settings.dev_user_id
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        return UUID(x_user_id)
    except ValueError:
        logger.warning("Rejected malformed %s header", USER_ID_HEADER)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id",
        )
