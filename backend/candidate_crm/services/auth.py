"""
Caller identity.

Tokens are issued by the external auth provider; this service only verifies
them and returns the opaque user id from the ``sub`` claim.
"""
import logging

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import Settings, get_settings
from ..errors import Unauthorized

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_user_id(token: str, settings: Settings) -> str:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise Unauthorized()

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized()
    return str(user_id)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> str:
    """Resolve the calling user's id or reject the request."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized()
    return decode_user_id(credentials.credentials, settings)
