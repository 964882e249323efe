import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .security_utils import verify_admin_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

UNAUTHORIZED = "Unauthorized - Invalid or expired token"


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Resolve the admin session from the bearer token or reject with 401"""
    if not credentials or not credentials.credentials:
        logger.warning("⚠️ Admin request without bearer token")
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)

    payload = verify_admin_token(credentials.credentials)
    if not payload:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)

    return payload
