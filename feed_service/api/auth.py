"""
Bearer-token authentication against Supabase Auth.

Routes that need the caller's identity depend on require_user_id:

    @router.get("")
    def handler(user_id: str = Depends(require_user_id)):
        ...
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from feed_service.database.supabase_client import get_supabase_client
from feed_service.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

security = HTTPBearer(
    scheme_name="Supabase JWT",
    description="Access token from Supabase Auth.",
    auto_error=False,
)


def require_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Resolve the bearer token to a user id, or fail with 401.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return get_supabase_client().get_auth_user_id(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
