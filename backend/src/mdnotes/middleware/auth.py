"""Authentication dependencies.

A request without an ``Authorization`` header is a guest request. A header
that is present but invalid is rejected rather than downgraded to guest.
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..security import get_user_id_from_token


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication resolving to the caller's user id.

    ``required=False`` lets requests without an ``Authorization`` header
    through as guests (``None``).
    """

    def __init__(self, required: bool = True):
        # errors are raised here so missing and bad credentials both answer 401
        super(JWTBearer, self).__init__(auto_error=False)
        self.required = required

    async def __call__(self, request: Request) -> Optional[UUID]:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if not credentials:
            if self.required or request.headers.get("Authorization"):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Not authenticated",
                    headers={"WWW-Authenticate": "Bearer"},
                )
            return None

        user_id = await get_user_id_from_token(credentials.credentials)
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return user_id


async def get_current_user_id(user_id: UUID = Depends(JWTBearer())) -> UUID:
    """Get current authenticated user ID."""
    return user_id


async def get_optional_user_id(
    user_id: Optional[UUID] = Depends(JWTBearer(required=False)),
) -> Optional[UUID]:
    """Get the caller's user ID, or None for guests."""
    return user_id
