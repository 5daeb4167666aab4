# carmarket/dependencies/auth.py
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from carmarket.exceptions import AuthenticationError, AuthorizationError
from carmarket.schemas.auth import Actor, UserRole
from carmarket.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)

auth_service = AuthService()


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Actor:
    """
    Dependency that decodes the bearer token into the acting identity.
    Raises AuthenticationError when the header is missing or the token is invalid.
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    return auth_service.get_actor_from_token(credentials.credentials)


def require_admin(action: str):
    """Builds a dependency that only lets admins through to `action` categories."""

    async def dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role != UserRole.ADMIN:
            raise AuthorizationError(f"Only admins can {action} categories.")
        return actor

    return dependency
