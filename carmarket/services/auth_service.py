# carmarket/services/auth_service.py
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from carmarket.configs import env, configs
from carmarket.exceptions import AuthenticationError
from carmarket.schemas.auth import Actor

access_token_expire_minutes = configs.get("jwt").get("access_token_expire_minutes")
algorithm = configs.get("jwt").get("algorithm")


class AuthService:
    """
    Reads the actor identity out of access tokens issued by the marketplace
    auth service. Tokens carry the user id as `sub` and the account `role`.
    """

    def __init__(self, secret_key: Optional[str] = None):
        self.secret_key = secret_key or env.get("SECRET_KEY")

    def create_access_token(
        self, data: dict, expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Creates a JWT access token.
        Args:
            data (dict): The payload to encode, e.g. {"sub": user_id, "role": "admin"}.
            expires_delta (Optional[timedelta]): Token lifetime. Defaults to the
                                                 configured jwt.access_token_expire_minutes.
        Returns:
            str: The encoded JWT token.
        """
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=access_token_expire_minutes)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.secret_key, algorithm=algorithm)

    def decode_access_token(self, token: str) -> dict:
        """
        Decodes and validates a JWT access token.
        Raises AuthenticationError if the token is invalid or expired.
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[algorithm])
        except JWTError:
            raise AuthenticationError()

    def get_actor_from_token(self, token: str) -> Actor:
        payload = self.decode_access_token(token)
        if payload.get("sub") is None or payload.get("role") is None:
            raise AuthenticationError()
        try:
            return Actor(id=payload["sub"], role=payload["role"])
        except PydanticValidationError:
            raise AuthenticationError()
