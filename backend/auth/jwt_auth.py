"""
JWT Authentication

Tokens are minted by the identity provider integration (or by invite
acceptance) and carry the user id in ``sub``.
"""

import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from models.user import User
from database import get_db
from .models import TokenData, AuthenticatedPrincipal

logger = logging.getLogger(__name__)

# JWT Configuration
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

# Security scheme
security = HTTPBearer(auto_error=False)


class JWTAuthenticator:
    """JWT Authentication handler"""

    def __init__(self, secret_key: str = SECRET_KEY, algorithm: str = ALGORITHM):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create JWT access token.

        Args:
            data: Token payload data
            expires_delta: Token expiration time

        Returns:
            JWT token string
        """
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> TokenData:
        """
        Verify and decode JWT token.

        Raises:
            HTTPException: If token is invalid
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise _credentials_exception()

        user_id = payload.get("sub")
        if user_id is None:
            raise _credentials_exception()

        return TokenData(user_id=user_id, email=payload.get("email"))


# Global authenticator instance
authenticator = JWTAuthenticator()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create access token using global authenticator"""
    return authenticator.create_access_token(data, expires_delta)


def issue_token_for(user: User) -> str:
    """Access token for a user row"""
    return create_access_token({"sub": str(user.id), "email": user.email})


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        HTTPException: If authentication fails
    """
    if credentials is None:
        raise _credentials_exception()

    token_data = authenticator.verify_token(credentials.credentials)

    try:
        user_id = UUID(token_data.user_id)
    except ValueError:
        raise _credentials_exception()

    user = db.get(User, user_id)
    if user is None:
        logger.warning(f"Token subject {user_id} has no user record")
        raise _credentials_exception()

    return user


async def get_current_principal(current_user: User = Depends(get_current_user)) -> AuthenticatedPrincipal:
    """Typed view of the caller, passed to guards and handlers"""
    return AuthenticatedPrincipal.model_validate(current_user)
