"""
Password hashing and access token utilities.

Passwords are hashed with bcrypt; access tokens are HS256 JWTs carrying
the user id as subject and the role at issue time.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from frontdesk.config.logging import get_logger
from frontdesk.config.settings import settings
from frontdesk.core.exceptions import AuthenticationError

logger = get_logger(__name__)


class PasswordHasher:
    """
    Handle password hashing and verification using bcrypt.
    """

    MIN_ROUNDS = 4
    MAX_ROUNDS = 31

    def __init__(self, rounds: int = 12):
        if not (self.MIN_ROUNDS <= rounds <= self.MAX_ROUNDS):
            raise ValueError(
                f"Rounds must be between {self.MIN_ROUNDS} and {self.MAX_ROUNDS}, got {rounds}"
            )
        self.rounds = rounds

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Password cannot be empty")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def verify(self, password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False


class TokenManager:
    """Create and decode JWT access tokens"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        self.secret_key = secret_key or settings.SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expire_minutes = expire_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_access_token(self, subject: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token"""
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        to_encode = {
            "sub": subject,
            "role": role,
            "exp": expire,
            "iat": now,
            "type": "access",
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate JWT token.

        Raises:
            AuthenticationError: If the token is invalid, expired or not an access token
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise AuthenticationError(f"Invalid token: {e}") from e
        if payload.get("type") != "access" or not payload.get("sub"):
            raise AuthenticationError("Invalid token payload")
        return payload


password_hasher = PasswordHasher(rounds=settings.PASSWORD_BCRYPT_ROUNDS)
token_manager = TokenManager()
