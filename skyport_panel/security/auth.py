"""
Identity tokens for panel operators.

The panel never stores or compares passwords. Operators present a signed
JWT whose claims carry their username and admin flag; this module issues
and validates those tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

import jwt
import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger(__name__)


class Identity(BaseModel):
    """Authenticated caller, as exposed to route handlers.

    Attributes:
        username: Operator login name
        admin: Whether the operator may use the admin API
    """

    username: str
    admin: bool = False


class TokenPayload(BaseModel):
    """JWT token payload model.

    Attributes:
        sub: Subject (operator username)
        admin: Admin flag
        iss: Issuer
        iat: Issued at timestamp
        exp: Expiration timestamp
        jti: JWT ID (unique token identifier)
    """

    sub: str = Field(..., description="Operator username (subject)")
    admin: bool = Field(default=False, description="Admin privileges")
    iss: str = Field(default="skyport-panel", description="Issuer")
    iat: int = Field(..., description="Issued at (Unix timestamp)")
    exp: int = Field(..., description="Expiration (Unix timestamp)")
    jti: str = Field(default_factory=lambda: str(uuid4()), description="JWT ID")

    def to_identity(self) -> Identity:
        return Identity(username=self.sub, admin=self.admin)


class AuthManager:
    """Issues and validates operator identity tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        token_expiry_minutes: int = 60,
    ) -> None:
        """Initialize authentication manager.

        Args:
            secret_key: Secret key for signing tokens
            algorithm: JWT algorithm (default: HS256)
            token_expiry_minutes: Token expiration in minutes
        """
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_expiry_minutes = token_expiry_minutes

    def generate_token(self, username: str, admin: bool = False) -> str:
        """Generate a signed token for an operator.

        Args:
            username: Operator login name
            admin: Grant admin privileges

        Returns:
            JWT token string
        """
        now = datetime.now(timezone.utc)
        expiry = now + timedelta(minutes=self.token_expiry_minutes)

        payload = TokenPayload(
            sub=username,
            admin=admin,
            iat=int(now.timestamp()),
            exp=int(expiry.timestamp()),
        )

        token = jwt.encode(
            payload.model_dump(),
            self.secret_key,
            algorithm=self.algorithm,
        )

        logger.info(
            "token_generated",
            username=username,
            admin=admin,
            expiry=expiry.isoformat(),
        )

        return token

    def validate_token(self, token: str) -> Optional[TokenPayload]:
        """Validate JWT token.

        Args:
            token: JWT token string

        Returns:
            TokenPayload if valid, None otherwise
        """
        try:
            payload = jwt.decode(
                token, self.secret_key, algorithms=[self.algorithm]
            )
            token_data = TokenPayload(**payload)

        except jwt.ExpiredSignatureError:
            logger.warning("token_expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("token_invalid", error=str(e))
            return None

        logger.debug("token_validated", username=token_data.sub)
        return token_data

    def identify(self, token: Optional[str]) -> Optional[Identity]:
        """Resolve a raw token to an Identity, or None."""
        if not token:
            return None
        payload = self.validate_token(token)
        return payload.to_identity() if payload else None
