"""Access-code gate and signed session tokens."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt

from .config import Settings, settings

logger = logging.getLogger(__name__)


class AccessCodeGate:
    """
    Exchanges a valid access code for a signed, expiring token.

    With no access codes configured the gate is open and every request
    passes.
    """

    def __init__(self, config: Settings = settings):
        self.config = config

    @property
    def enabled(self) -> bool:
        return bool(self.config.access_code_set)

    def is_valid_code(self, code: str) -> bool:
        return code.strip().upper() in self.config.access_code_set

    def issue_token(self, code: str) -> str:
        """Create a token for an access code.

        Raises:
            ValueError: If the code is not recognised.
        """
        if not self.is_valid_code(code):
            raise ValueError("Invalid access code")

        expires = datetime.now(timezone.utc) + timedelta(hours=self.config.token_ttl_hours)
        claims = {"sub": code.strip().upper(), "exp": expires}
        return jwt.encode(claims, self.config.jwt_secret, algorithm=self.config.jwt_algorithm)

    def validate_token(self, token: Optional[str]) -> bool:
        """
        Validate a session token.

        Args:
            token: JWT string from the session cookie

        Returns:
            True if valid, False otherwise
        """
        if not self.enabled:
            return True
        if not token:
            return False
        try:
            claims = jwt.decode(token, self.config.jwt_secret, algorithms=[self.config.jwt_algorithm])
        except JWTError as e:
            logger.warning(f"Rejected session token: {e}")
            return False
        # Revoked codes stop working even for unexpired tokens
        return claims.get("sub") in self.config.access_code_set

    def require_access(self, request: Request) -> None:
        """FastAPI dependency rejecting requests without a valid session cookie."""
        token = request.cookies.get(self.config.session_cookie_name)
        if not self.validate_token(token):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="A valid access code is required",
            )
