"""Bearer token issuing and verification.

Tokens are stateless HS256 JWTs carrying the user id as ``sub``. There is no
revocation store: a token stays valid until ``exp`` even after logout.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt

from bulkmod.config import Settings, settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class InvalidTokenError(Exception):
    """Raised for any token that fails verification."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired token")


class TokenIssuer:
    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=24),
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, subject: int) -> str:
        """Sign a token for ``subject`` expiring ``expires_in`` from now."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(subject),
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Return the user id encoded in ``token``.

        Raises:
            InvalidTokenError: if the token is malformed, expired, signed with
                another key, or carries no integer subject.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return int(payload["sub"])
        except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
            logger.info("Rejected bearer token: %s", type(exc).__name__)
            raise InvalidTokenError() from exc


def extract_bearer(header: str | None) -> str | None:
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX):]


def issuer_from_settings(config: Settings = settings) -> TokenIssuer:
    return TokenIssuer(
        config.jwt_secret,
        algorithm=config.jwt_algorithm,
        expires_in=timedelta(hours=config.token_expire_hours),
    )
