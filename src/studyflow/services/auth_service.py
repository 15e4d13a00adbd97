from dataclasses import dataclass
import hmac
import logging

from studyflow.config.settings import settings

logger = logging.getLogger(__name__)


class AuthServiceError(Exception):
    pass


@dataclass
class AuthResult:
    username: str


class LocalAuthService:
    """Checks a login against the single configured credential pair."""

    def __init__(self, username: str, password: str) -> None:
        if not username:
            raise AuthServiceError("Missing STUDYFLOW_USERNAME in environment")
        self.username = username
        self.password = password

    @classmethod
    def from_settings(cls) -> "LocalAuthService":
        return cls(settings.username, settings.password)

    def sign_in(self, username: str, password: str) -> AuthResult:
        username = (username or "").strip()
        if not username or not password:
            raise AuthServiceError("Username and password are required.")

        user_ok = hmac.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        password_ok = hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        if not (user_ok and password_ok):
            logger.info("Rejected sign in for %s", username)
            raise AuthServiceError("Incorrect username or password.")

        return AuthResult(username=username)
