import asyncio
import secrets
import time
from typing import Callable, MutableMapping

from passlib.context import CryptContext

from app.core.dto.auth import AuthCheckModel
from app.infrastructure.config.config import APP_CONFIG, AdminConfig
from app.infrastructure.errors.auth_errors import InvalidCredentials, MissingCredentials
from app.infrastructure.logging import get_logger


logger = get_logger(__name__)
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

SESSION_ID_KEY = "sid"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # unknown or malformed hash
        return False


class SessionAuthenticator:
    """Grants and revokes the admin role for a browser session.

    The signed cookie only carries a random session id, the authenticated
    state itself lives here, so logging out or re-logging in invalidates
    any copy of the old cookie. Entries older than `session_max_age_seconds`
    are dropped, same lifetime as the cookie.
    """

    def __init__(
        self,
        config: AdminConfig,
        password_verifier: Callable[[str, str], bool] = verify_password,
        session_max_age_seconds: float = APP_CONFIG.SESSION_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self._verify_password = password_verifier
        self._session_max_age = session_max_age_seconds
        self._clock = clock
        # sid -> (username, issued at)
        self._sessions: dict[str, tuple[str, float]] = {}

    @property
    def active_session_count(self) -> int:
        return len(self._sessions)

    async def login(self, session: MutableMapping, username: str | None, password: str | None) -> None:
        if not username or not password:
            raise MissingCredentials()

        clean_username = username.strip()
        valid = (
            secrets.compare_digest(clean_username.encode(), self.config.USERNAME.encode())
            and self._verify_password(password, self.config.PASSWORD_HASH)
        )
        if not valid:
            # same delay for unknown user and wrong password
            await asyncio.sleep(self.config.LOGIN_FAILURE_DELAY_SECONDS)
            logger.warning("admin_login_failed")
            raise InvalidCredentials()

        self._prune_expired()
        self._regenerate(session)
        self._sessions[session[SESSION_ID_KEY]] = (clean_username, self._clock())
        logger.info("admin_login_succeeded", username=clean_username)

    def logout(self, session: MutableMapping) -> None:
        session_id = session.get(SESSION_ID_KEY)
        if session_id:
            self._sessions.pop(session_id, None)
        session.clear()
        logger.info("admin_logged_out")

    def current_username(self, session: MutableMapping) -> str | None:
        session_id = session.get(SESSION_ID_KEY)
        if not session_id:
            return None
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        username, issued_at = entry
        if self._is_expired(issued_at):
            self._sessions.pop(session_id, None)
            return None
        return username

    def is_authenticated(self, session: MutableMapping) -> bool:
        return self.current_username(session) is not None

    def auth_status(self, session: MutableMapping) -> AuthCheckModel:
        username = self.current_username(session)
        return AuthCheckModel(is_authenticated=username is not None, username=username)

    def _is_expired(self, issued_at: float) -> bool:
        return self._clock() - issued_at >= self._session_max_age

    def _prune_expired(self) -> None:
        expired = [sid for sid, (_, issued_at) in self._sessions.items() if self._is_expired(issued_at)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("admin_sessions_expired", count=len(expired))

    def _regenerate(self, session: MutableMapping) -> None:
        old_session_id = session.get(SESSION_ID_KEY)
        if old_session_id:
            self._sessions.pop(old_session_id, None)
        session.clear()
        session[SESSION_ID_KEY] = secrets.token_urlsafe(32)
