import threading
import time
from collections import defaultdict, deque
from collections.abc import Callable

from fastapi import Depends, Header, HTTPException, Request, status

from .models import UserRole
from .schemas import Identity
from .security import AuthError, decode_access_token


def _parse_token(auth_header: str | None) -> str:
    if not auth_header:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")
    parts = auth_header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid auth scheme")
    return parts[1].strip()


def get_current_identity(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> Identity:
    token = _parse_token(authorization)
    try:
        payload = decode_access_token(token)
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return Identity(username=payload["username"], role=payload["role"])


def require_roles(*allowed_roles: UserRole) -> Callable:
    allowed = {role.value for role in allowed_roles}

    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: insufficient role")
        return identity

    return dependency


STAFF = (UserRole.ADMIN, UserRole.TEACHER)
EVERYONE = (UserRole.ADMIN, UserRole.TEACHER, UserRole.STUDENT, UserRole.PARENT)


class RateLimiter:
    """Sliding-window request counter keyed by client address."""

    def __init__(self, limit: int, window_seconds: int, message: str = "Too many requests, please try again later."):
        self.limit = limit
        self.window_seconds = window_seconds
        self.message = message
        self._hits: dict[str, deque] = defaultdict(deque)
        self._lock = threading.Lock()
        self._next_sweep = time.monotonic() + window_seconds

    def _sweep(self, now: float) -> None:
        # Drop clients with no hits left inside the window.
        expired = [key for key, window in self._hits.items() if not window or now - window[-1] >= self.window_seconds]
        for key in expired:
            del self._hits[key]
        self._next_sweep = now + self.window_seconds

    def hit(self, key: str) -> None:
        now = time.monotonic()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            window = self._hits[key]
            while window and now - window[0] >= self.window_seconds:
                window.popleft()
            if len(window) >= self.limit:
                raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=self.message)
            window.append(now)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def api_rate_limit(request: Request) -> None:
    limiter = getattr(request.app.state, "api_limiter", None)
    if limiter is not None:
        limiter.hit(_client_key(request))


def login_rate_limit(request: Request) -> None:
    limiter = getattr(request.app.state, "login_limiter", None)
    if limiter is not None:
        limiter.hit(_client_key(request))
