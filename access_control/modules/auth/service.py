import hashlib
import logging
import time
from abc import ABC, abstractmethod
from supabase import AuthApiError, Client
from access_control.core.exceptions import InternalError
from access_control.modules.auth.schemas import Principal
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# Supabase Auth error codes that mean the bearer token does not map to a live session
_NO_SESSION_CODES = frozenset({"bad_jwt", "no_authorization", "session_not_found", "session_expired", "user_not_found"})
_NO_SESSION_STATUSES = frozenset({401, 403})

TESTING_PRINCIPAL = Principal(id="U0001", email="johndoe@example.com", name="John Doe")

# Per-process cache of validated tokens; holds identities only, never roles or grants
_AUTH_PRINCIPAL_CACHE: Dict[str, Tuple[Principal, float]] = {}


def _is_no_session_error(error: AuthApiError) -> bool:
    return getattr(error, "status", None) in _NO_SESSION_STATUSES or getattr(error, "code", None) in _NO_SESSION_CODES


class SessionResolver(ABC):
    """Maps request credentials to a Principal, or None when there is no session."""

    @abstractmethod
    def get_session(self, credentials: Optional[str]) -> Optional[Principal]:
        ...


class SupabaseSessionResolver(SessionResolver):
    """Validates bearer JWTs with Supabase Auth. Uses a short TTL cache to reduce auth API calls."""

    def __init__(self, supabase: Client, cache_ttl_sec: int = 60, cache_max_size: int = 500,
                 cache: Optional[Dict[str, Tuple[Principal, float]]] = None):
        self.supabase = supabase
        self.cache_ttl_sec = cache_ttl_sec
        self.cache_max_size = cache_max_size
        self._cache = _AUTH_PRINCIPAL_CACHE if cache is None else cache

    def get_session(self, credentials: Optional[str]) -> Optional[Principal]:
        if not credentials:
            return None
        cache_key = hashlib.sha256(credentials.encode()).hexdigest()
        now = time.monotonic()
        entry = self._cache.get(cache_key)
        if entry is not None:
            principal, expiry = entry
            if now < expiry:
                return principal
            self._cache.pop(cache_key, None)
        try:
            user_response = self.supabase.auth.get_user(jwt=credentials)
        except Exception as e:
            if isinstance(e, AuthApiError) and _is_no_session_error(e):
                logger.info("Rejected bearer token: %s", e)
                return None
            logger.error(f"Supabase Auth lookup failed: {e}")
            raise InternalError("Session lookup failed") from e
        if not user_response or not user_response.user:
            return None
        user = user_response.user
        metadata = user.user_metadata or {}
        principal = Principal(
            id=user.id,
            email=user.email or "",
            name=metadata.get("full_name") or metadata.get("name"),
        )
        self._remember(cache_key, principal, now)
        return principal

    def _remember(self, cache_key: str, principal: Principal, now: float) -> None:
        if len(self._cache) >= self.cache_max_size:
            for key, (_, expiry) in list(self._cache.items()):
                if expiry <= now:
                    self._cache.pop(key, None)
        if len(self._cache) < self.cache_max_size:
            self._cache[cache_key] = (principal, now + self.cache_ttl_sec)


class StaticSessionResolver(SessionResolver):
    """Development/testing resolver: any non-empty credential is the fixed principal."""

    def __init__(self, principal: Principal = TESTING_PRINCIPAL):
        self.principal = principal

    def get_session(self, credentials: Optional[str]) -> Optional[Principal]:
        if not credentials:
            return None
        return self.principal

