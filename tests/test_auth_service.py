from types import SimpleNamespace

import pytest
from supabase import AuthApiError

from access_control.core.exceptions import InternalError
from access_control.modules.auth.service import (
    TESTING_PRINCIPAL,
    StaticSessionResolver,
    SupabaseSessionResolver,
)


class FakeAuth:
    def __init__(self, users=None, error=None):
        self.users = users or {}
        self.error = error
        self.calls = 0

    def get_user(self, jwt=None):
        self.calls += 1
        if self.error:
            raise self.error
        user = self.users.get(jwt)
        return SimpleNamespace(user=user)


def make_user(user_id="U1", email="user@example.com", metadata=None):
    return SimpleNamespace(id=user_id, email=email, user_metadata=metadata)


def make_resolver(auth):
    return SupabaseSessionResolver(SimpleNamespace(auth=auth), cache={})


class TestSupabaseSessionResolver:
    def test_missing_credentials_skip_auth_call(self):
        auth = FakeAuth()
        assert make_resolver(auth).get_session(None) is None
        assert auth.calls == 0

    def test_resolves_principal_from_user(self):
        auth = FakeAuth(users={"tok": make_user(metadata={"full_name": "Dana Doe"})})
        principal = make_resolver(auth).get_session("tok")
        assert principal.id == "U1"
        assert principal.email == "user@example.com"
        assert principal.name == "Dana Doe"

    def test_unknown_user_is_no_session(self):
        assert make_resolver(FakeAuth()).get_session("tok") is None

    def test_invalid_token_is_no_session(self):
        auth = FakeAuth(error=AuthApiError("invalid JWT: unable to parse or verify signature", 401, "bad_jwt"))
        assert make_resolver(auth).get_session("tok") is None

    def test_missing_session_code_is_no_session(self):
        auth = FakeAuth(error=AuthApiError("Session from session_id claim in JWT does not exist", 400, "session_not_found"))
        assert make_resolver(auth).get_session("tok") is None

    def test_misconfigured_api_key_is_internal(self):
        auth = FakeAuth(error=RuntimeError("Invalid API key"))
        with pytest.raises(InternalError):
            make_resolver(auth).get_session("tok")

    def test_auth_server_error_is_internal(self):
        auth = FakeAuth(error=AuthApiError("Database error querying schema", 500, "unexpected_failure"))
        with pytest.raises(InternalError):
            make_resolver(auth).get_session("tok")

    def test_transport_failure_is_internal(self):
        auth = FakeAuth(error=ConnectionError("connection reset by peer"))
        with pytest.raises(InternalError):
            make_resolver(auth).get_session("tok")

    def test_caches_identity_per_token(self):
        auth = FakeAuth(users={"tok": make_user()})
        resolver = make_resolver(auth)
        resolver.get_session("tok")
        resolver.get_session("tok")
        assert auth.calls == 1

    def test_expired_cache_entry_is_refreshed(self):
        auth = FakeAuth(users={"tok": make_user()})
        resolver = SupabaseSessionResolver(SimpleNamespace(auth=auth), cache_ttl_sec=0, cache={})
        resolver.get_session("tok")
        resolver.get_session("tok")
        assert auth.calls == 2


class TestStaticSessionResolver:
    def test_any_credential_is_testing_principal(self):
        resolver = StaticSessionResolver()
        assert resolver.get_session("anything") == TESTING_PRINCIPAL
        assert TESTING_PRINCIPAL.id == "U0001"

    def test_no_credential_is_no_session(self):
        assert StaticSessionResolver().get_session("") is None


class EvictingCache(dict):
    """Drops every entry right after it is read, as a concurrent request would."""

    def get(self, key, default=None):
        value = super().get(key, default)
        self.clear()
        return value


class TestTokenCache:
    def test_entry_removed_concurrently_does_not_fail(self):
        auth = FakeAuth(users={"tok": make_user()})
        cache = EvictingCache()
        resolver = SupabaseSessionResolver(SimpleNamespace(auth=auth), cache_ttl_sec=0, cache=cache)
        resolver.get_session("tok")
        assert resolver.get_session("tok").id == "U1"
        assert auth.calls == 2

    def test_full_cache_evicts_expired_entries(self):
        auth = FakeAuth(users={"tok": make_user()})
        cache = {f"stale-{i}": (TESTING_PRINCIPAL, 0.0) for i in range(3)}
        resolver = SupabaseSessionResolver(SimpleNamespace(auth=auth), cache_max_size=3, cache=cache)
        resolver.get_session("tok")
        assert len(cache) == 1
        resolver.get_session("tok")
        assert auth.calls == 1

    def test_full_cache_of_live_entries_skips_caching(self):
        auth = FakeAuth(users={"tok": make_user()})
        far_future = float("inf")
        cache = {f"live-{i}": (TESTING_PRINCIPAL, far_future) for i in range(3)}
        resolver = SupabaseSessionResolver(SimpleNamespace(auth=auth), cache_max_size=3, cache=cache)
        assert resolver.get_session("tok").id == "U1"
        assert len(cache) == 3