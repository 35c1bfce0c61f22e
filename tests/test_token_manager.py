from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from conftest import FakeIntrospector, START
from src.slide_generation.errors import CredentialExpired, RemoteUnreachable, ValidationError
from src.slide_generation.models import TokenInfo, TokenState
from src.slide_generation.token_manager import TokenManager

OWNER = "user-1"


def test_save_sets_fifty_minute_lease(token_manager, clock):
    credential = token_manager.save(OWNER, "  ya29.token  ")

    assert credential.value == "ya29.token"
    assert credential.issued_at == START
    assert credential.expires_at - credential.issued_at == timedelta(minutes=50)
    assert credential.scopes_verified is False
    assert token_manager.time_remaining(OWNER) == 50
    assert token_manager.is_expiring_soon(OWNER) is False


def test_save_rejects_empty_token(token_manager):
    with pytest.raises(ValidationError):
        token_manager.save(OWNER, "   ")


def test_expiring_soon_at_forty_five_minutes(token_manager, clock):
    token_manager.save(OWNER, "tok")
    clock.advance(minutes=45)

    assert token_manager.is_expiring_soon(OWNER) is True
    assert token_manager.time_remaining(OWNER) == 5
    assert token_manager.status(OWNER).state == TokenState.EXPIRING_SOON


def test_time_remaining_floors_partial_minutes(token_manager, clock):
    token_manager.save(OWNER, "tok")
    clock.advance(minutes=10, seconds=30)

    assert token_manager.time_remaining(OWNER) == 39


def test_time_remaining_is_none_without_token(token_manager):
    assert token_manager.time_remaining(OWNER) is None
    assert token_manager.is_expiring_soon(OWNER) is False
    assert token_manager.status(OWNER).state == TokenState.ABSENT


def test_load_returns_saved_credential(token_manager, clock):
    saved = token_manager.save(OWNER, "tok")
    clock.advance(minutes=20)

    assert token_manager.load(OWNER) == saved


def test_load_after_lease_clears_and_signals_expiry(token_manager, credential_store, clock):
    token_manager.save(OWNER, "tok")
    clock.advance(minutes=50)

    with pytest.raises(CredentialExpired):
        token_manager.load(OWNER)
    assert credential_store.get(OWNER) is None
    assert token_manager.load(OWNER) is None


def test_validate_absent_makes_no_remote_call(token_manager, introspector):
    assert token_manager.validate(OWNER) is False
    assert introspector.calls == []


def test_validate_after_lease_ignores_remote_answer(token_manager, introspector, credential_store, clock):
    token_manager.save(OWNER, "tok")
    clock.advance(minutes=55)

    assert token_manager.validate(OWNER) is False
    assert introspector.calls == []
    assert credential_store.get(OWNER) is None


def test_validate_success_keeps_expiry_and_marks_scopes(token_manager, introspector, credential_store):
    saved = token_manager.save(OWNER, "tok")

    assert token_manager.validate(OWNER) is True
    assert introspector.calls == ["tok"]
    stored = credential_store.get(OWNER)
    assert stored.expires_at == saved.expires_at
    assert stored.scopes_verified is True


def test_validate_rejected_token_clears(credential_store, clock):
    introspector = FakeIntrospector(TokenInfo(valid=False, status_code=400))
    manager = TokenManager(credential_store, introspector, clock=clock)
    manager.save(OWNER, "tok")

    assert manager.validate(OWNER) is False
    assert credential_store.get(OWNER) is None


def test_validate_missing_scope_clears(credential_store, clock):
    introspector = FakeIntrospector(
        TokenInfo(valid=True, scopes=("https://www.googleapis.com/auth/presentations.readonly",), status_code=200)
    )
    manager = TokenManager(credential_store, introspector, clock=clock)
    manager.save(OWNER, "tok")

    assert manager.validate(OWNER) is False
    assert credential_store.get(OWNER) is None


def test_validate_transport_failure_keeps_token(credential_store, clock):
    introspector = FakeIntrospector(error=RemoteUnreachable("validate the access token", "timed out"))
    manager = TokenManager(credential_store, introspector, clock=clock)
    manager.save(OWNER, "tok")

    with pytest.raises(RemoteUnreachable):
        manager.validate(OWNER)
    assert credential_store.get(OWNER) is not None


def test_clear_only_touches_one_owner(token_manager, credential_store):
    token_manager.save(OWNER, "tok-1")
    token_manager.save("user-2", "tok-2")

    token_manager.clear(OWNER)

    assert credential_store.get(OWNER) is None
    assert credential_store.get("user-2").value == "tok-2"


def test_status_reports_expired_before_cleanup(token_manager, clock):
    token_manager.save(OWNER, "tok")
    clock.advance(minutes=51)

    status = token_manager.status(OWNER)
    assert status.state == TokenState.EXPIRED
    assert status.minutes_remaining == 0
    assert status.has_token is False


class _LockCheckingIntrospector(FakeIntrospector):
    """Runs ``during`` in another thread while validate holds the owner's lock."""

    def __init__(self, during) -> None:
        super().__init__()
        self.during = during
        self.blocked = None
        self.thread = None

    def introspect(self, token: str) -> TokenInfo:
        self.thread = threading.Thread(target=self.during)
        self.thread.start()
        self.thread.join(timeout=0.2)
        self.blocked = self.thread.is_alive()
        return super().introspect(token)


def test_validate_serializes_same_owner_writes(credential_store, clock):
    manager = None
    introspector = _LockCheckingIntrospector(lambda: manager.clear(OWNER))
    manager = TokenManager(credential_store, introspector, clock=clock)
    manager.save(OWNER, "tok")

    assert manager.validate(OWNER) is True
    introspector.thread.join(timeout=2)

    assert introspector.blocked is True
    assert manager.current(OWNER) is None


def test_validate_does_not_block_other_owners(credential_store, clock):
    manager = None
    introspector = _LockCheckingIntrospector(lambda: manager.save("user-2", "other"))
    manager = TokenManager(credential_store, introspector, clock=clock)
    manager.save(OWNER, "tok")

    assert manager.validate(OWNER) is True

    assert introspector.blocked is False
    assert manager.current("user-2").value == "other"
    assert manager.current(OWNER).scopes_verified is True
