"""Lifecycle of the short-lived Google API access token, per owner.

The token is stored with a 50 minute lease measured from the moment it was
saved. That is shorter than Google's real lifetime, so "expiring soon"
warnings and local expiry always fire before Google rejects the token.
"""

from __future__ import annotations

import logging
import math
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Protocol

import requests

from .errors import CredentialExpired, RemoteUnreachable, ValidationError
from .models import EXPIRY_WARNING_WINDOW, Credential, TokenInfo, TokenState, TokenStatus
from .settings import DEFAULT_TIMEOUT_SECONDS, REQUIRED_SCOPE, TOKENINFO_URL
from .stores import CredentialStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIntrospector(Protocol):
    def introspect(self, token: str) -> TokenInfo: ...


class GoogleTokenIntrospector:
    """Ask Google's tokeninfo endpoint whether a token is live and what it may do."""

    def __init__(
        self,
        *,
        url: str = TOKENINFO_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def introspect(self, token: str) -> TokenInfo:
        try:
            response = self.session.get(self.url, params={"access_token": token}, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteUnreachable("validate the access token", str(exc)) from exc

        if not response.ok:
            return TokenInfo(valid=False, status_code=response.status_code)
        try:
            payload = response.json()
        except ValueError:
            logger.warning("tokeninfo returned a non-JSON body (status %s)", response.status_code)
            return TokenInfo(valid=False, status_code=response.status_code)
        scopes = tuple((payload.get("scope") or "").split())
        return TokenInfo(valid=True, scopes=scopes, status_code=response.status_code)


class TokenManager:
    def __init__(
        self,
        store: CredentialStore,
        introspector: TokenIntrospector,
        *,
        clock: Clock = utcnow,
        required_scope: str = REQUIRED_SCOPE,
    ) -> None:
        self.store = store
        self.introspector = introspector
        self.clock = clock
        self.required_scope = required_scope
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, owner_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(owner_id)
            if lock is None:
                lock = self._locks[owner_id] = threading.RLock()
            return lock

    def load(self, owner_id: str) -> Optional[Credential]:
        """Restore the owner's saved token.

        Raises CredentialExpired (after clearing it) instead of handing back a
        token whose lease has run out.
        """
        with self._lock_for(owner_id):
            credential = self.store.get(owner_id)
            if credential is None:
                return None
            if credential.is_expired(self.clock()):
                self.store.delete(owner_id)
                logger.info("Stored token for %s expired at %s; cleared", owner_id, credential.expires_at.isoformat())
                raise CredentialExpired()
            return credential

    def save(self, owner_id: str, raw_value: str) -> Credential:
        value = (raw_value or "").strip()
        if not owner_id:
            raise ValidationError("owner_id is required to save a token")
        if not value:
            raise ValidationError("Please enter a Google API access token")
        with self._lock_for(owner_id):
            credential = Credential.issue(value, self.clock())
            self.store.put(owner_id, credential)
        logger.info("Saved token for %s, expires at %s", owner_id, credential.expires_at.isoformat())
        return credential

    def clear(self, owner_id: str) -> None:
        with self._lock_for(owner_id):
            self.store.delete(owner_id)

    def current(self, owner_id: str) -> Optional[Credential]:
        return self.store.get(owner_id)

    def validate(self, owner_id: str) -> bool:
        """Check the token locally, then against Google.

        Any invalidity found here clears the stored token: an expired lease, a
        rejected token, or a token without the Slides scope. Transport failures
        raise RemoteUnreachable and leave the token alone.
        """
        with self._lock_for(owner_id):
            credential = self.store.get(owner_id)
            if credential is None:
                return False
            if credential.is_expired(self.clock()):
                self.store.delete(owner_id)
                return False

            info = self.introspector.introspect(credential.value)
            if not info.valid:
                logger.info("Token for %s rejected by Google (status %s); cleared", owner_id, info.status_code)
                self.store.delete(owner_id)
                return False
            if self.required_scope not in info.scopes:
                logger.warning("Token for %s lacks the %s scope; cleared", owner_id, self.required_scope)
                self.store.delete(owner_id)
                return False

            if not credential.scopes_verified:
                self.store.put(
                    owner_id,
                    Credential(
                        value=credential.value,
                        issued_at=credential.issued_at,
                        expires_at=credential.expires_at,
                        scopes_verified=True,
                    ),
                )
            return True

    def time_remaining(self, owner_id: str) -> Optional[int]:
        """Whole minutes left on the lease, or None without a token."""
        credential = self.store.get(owner_id)
        if credential is None:
            return None
        seconds = (credential.expires_at - self.clock()).total_seconds()
        return max(0, math.floor(seconds / 60))

    def is_expiring_soon(self, owner_id: str) -> bool:
        credential = self.store.get(owner_id)
        if credential is None:
            return False
        now = self.clock()
        if credential.is_expired(now):
            return False
        return credential.expires_at <= now + EXPIRY_WARNING_WINDOW

    def status(self, owner_id: str) -> TokenStatus:
        credential = self.store.get(owner_id)
        if credential is None:
            return TokenStatus(state=TokenState.ABSENT)
        now = self.clock()
        remaining = self.time_remaining(owner_id)
        if credential.is_expired(now):
            state = TokenState.EXPIRED
        elif self.is_expiring_soon(owner_id):
            state = TokenState.EXPIRING_SOON
        else:
            state = TokenState.ACTIVE
        return TokenStatus(state=state, expires_at=credential.expires_at, minutes_remaining=remaining)


__all__ = ["GoogleTokenIntrospector", "TokenIntrospector", "TokenManager", "utcnow"]
