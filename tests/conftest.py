from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from src.slide_generation.models import TokenInfo
from src.slide_generation.settings import REQUIRED_SCOPE
from src.slide_generation.stores import InMemoryCredentialStore, InMemoryRecordStore
from src.slide_generation.token_manager import TokenManager

START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)


class FakeIntrospector:
    def __init__(self, info: Optional[TokenInfo] = None, error: Optional[Exception] = None) -> None:
        self.info = info or TokenInfo(valid=True, scopes=(REQUIRED_SCOPE,), status_code=200)
        self.error = error
        self.calls: List[str] = []

    def introspect(self, token: str) -> TokenInfo:
        self.calls.append(token)
        if self.error is not None:
            raise self.error
        return self.info


class FakeCopyClient:
    def __init__(self, document_id: str = "new-doc-1", error: Optional[Exception] = None) -> None:
        self.document_id = document_id
        self.error = error
        self.calls: List[tuple] = []
        self.deleted: List[str] = []

    def copy(self, template_id: str, new_title: str, access_token: str) -> str:
        self.calls.append((template_id, new_title, access_token))
        if self.error is not None:
            raise self.error
        return self.document_id

    def delete(self, document_id: str, access_token: str) -> bool:
        self.deleted.append(document_id)
        return True


class FakeSlidesClient:
    """Records batchUpdate calls; ``errors`` maps call number (0-based) to an exception."""

    def __init__(self, errors: Optional[Dict[int, Exception]] = None) -> None:
        self.errors = errors or {}
        self.calls: List[tuple] = []

    def batch_update(self, presentation_id: str, requests: List[dict], access_token: str) -> dict:
        index = len(self.calls)
        self.calls.append((presentation_id, list(requests), access_token))
        if index in self.errors:
            raise self.errors[index]
        return {"presentationId": presentation_id, "replies": [{} for _ in requests]}


class FailingRecordStore(InMemoryRecordStore):
    def __init__(self) -> None:
        super().__init__()
        self.attempts = 0

    def append(self, owner_id, record) -> None:
        self.attempts += 1
        raise RuntimeError("history database unavailable")


class _Result:
    def __init__(self, deleted_count: int = 0) -> None:
        self.deleted_count = deleted_count


class _Cursor:
    def __init__(self, docs: List[Dict[str, Any]]) -> None:
        self.docs = docs

    def sort(self, key: str, direction: int) -> "_Cursor":
        self.docs = sorted(self.docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def skip(self, count: int) -> "_Cursor":
        self.docs = self.docs[count:]
        return self

    def limit(self, count: int) -> "_Cursor":
        if count:
            self.docs = self.docs[:count]
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """Just enough of a pymongo collection for the DAL modules."""

    def __init__(self) -> None:
        self.docs: List[Dict[str, Any]] = []

    @staticmethod
    def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
        return all(doc.get(k) == v for k, v in query.items())

    @staticmethod
    def _project(doc: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
        out = dict(doc)
        if projection and projection.get("_id") == 0:
            out.pop("_id", None)
        return out

    def find_one(self, query, projection=None):
        for doc in self.docs:
            if self._matches(doc, query):
                return self._project(doc, projection)
        return None

    def find(self, query, projection=None):
        return _Cursor([self._project(d, projection) for d in self.docs if self._matches(d, query)])

    def insert_one(self, doc):
        self.docs.append(dict(doc))

    def update_one(self, query, update, upsert=False):
        for doc in self.docs:
            if self._matches(doc, query):
                doc.update(update.get("$set", {}))
                return
        if upsert:
            doc = dict(query)
            doc.update(update.get("$set", {}))
            self.docs.append(doc)

    def delete_one(self, query):
        for i, doc in enumerate(self.docs):
            if self._matches(doc, query):
                del self.docs[i]
                return _Result(1)
        return _Result(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def introspector() -> FakeIntrospector:
    return FakeIntrospector()


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def token_manager(credential_store, introspector, clock) -> TokenManager:
    return TokenManager(credential_store, introspector, clock=clock)

