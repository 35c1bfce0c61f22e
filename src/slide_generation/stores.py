"""Owner-scoped storage collaborators for credentials and generation history."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from src.db import credentials_dal, records_dal

from .models import Credential, GenerationRecord


class CredentialStore(Protocol):
    def get(self, owner_id: str) -> Optional[Credential]: ...

    def put(self, owner_id: str, credential: Credential) -> None: ...

    def delete(self, owner_id: str) -> None: ...


class RecordStore(Protocol):
    def append(self, owner_id: str, record: GenerationRecord) -> None: ...

    def list(self, owner_id: str) -> List[GenerationRecord]: ...

    def remove(self, owner_id: str, document_id: str) -> bool: ...


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class InMemoryCredentialStore:
    def __init__(self) -> None:
        self._items: Dict[str, Credential] = {}
        self._lock = threading.Lock()

    def get(self, owner_id: str) -> Optional[Credential]:
        with self._lock:
            return self._items.get(owner_id)

    def put(self, owner_id: str, credential: Credential) -> None:
        with self._lock:
            self._items[owner_id] = credential

    def delete(self, owner_id: str) -> None:
        with self._lock:
            self._items.pop(owner_id, None)


class MongoCredentialStore:
    def get(self, owner_id: str) -> Optional[Credential]:
        doc = credentials_dal.get_credential_doc(owner_id)
        if not doc or not doc.get("value"):
            return None
        return Credential(
            value=doc["value"],
            issued_at=_as_utc(doc["issuedAt"]),
            expires_at=_as_utc(doc["expiresAt"]),
            scopes_verified=bool(doc.get("scopesVerified", False)),
        )

    def put(self, owner_id: str, credential: Credential) -> None:
        credentials_dal.put_credential_doc(
            owner_id,
            credential.value,
            credential.issued_at,
            credential.expires_at,
            credential.scopes_verified,
        )

    def delete(self, owner_id: str) -> None:
        credentials_dal.delete_credential_doc(owner_id)


class InMemoryRecordStore:
    def __init__(self) -> None:
        self._items: Dict[str, List[GenerationRecord]] = {}
        self._lock = threading.Lock()

    def append(self, owner_id: str, record: GenerationRecord) -> None:
        with self._lock:
            self._items.setdefault(owner_id, []).append(record)

    def list(self, owner_id: str) -> List[GenerationRecord]:
        with self._lock:
            return list(self._items.get(owner_id, []))

    def remove(self, owner_id: str, document_id: str) -> bool:
        with self._lock:
            records = self._items.get(owner_id, [])
            kept = [r for r in records if r.document_id != document_id]
            self._items[owner_id] = kept
            return len(kept) != len(records)


class MongoRecordStore:
    def append(self, owner_id: str, record: GenerationRecord) -> None:
        records_dal.append_presentation(owner_id, record.model_dump(by_alias=True))

    def list(self, owner_id: str) -> List[GenerationRecord]:
        records: List[GenerationRecord] = []
        for doc in records_dal.list_presentations_for_user(owner_id):
            doc.pop("_id", None)
            doc["createdAt"] = _as_utc(doc["createdAt"])
            records.append(GenerationRecord.model_validate(doc))
        return records

    def remove(self, owner_id: str, document_id: str) -> bool:
        return records_dal.delete_presentation(owner_id, document_id)


__all__ = [
    "CredentialStore",
    "RecordStore",
    "InMemoryCredentialStore",
    "MongoCredentialStore",
    "InMemoryRecordStore",
    "MongoRecordStore",
]
