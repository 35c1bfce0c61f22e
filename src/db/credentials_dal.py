from datetime import datetime, timezone
from typing import Optional, Dict, Any

from .mongo import get_db


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_credentials_coll():
    return get_db()["credentials"]


def get_credential_doc(owner_id: str) -> Optional[Dict[str, Any]]:
    if not owner_id:
        return None
    return get_credentials_coll().find_one({"_id": owner_id})


def put_credential_doc(owner_id: str, value: str, issued_at: datetime, expires_at: datetime, scopes_verified: bool) -> None:
    """Insert or replace the single stored credential for an owner."""
    if not owner_id:
        raise ValueError("owner_id is required")
    get_credentials_coll().update_one(
        {"_id": owner_id},
        {
            "$set": {
                "value": value,
                "issuedAt": issued_at,
                "expiresAt": expires_at,
                "scopesVerified": bool(scopes_verified),
                "updated_at": _now_iso(),
            }
        },
        upsert=True,
    )


def delete_credential_doc(owner_id: str) -> bool:
    """Delete the owner's credential. Other owners' documents are never touched."""
    if not owner_id:
        return False
    res = get_credentials_coll().delete_one({"_id": owner_id})
    return res.deleted_count > 0
