from typing import Dict, Any, List

from .mongo import get_db


def get_presentations_coll():
    return get_db()["presentations"]


def append_presentation(owner_id: str, doc: Dict[str, Any]) -> None:
    if not owner_id:
        raise ValueError("owner_id is required")
    if not doc.get("documentId"):
        raise ValueError("documentId is required")
    payload = dict(doc)
    payload["ownerId"] = owner_id
    get_presentations_coll().insert_one(payload)


def list_presentations_for_user(owner_id: str, limit: int = 0, skip: int = 0) -> List[Dict[str, Any]]:
    """Return the owner's generated presentations, oldest first."""
    cursor = (
        get_presentations_coll()
        .find({"ownerId": owner_id}, {"_id": 0})
        .sort("createdAt", 1)
        .skip(int(skip))
        .limit(int(limit))
    )
    return list(cursor)


def delete_presentation(owner_id: str, document_id: str) -> bool:
    """Delete a history entry by documentId scoped to owner.

    Returns True if a document was deleted, False otherwise.
    """
    if not owner_id or not document_id:
        return False
    res = get_presentations_coll().delete_one({"ownerId": owner_id, "documentId": document_id})
    return res.deleted_count > 0
