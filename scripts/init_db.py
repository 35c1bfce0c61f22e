import sys
from pathlib import Path

# Ensure project root is on sys.path when running this script directly
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv
from pymongo import ASCENDING
from pymongo.errors import OperationFailure, CollectionInvalid

from src.db.mongo import get_db


def _create_or_update(db, name: str, validator: dict) -> None:
    try:
        db.create_collection(name, validator=validator)
    except (OperationFailure, CollectionInvalid):
        # Already exists -> collMod (best-effort)
        try:
            db.command({"collMod": name, "validator": validator})
        except OperationFailure:
            pass


def ensure_credentials(db):
    validator = {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["_id", "value", "issuedAt", "expiresAt"],
            "properties": {
                "_id": {"bsonType": "string"},
                "value": {"bsonType": "string"},
                "issuedAt": {"bsonType": "date"},
                "expiresAt": {"bsonType": "date"},
                "scopesVerified": {"bsonType": "bool"},
            },
        }
    }
    _create_or_update(db, "credentials", validator)
    # _id is the owner id, so one credential per owner is enforced by the primary key.
    db["credentials"].create_index([("expiresAt", ASCENDING)], name="idx_expiresAt")


def ensure_presentations(db):
    validator = {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["documentId", "ownerId", "templateId", "createdAt"],
            "properties": {
                "documentId": {"bsonType": "string"},
                "ownerId": {"bsonType": "string"},
                "templateId": {"bsonType": "string"},
                "title": {"bsonType": "string"},
                "createdAt": {"bsonType": "date"},
                "exportUrls": {"bsonType": "object"},
            },
        }
    }
    _create_or_update(db, "presentations", validator)

    db["presentations"].create_index(
        [("ownerId", ASCENDING), ("createdAt", ASCENDING)],
        name="idx_owner_createdAt",
    )
    db["presentations"].create_index(
        [("ownerId", ASCENDING), ("documentId", ASCENDING)],
        unique=True,
        name="uniq_owner_documentId",
    )


def main():
    load_dotenv()
    db = get_db()
    ensure_credentials(db)
    ensure_presentations(db)
    print("Initialized MongoDB collections: credentials, presentations (validators + indexes)")


if __name__ == "__main__":
    main()
