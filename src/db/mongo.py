import os
from dotenv import load_dotenv
from functools import lru_cache
from typing import Optional

from pymongo import MongoClient
from pymongo.errors import ServerSelectionTimeoutError


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(name, default)


@lru_cache(maxsize=1)
def get_mongo_client() -> MongoClient:
    """Create (cached) MongoClient using env MONGODB_URI.

    Env:
      - MONGODB_URI: e.g., mongodb+srv://<user>:<pass>@<cluster>/?retryWrites=true&w=majority
      - MONGODB_TIMEOUT_MS (optional): server selection timeout in ms (default 5000)

    The client is tz-aware so stored lease timestamps come back as UTC datetimes.
    """
    load_dotenv()
    uri = _get_env("MONGODB_URI")
    if not uri:
        raise RuntimeError("MONGODB_URI is not set")

    timeout_ms = int(_get_env("MONGODB_TIMEOUT_MS", "5000"))
    client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
    # Validate connectivity early
    try:
        client.admin.command("ping")
    except ServerSelectionTimeoutError as e:
        raise RuntimeError(f"Cannot connect to MongoDB: {e}")
    return client


def get_db_name() -> str:
    return _get_env("MONGODB_DB_NAME", "slide_generation")


def get_db():
    return get_mongo_client()[get_db_name()]
