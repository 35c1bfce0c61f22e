from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .models import DEFAULT_PLACEHOLDERS, INDEXED_PLACEHOLDERS, SLIDES_BASE_URL, PlaceholderSet

DEFAULT_TEMPLATE_ID = "1Ggmb8DZM02xwKqNL4Yht7-ysoLHNgWc0Q0VySeYfxSE"
DEFAULT_TEMPLATE_CAPACITY = 5
DEFAULT_TIMEOUT_SECONDS = 30.0

REQUIRED_SCOPE = "https://www.googleapis.com/auth/presentations"
TOKENINFO_URL = "https://www.googleapis.com/oauth2/v1/tokeninfo"

_TRUTHY = {"1", "true", "yes", "on"}


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(name, default)


def _get_bool(name: str, default: bool = False) -> bool:
    raw = _get_env(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class GenerationSettings:
    template_id: str = DEFAULT_TEMPLATE_ID
    # Slide count of the template including its title slide.
    template_capacity: int = DEFAULT_TEMPLATE_CAPACITY
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    base_url: str = SLIDES_BASE_URL
    indexed_placeholders: bool = False
    delete_orphaned_copies: bool = False

    @property
    def placeholders(self) -> PlaceholderSet:
        return INDEXED_PLACEHOLDERS if self.indexed_placeholders else DEFAULT_PLACEHOLDERS

    @classmethod
    def from_env(cls) -> "GenerationSettings":
        """Build settings from the environment (and a local .env file).

        Env:
          - SLIDES_TEMPLATE_ID: default template presentation id
          - SLIDES_TEMPLATE_CAPACITY: slides in the template, title slide included (default 5)
          - GOOGLE_API_TIMEOUT_SECONDS: per-request timeout for Google calls (default 30)
          - SLIDES_BASE_URL: base for edit/view/export links
          - SLIDES_INDEXED_PLACEHOLDERS: use {{slide_title_N}} style placeholders
          - SLIDES_DELETE_ORPHANED_COPIES: delete the copy when the content update fails
        """
        load_dotenv()
        capacity = int(_get_env("SLIDES_TEMPLATE_CAPACITY", str(DEFAULT_TEMPLATE_CAPACITY)))
        if capacity < 1:
            raise ValueError("SLIDES_TEMPLATE_CAPACITY must be at least 1")
        return cls(
            template_id=_get_env("SLIDES_TEMPLATE_ID", DEFAULT_TEMPLATE_ID) or DEFAULT_TEMPLATE_ID,
            template_capacity=capacity,
            request_timeout=float(_get_env("GOOGLE_API_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))),
            base_url=_get_env("SLIDES_BASE_URL", SLIDES_BASE_URL) or SLIDES_BASE_URL,
            indexed_placeholders=_get_bool("SLIDES_INDEXED_PLACEHOLDERS"),
            delete_orphaned_copies=_get_bool("SLIDES_DELETE_ORPHANED_COPIES"),
        )
