from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Conservative margin under Google's 60 minute access-token lifetime.
LEASE = timedelta(minutes=50)
EXPIRY_WARNING_WINDOW = timedelta(minutes=5)

SLIDES_BASE_URL = "https://docs.google.com/presentation/d"


class ExportFormat(str, Enum):
    PDF = "pdf"
    PPTX = "pptx"
    JPEG = "jpeg"
    PNG = "png"
    SVG = "svg"
    TXT = "txt"


class TokenState(str, Enum):
    ABSENT = "absent"
    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


@dataclass(frozen=True)
class PlaceholderSet:
    presentation_title: str = "{{PRESENTATION_TITLE}}"
    slide_title: str = "{{slide_title}}"
    slide_content: str = "{{slide_content}}"
    indexed: bool = False

    def title_for(self, slide_number: int) -> str:
        if not self.indexed:
            return self.slide_title
        return f"{self.slide_title[:-2]}_{slide_number}}}}}"

    def content_for(self, slide_number: int) -> str:
        if not self.indexed:
            return self.slide_content
        return f"{self.slide_content[:-2]}_{slide_number}}}}}"


DEFAULT_PLACEHOLDERS = PlaceholderSet()
INDEXED_PLACEHOLDERS = PlaceholderSet(indexed=True)


@dataclass(frozen=True)
class Credential:
    value: str
    issued_at: datetime
    expires_at: datetime
    scopes_verified: bool = False

    @classmethod
    def issue(cls, value: str, now: datetime) -> "Credential":
        return cls(value=value, issued_at=now, expires_at=now + LEASE)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class TokenStatus:
    state: TokenState
    expires_at: Optional[datetime] = None
    minutes_remaining: Optional[int] = None

    @property
    def has_token(self) -> bool:
        return self.state in (TokenState.ACTIVE, TokenState.EXPIRING_SOON)


@dataclass(frozen=True)
class TokenInfo:
    """Result of a remote token introspection call."""

    valid: bool
    scopes: Tuple[str, ...] = ()
    status_code: Optional[int] = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


def _new_id() -> str:
    return str(uuid4())


class Slide(_CamelModel):
    id: str = Field(default_factory=_new_id)
    title: str = ""
    content: str = ""


class NarrationEntry(_CamelModel):
    id: str = Field(default_factory=_new_id)
    slide_number: int = Field(ge=1, description="1-based slide index; need not be unique.")
    text: str = ""
    timestamp: str = "00:00"


class DocumentModel(_CamelModel):
    title: str = ""
    slides: Tuple[Slide, ...] = ()
    narration: Tuple[NarrationEntry, ...] = ()


class GenerationRecord(_CamelModel):
    document_id: str
    title: str
    slides: Tuple[Slide, ...] = ()
    narration: Tuple[NarrationEntry, ...] = ()
    template_id: str
    created_at: datetime
    owner_id: str
    edit_url: str
    view_url: str
    export_urls: Dict[str, str] = Field(default_factory=dict)
    warnings: Tuple[str, ...] = ()

    def with_warning(self, message: str) -> "GenerationRecord":
        return self.model_copy(update={"warnings": self.warnings + (message,)})


def build_document_urls(document_id: str, base_url: str = SLIDES_BASE_URL) -> dict:
    """Derive edit/view/export links for a Slides document.

    Export links follow Google's deterministic ``/export/<format>`` scheme so no
    remote call is needed to produce them.
    """

    base = base_url.rstrip("/")
    return {
        "edit_url": f"{base}/{document_id}/edit",
        "view_url": f"{base}/{document_id}",
        "export_urls": {fmt.value: f"{base}/{document_id}/export/{fmt.value}" for fmt in ExportFormat},
    }
