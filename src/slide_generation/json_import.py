"""Turn a pasted JSON slide list into a DocumentModel.

Accepted shape::

    [{"slideTitle": "...", "slideText": "- point\\n- point"}, ...]

Each slide gets an empty narration entry so narration can be filled in later.
"""

from __future__ import annotations

import json
from typing import List

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import DocumentModel, NarrationEntry, Slide


class ImportedSlide(BaseModel):
    model_config = ConfigDict(extra="ignore")

    slideTitle: str
    slideText: str


_SLIDES_ADAPTER = TypeAdapter(List[ImportedSlide])


def parse_slides_json(raw: str) -> List[Slide]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON format: {exc.msg}") from exc
    if not isinstance(payload, list):
        raise ValidationError("JSON must be an array of slide objects")

    for index, item in enumerate(payload, start=1):
        if not isinstance(item, dict) or not item.get("slideTitle") or not item.get("slideText"):
            raise ValidationError(f"Slide {index} must have 'slideTitle' and 'slideText' properties")

    try:
        imported = _SLIDES_ADAPTER.validate_python(payload)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(f"Invalid slide data at {location}: {first.get('msg')}") from exc

    return [Slide(title=item.slideTitle, content=item.slideText) for item in imported]


def document_from_json(title: str, raw: str) -> DocumentModel:
    slides = parse_slides_json(raw)
    narration = [NarrationEntry(slide_number=number, text="", timestamp="00:00") for number in range(1, len(slides) + 1)]
    return DocumentModel(title=title.strip(), slides=slides, narration=narration)


__all__ = ["ImportedSlide", "document_from_json", "parse_slides_json"]
