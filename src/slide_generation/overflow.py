from __future__ import annotations

from typing import List, Sequence
import uuid

from .models import Slide

OVERFLOW_LAYOUT = "TITLE_AND_BODY"


def _new_id(run_prefix: str, seq: int, kind: str) -> str:
    return f"ovf_{run_prefix}_{seq}_{kind}"


def overflow_slides(slides: Sequence[Slide], template_capacity: int) -> List[Slide]:
    """Slides the template has no room for.

    The template holds ``template_capacity`` slides, one of which is the title
    slide, so content slides from index ``template_capacity - 1`` on overflow.
    """
    if template_capacity < 1:
        raise ValueError("template_capacity must be at least 1")
    return list(slides[template_capacity - 1:])


def _insert_text(object_id: str, text: str) -> dict:
    return {
        "insertText": {
            "objectId": object_id,
            "insertionIndex": 0,
            "text": text,
        }
    }


def build_overflow_requests(
    slides: Sequence[Slide],
    template_capacity: int,
    run_prefix: str | None = None,
) -> List[dict]:
    if not run_prefix:
        run_prefix = uuid.uuid4().hex[:8]

    requests: List[dict] = []
    for seq, slide in enumerate(overflow_slides(slides, template_capacity)):
        slide_id = _new_id(run_prefix, seq, "slide")
        title_id = _new_id(run_prefix, seq, "title")
        body_id = _new_id(run_prefix, seq, "body")
        requests.append(
            {
                "createSlide": {
                    "objectId": slide_id,
                    "slideLayoutReference": {"predefinedLayout": OVERFLOW_LAYOUT},
                    "placeholderIdMappings": [
                        {"layoutPlaceholder": {"type": "TITLE"}, "objectId": title_id},
                        {"layoutPlaceholder": {"type": "BODY"}, "objectId": body_id},
                    ],
                }
            }
        )
        requests.append(_insert_text(title_id, slide.title))
        # Slides rejects insertText with an empty string.
        if slide.content:
            requests.append(_insert_text(body_id, slide.content))
    return requests


__all__ = ["OVERFLOW_LAYOUT", "build_overflow_requests", "overflow_slides"]
