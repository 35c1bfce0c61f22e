from __future__ import annotations

from typing import Iterable, List

from .models import DEFAULT_PLACEHOLDERS, DocumentModel, PlaceholderSet, Slide


def _replace_all(placeholder: str, text: str) -> dict:
    return {
        "replaceAllText": {
            "containsText": {"text": placeholder, "matchCase": False},
            "replaceText": text,
        }
    }


def build_replacement_requests(
    title: str,
    slides: Iterable[Slide],
    placeholders: PlaceholderSet = DEFAULT_PLACEHOLDERS,
) -> List[dict]:
    """Compile the title and slides into ordered replaceAllText requests.

    Order is title first, then title/content per slide. With shared placeholders
    every request replaces all matches in the deck, so when a template holds the
    same placeholder on several slides the first request fills all of them.
    """
    requests: List[dict] = [_replace_all(placeholders.presentation_title, title)]
    for number, slide in enumerate(slides, start=1):
        requests.append(_replace_all(placeholders.title_for(number), slide.title))
        requests.append(_replace_all(placeholders.content_for(number), slide.content))
    return requests


def build_batch_requests(
    document: DocumentModel,
    title: str | None = None,
    placeholders: PlaceholderSet = DEFAULT_PLACEHOLDERS,
) -> List[dict]:
    return build_replacement_requests(document.title if title is None else title, document.slides, placeholders)


def preview_batch_request(document: DocumentModel, placeholders: PlaceholderSet = DEFAULT_PLACEHOLDERS) -> dict:
    """The batchUpdate body that generation would send, for display before running it."""
    return {"requests": build_batch_requests(document, placeholders=placeholders)}


__all__ = ["build_batch_requests", "build_replacement_requests", "preview_batch_request"]
