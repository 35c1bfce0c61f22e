"""Sequential pipeline that turns a DocumentModel into a Google Slides deck.

Steps: validate input, validate the token, copy the template, replace
placeholders, append overflow slides (best effort), build the record, save it
to history (best effort). Steps up to the placeholder replacement abort the
run; the overflow and history steps only add warnings to the returned record,
and a cancellation after the placeholder replacement skips the overflow step.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .batch_builder import build_batch_requests
from .errors import (
    ContentUpdateFailed,
    CredentialInvalid,
    GenerationCancelled,
    OverflowUpdateFailed,
    PersistenceFailed,
    RemoteUnreachable,
    ValidationError,
)
from .models import DocumentModel, GenerationRecord, build_document_urls
from .overflow import build_overflow_requests
from .settings import GenerationSettings
from .slides_api import BatchUpdateError, SlidesClient
from .stores import RecordStore
from .template_copy import TemplateCopyClient
from .token_manager import TokenManager

logger = logging.getLogger(__name__)


def validate_document(document: DocumentModel, template_id: str) -> None:
    if not document.title.strip():
        raise ValidationError("Please enter a presentation title")
    if any(not slide.title.strip() for slide in document.slides):
        raise ValidationError("Please fill in all slide titles")
    if not (template_id or "").strip():
        raise ValidationError("Please enter a template ID")


def _check_cancelled(cancel_event: Optional[threading.Event], step: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise GenerationCancelled(step)


class GenerationOrchestrator:
    def __init__(
        self,
        token_manager: TokenManager,
        copy_client: TemplateCopyClient,
        slides_client: SlidesClient,
        record_store: RecordStore,
        settings: Optional[GenerationSettings] = None,
    ) -> None:
        self.token_manager = token_manager
        self.copy_client = copy_client
        self.slides_client = slides_client
        self.record_store = record_store
        self.settings = settings or GenerationSettings()

    def generate(
        self,
        document: DocumentModel,
        template_id: Optional[str],
        owner_id: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> GenerationRecord:
        template_id = (template_id or "").strip()
        validate_document(document, template_id)

        if not self.token_manager.validate(owner_id):
            raise CredentialInvalid()
        credential = self.token_manager.current(owner_id)
        if credential is None:
            raise CredentialInvalid()
        token = credential.value

        _check_cancelled(cancel_event, "copying the template")
        document_id = self.copy_client.copy(template_id, document.title, token)

        try:
            _check_cancelled(cancel_event, "updating slide content")
            self._apply_content(document_id, document, token)
        except (ContentUpdateFailed, GenerationCancelled, RemoteUnreachable):
            self._discard_copy(document_id, token)
            raise

        warnings: list[str] = []
        capacity = self.settings.template_capacity
        if len(document.slides) > capacity - 1:
            # Deck is populated by now; cancellation only skips the extra slides.
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("Generation of %s cancelled; additional slides skipped", document_id)
                warnings.append("Generation cancelled before adding additional slides")
            else:
                warning = self._apply_overflow(document_id, document, token)
                if warning:
                    warnings.append(warning)

        record = self._build_record(document, document_id, template_id, owner_id, warnings)

        try:
            self.record_store.append(owner_id, record)
        except Exception as exc:  # history is best effort; the deck already exists
            failure = PersistenceFailed(str(exc))
            logger.exception("Failed to save generated presentation %s to history", document_id)
            record = record.with_warning(failure.message)

        logger.info(
            "Generated presentation %s for %s (%d slides, %d warnings)",
            document_id,
            owner_id,
            len(document.slides),
            len(record.warnings),
        )
        return record

    def _apply_content(self, document_id: str, document: DocumentModel, token: str) -> None:
        requests = build_batch_requests(document, document.title, self.settings.placeholders)
        try:
            self.slides_client.batch_update(document_id, requests, token)
        except BatchUpdateError as exc:
            logger.error("Content update of %s failed (%s): %s", document_id, exc.code, exc.message)
            raise ContentUpdateFailed(exc.code, exc.message) from exc
        logger.info("Replaced placeholders in %s with %d requests", document_id, len(requests))

    def _apply_overflow(self, document_id: str, document: DocumentModel, token: str) -> Optional[str]:
        requests = build_overflow_requests(document.slides, self.settings.template_capacity)
        if not requests:
            return None
        try:
            self.slides_client.batch_update(document_id, requests, token)
        except BatchUpdateError as exc:
            failure = OverflowUpdateFailed(exc.code, exc.message)
            logger.warning("Failed to add additional slides to %s: %s", document_id, failure.message)
            return failure.message
        except RemoteUnreachable as exc:
            logger.warning("Failed to add additional slides to %s: %s", document_id, exc)
            return f"Failed to add additional slides: {exc.message}"
        except Exception as exc:
            logger.warning("Failed to add additional slides to %s: %s", document_id, exc)
            return f"Failed to add additional slides: {exc}"
        logger.info("Appended overflow slides to %s (%d requests)", document_id, len(requests))
        return None

    def _discard_copy(self, document_id: str, token: str) -> None:
        if not self.settings.delete_orphaned_copies:
            logger.warning("Copied presentation %s left in Drive after a failed update", document_id)
            return
        if self.copy_client.delete(document_id, token):
            logger.info("Deleted orphaned copy %s", document_id)

    def _build_record(
        self,
        document: DocumentModel,
        document_id: str,
        template_id: str,
        owner_id: str,
        warnings: list[str],
    ) -> GenerationRecord:
        urls = build_document_urls(document_id, self.settings.base_url)
        return GenerationRecord(
            document_id=document_id,
            title=document.title,
            slides=document.slides,
            narration=document.narration,
            template_id=template_id,
            created_at=self.token_manager.clock(),
            owner_id=owner_id,
            edit_url=urls["edit_url"],
            view_url=urls["view_url"],
            export_urls=urls["export_urls"],
            warnings=tuple(warnings),
        )


__all__ = ["GenerationOrchestrator", "validate_document"]
