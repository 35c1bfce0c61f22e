from __future__ import annotations

import logging
from typing import Optional

from googleapiclient.errors import HttpError

from .errors import CopyFailureReason, RemoteUnreachable, TemplateCopyFailed, ValidationError
from .settings import DEFAULT_TIMEOUT_SECONDS
from .slides_api import TRANSPORT_ERRORS, ServiceFactory, build_drive_service, http_error_details

logger = logging.getLogger(__name__)

_REASON_BY_STATUS = {
    401: CopyFailureReason.UNAUTHORIZED,
    403: CopyFailureReason.FORBIDDEN,
    404: CopyFailureReason.NOT_FOUND,
}


class TemplateCopyClient:
    """Copies a template presentation into a new Drive file owned by the caller."""

    def __init__(
        self,
        service_factory: Optional[ServiceFactory] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.timeout = timeout
        self.service_factory = service_factory or (
            lambda token: build_drive_service(token, timeout=self.timeout)
        )

    def copy(self, template_id: str, new_title: str, access_token: str) -> str:
        if not template_id:
            raise ValidationError("Please enter a template ID")
        service = self.service_factory(access_token)
        # No parents: the copy lands in the user's root folder.
        body = {"name": new_title, "parents": []}
        try:
            copied = service.files().copy(fileId=template_id, body=body, fields="id").execute()
        except HttpError as exc:
            code, message = http_error_details(exc)
            reason = _REASON_BY_STATUS.get(code, CopyFailureReason.OTHER)
            logger.warning("Copy of template %s failed (%s): %s", template_id, code, message)
            raise TemplateCopyFailed(reason, code, message) from exc
        except TRANSPORT_ERRORS as exc:
            raise RemoteUnreachable("copy the template", str(exc)) from exc

        document_id = (copied or {}).get("id")
        if not document_id:
            raise TemplateCopyFailed(CopyFailureReason.OTHER, None, "copy response did not include a file id")
        logger.info("Copied template %s to %s (%r)", template_id, document_id, new_title)
        return document_id

    def delete(self, document_id: str, access_token: str) -> bool:
        """Best-effort removal of a copied file. Returns True when Drive accepted it."""
        service = self.service_factory(access_token)
        try:
            service.files().delete(fileId=document_id).execute()
        except HttpError as exc:
            code, message = http_error_details(exc)
            logger.warning("Could not delete orphaned copy %s (%s): %s", document_id, code, message)
            return False
        except TRANSPORT_ERRORS as exc:
            logger.warning("Could not delete orphaned copy %s: %s", document_id, exc)
            return False
        return True


__all__ = ["TemplateCopyClient"]
