from __future__ import annotations

import json
import logging
from typing import Callable, Optional, Sequence, Tuple

import httplib2
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .errors import RemoteUnreachable
from .settings import DEFAULT_TIMEOUT_SECONDS, REQUIRED_SCOPE

logger = logging.getLogger(__name__)

SCOPES = [REQUIRED_SCOPE, "https://www.googleapis.com/auth/drive"]

# Transport-level failures, including socket timeouts (an OSError subclass).
TRANSPORT_ERRORS: Tuple[type, ...] = (OSError, httplib2.HttpLib2Error)

ServiceFactory = Callable[[str], object]


class BatchUpdateError(Exception):
    """A Slides batchUpdate was rejected; carries the provider's status and message."""

    def __init__(self, code: Optional[int], message: str) -> None:
        super().__init__(f"batchUpdate failed ({code}): {message}")
        self.code = code
        self.message = message


def http_error_details(exc: HttpError) -> Tuple[Optional[int], str]:
    """Pull the status code and Google's error message out of an HttpError."""
    status = getattr(exc.resp, "status", None)
    code = int(status) if status is not None else None
    message = ""
    content = getattr(exc, "content", b"") or b""
    try:
        payload = json.loads(content.decode("utf-8") if isinstance(content, bytes) else content)
        message = ((payload or {}).get("error") or {}).get("message") or ""
    except (ValueError, AttributeError):
        message = ""
    if not message:
        message = getattr(exc, "reason", None) or getattr(exc.resp, "reason", None) or str(exc)
    return code, message


def _authorized_http(access_token: str, timeout: float) -> AuthorizedHttp:
    creds = Credentials(token=access_token, scopes=SCOPES)
    # A bare access token cannot be refreshed; let 401s surface as HttpError.
    return AuthorizedHttp(creds, http=httplib2.Http(timeout=timeout), refresh_status_codes=())


def build_slides_service(access_token: str, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> object:
    if not access_token:
        raise ValueError("access_token is required")
    return build("slides", "v1", http=_authorized_http(access_token, timeout), cache_discovery=False)


def build_drive_service(access_token: str, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> object:
    if not access_token:
        raise ValueError("access_token is required")
    return build("drive", "v3", http=_authorized_http(access_token, timeout), cache_discovery=False)


def send_batch_requests(presentation_id: str, requests: Sequence[dict], service: object) -> dict:
    if not presentation_id:
        raise ValueError("presentation_id is required")
    if not requests:
        raise ValueError("requests must be a non-empty sequence")
    body = {"requests": list(requests)}
    response = service.presentations().batchUpdate(presentationId=presentation_id, body=body).execute()
    return json.loads(json.dumps(response))


class SlidesClient:
    """Applies ordered request lists to a presentation as one atomic batchUpdate."""

    def __init__(
        self,
        service_factory: Optional[ServiceFactory] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.timeout = timeout
        self.service_factory = service_factory or (
            lambda token: build_slides_service(token, timeout=self.timeout)
        )

    def batch_update(self, presentation_id: str, requests: Sequence[dict], access_token: str) -> dict:
        service = self.service_factory(access_token)
        try:
            response = send_batch_requests(presentation_id, requests, service)
        except HttpError as exc:
            code, message = http_error_details(exc)
            raise BatchUpdateError(code, message) from exc
        except TRANSPORT_ERRORS as exc:
            raise RemoteUnreachable("update the presentation", str(exc)) from exc
        logger.debug(
            "batchUpdate applied %d requests to %s (%d replies)",
            len(requests),
            presentation_id,
            len(response.get("replies", []) or []),
        )
        return response


__all__ = [
    "BatchUpdateError",
    "SlidesClient",
    "build_drive_service",
    "build_slides_service",
    "http_error_details",
    "send_batch_requests",
]
