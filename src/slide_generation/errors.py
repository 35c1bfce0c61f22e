"""Error taxonomy for presentation generation.

Every error carries a ``category`` so callers can route the user to the right
remedy: ``input`` (fix the document or template id), ``credential`` (re-enter
the Google API token) or ``remote`` (Google-side problem, retry or check
template sharing).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

INPUT = "input"
CREDENTIAL = "credential"
REMOTE = "remote"


class SlideGenerationError(Exception):
    category = REMOTE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SlideGenerationError, ValueError):
    category = INPUT


class CredentialInvalid(SlideGenerationError):
    category = CREDENTIAL

    def __init__(self, message: str = "Your Google API token is invalid or expired. Please refresh it in Token Settings.") -> None:
        super().__init__(message)


class CredentialExpired(CredentialInvalid):
    def __init__(self, message: str = "Your Google API token has expired. Please refresh it in Token Settings.") -> None:
        super().__init__(message)


class RemoteUnreachable(SlideGenerationError):
    def __init__(self, operation: str, detail: str = "") -> None:
        message = f"Could not reach Google while trying to {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation


class CopyFailureReason(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    OTHER = "other"


_COPY_MESSAGES = {
    CopyFailureReason.UNAUTHORIZED: "Your Google API token has expired. Please refresh it in Token Settings.",
    CopyFailureReason.FORBIDDEN: "Access denied. Please check if the template is shared with your Google account.",
    CopyFailureReason.NOT_FOUND: "Template not found. Please check the template ID.",
}


class TemplateCopyFailed(SlideGenerationError):
    def __init__(
        self,
        reason: CopyFailureReason,
        code: Optional[int] = None,
        message: Optional[str] = None,
    ) -> None:
        if reason in _COPY_MESSAGES:
            text = _COPY_MESSAGES[reason]
        else:
            text = f"Failed to copy template ({code}): {message or 'unknown error'}"
        super().__init__(text)
        self.reason = reason
        self.code = code
        self.provider_message = message

    @property
    def category(self) -> str:  # type: ignore[override]
        if self.reason == CopyFailureReason.UNAUTHORIZED:
            return CREDENTIAL
        if self.reason == CopyFailureReason.NOT_FOUND:
            return INPUT
        return REMOTE


class _BatchUpdateFailed(SlideGenerationError):
    label = "update slides"

    def __init__(self, code: Optional[int], message: str) -> None:
        if code == 401:
            text = "Your Google API token has expired during generation. Please refresh it in Token Settings."
        else:
            text = f"Failed to {self.label} ({code}): {message}"
        super().__init__(text)
        self.code = code
        self.provider_message = message

    @property
    def category(self) -> str:  # type: ignore[override]
        return CREDENTIAL if self.code == 401 else REMOTE


class ContentUpdateFailed(_BatchUpdateFailed):
    label = "update slides"


class OverflowUpdateFailed(_BatchUpdateFailed):
    label = "add additional slides"


class PersistenceFailed(SlideGenerationError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Presentation was created but could not be saved to history: {detail}")


class GenerationCancelled(SlideGenerationError):
    category = INPUT

    def __init__(self, step: str) -> None:
        super().__init__(f"Generation cancelled before {step}")
        self.step = step


__all__ = [
    "INPUT",
    "CREDENTIAL",
    "REMOTE",
    "SlideGenerationError",
    "ValidationError",
    "CredentialInvalid",
    "CredentialExpired",
    "RemoteUnreachable",
    "CopyFailureReason",
    "TemplateCopyFailed",
    "ContentUpdateFailed",
    "OverflowUpdateFailed",
    "PersistenceFailed",
    "GenerationCancelled",
]
