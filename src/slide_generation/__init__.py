from .models import (
    Credential,
    DocumentModel,
    ExportFormat,
    GenerationRecord,
    NarrationEntry,
    PlaceholderSet,
    Slide,
    TokenState,
    TokenStatus,
)
from .errors import (
    ContentUpdateFailed,
    CredentialExpired,
    CredentialInvalid,
    GenerationCancelled,
    OverflowUpdateFailed,
    PersistenceFailed,
    RemoteUnreachable,
    SlideGenerationError,
    TemplateCopyFailed,
    ValidationError,
)
from .settings import GenerationSettings
from .batch_builder import build_batch_requests, preview_batch_request
from .overflow import build_overflow_requests
from .json_import import document_from_json, parse_slides_json
from .stores import InMemoryCredentialStore, InMemoryRecordStore, MongoCredentialStore, MongoRecordStore
from .token_manager import GoogleTokenIntrospector, TokenManager
from .slides_api import SlidesClient
from .template_copy import TemplateCopyClient
from .orchestrator import GenerationOrchestrator


def build_default_orchestrator(settings: GenerationSettings | None = None) -> GenerationOrchestrator:
    """Wire the orchestrator against Google and MongoDB using env configuration."""
    settings = settings or GenerationSettings.from_env()
    token_manager = TokenManager(
        MongoCredentialStore(),
        GoogleTokenIntrospector(timeout=settings.request_timeout),
    )
    return GenerationOrchestrator(
        token_manager,
        TemplateCopyClient(timeout=settings.request_timeout),
        SlidesClient(timeout=settings.request_timeout),
        MongoRecordStore(),
        settings,
    )


__all__ = [
    "Credential",
    "DocumentModel",
    "ExportFormat",
    "GenerationRecord",
    "NarrationEntry",
    "PlaceholderSet",
    "Slide",
    "TokenState",
    "TokenStatus",
    "ContentUpdateFailed",
    "CredentialExpired",
    "CredentialInvalid",
    "GenerationCancelled",
    "OverflowUpdateFailed",
    "PersistenceFailed",
    "RemoteUnreachable",
    "SlideGenerationError",
    "TemplateCopyFailed",
    "ValidationError",
    "GenerationSettings",
    "build_batch_requests",
    "preview_batch_request",
    "build_overflow_requests",
    "document_from_json",
    "parse_slides_json",
    "InMemoryCredentialStore",
    "InMemoryRecordStore",
    "MongoCredentialStore",
    "MongoRecordStore",
    "GoogleTokenIntrospector",
    "TokenManager",
    "SlidesClient",
    "TemplateCopyClient",
    "GenerationOrchestrator",
    "build_default_orchestrator",
]
