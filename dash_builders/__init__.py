"""dash-builders -- compose Discord Components V2 messages and send them via webhook."""

__version__ = "0.1.0"

from .target import ResolvedTarget, resolve_target, normalize_webhook_url, get_thread_id
from .request import WebhookRequest, prepare_request, build_payload, find_attachment_refs
from .response import Classification, Outcome, classify_response, get_errors
from .state import SendPhase, SendState, begin_send, apply_classification, cancel_title
from .persistence import PersistenceScheduler, UrlStore
from .codegen import serialize_state, unescape_codegen
from .attachments import Attachment, add_uploads, attachments_from_store, parse_upload
from .config import Settings
from .webhook import WebhookError, InvalidWebhookURLError, execute_request, send_message

__all__ = [
    "__version__",
    # URL normalizer
    "ResolvedTarget",
    "resolve_target",
    "normalize_webhook_url",
    "get_thread_id",
    # Request builder
    "WebhookRequest",
    "prepare_request",
    "build_payload",
    "find_attachment_refs",
    # Response classifier + send state
    "Classification",
    "Outcome",
    "classify_response",
    "get_errors",
    "SendPhase",
    "SendState",
    "begin_send",
    "apply_classification",
    "cancel_title",
    # Persistence
    "PersistenceScheduler",
    "UrlStore",
    # Codegen
    "serialize_state",
    "unescape_codegen",
    # Attachments
    "Attachment",
    "add_uploads",
    "attachments_from_store",
    "parse_upload",
    # Config + dispatch
    "Settings",
    "WebhookError",
    "InvalidWebhookURLError",
    "execute_request",
    "send_message",
]
