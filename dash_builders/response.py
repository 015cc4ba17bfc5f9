"""Classify Discord webhook responses.

``204`` is success; anything else carries a JSON error object.  Code
``220001`` means the webhook points at a forum channel and needs a
``thread_name`` -- the page answers that by prompting for a title.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, ValidationError

from ._constants import SUCCESS_MARKER, SUCCESS_STATUS, THREAD_NAME_REQUIRED


class Outcome(str, Enum):
    SUCCESS = "success"
    NEEDS_TITLE = "needs_title"
    ERROR = "error"


class WebhookErrorBody(BaseModel):
    """Discord JSON error object.  Only ``code`` is read; other fields pass through."""
    model_config = ConfigDict(extra="allow")

    # JSON numbers: 220001 and 220001.0 are the same code, booleans are not
    code: StrictInt | StrictFloat | None = None


@dataclass(frozen=True)
class Classification:
    """Result of one send attempt.

    ``response`` is what the page displays: the success marker, the raw
    error body, or ``None`` while the title prompt is open.
    """
    outcome: Outcome
    response: dict | None = None
    status_code: int | None = None


def _parse_error(body):
    try:
        return WebhookErrorBody.model_validate(body)
    except ValidationError:
        return None


def classify_response(status_code, body=None, *, can_prompt_title=True):
    """Map an HTTP status and parsed body to a :class:`Classification`.

    Parameters
    ----------
    status_code : int
        HTTP status of the webhook execute call.
    body : Any
        Parsed JSON body.  Ignored for ``204``.
    can_prompt_title : bool
        ``False`` for the titled retry, so a repeated ``220001`` is reported
        as a plain error instead of prompting again.
    """
    if status_code == SUCCESS_STATUS:
        return Classification(Outcome.SUCCESS, dict(SUCCESS_MARKER), status_code)

    parsed = _parse_error(body)
    if can_prompt_title and parsed is not None and parsed.code == THREAD_NAME_REQUIRED:
        return Classification(Outcome.NEEDS_TITLE, None, status_code)

    return Classification(Outcome.ERROR, body, status_code)


def _walk_errors(node, path, out):
    if isinstance(node, dict):
        leaf = node.get("_errors")
        if isinstance(leaf, list):
            messages = [
                e.get("message") or e.get("code") or "Invalid value"
                for e in leaf
                if isinstance(e, dict)
            ]
            if messages:
                out.setdefault(".".join(path), []).extend(messages)
        for key, child in node.items():
            if key != "_errors":
                _walk_errors(child, path + [str(key)], out)


def get_errors(response):
    """Flatten Discord's nested ``errors`` tree into ``{path: [messages]}``.

    >>> get_errors({"code": 50035, "errors": {"components": {"0": {"content":
    ...     {"_errors": [{"code": "BASE_TYPE_REQUIRED", "message": "Required"}]}}}}})
    {'components.0.content': ['Required']}
    """
    errors = response.get("errors") if isinstance(response, dict) else None
    if not isinstance(errors, dict):
        return {}
    out = {}
    _walk_errors(errors, [], out)
    return out
