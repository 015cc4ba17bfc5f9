"""Build the HTTP request for a Discord webhook execute call.

Pure -- no network calls.  :func:`prepare_request` returns a
:class:`WebhookRequest` descriptor that :mod:`dash_builders.webhook`
dispatches with ``requests``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from ._constants import ATTACHMENT_SCHEME, IS_COMPONENTS_V2


@dataclass(frozen=True)
class WebhookRequest:
    """Method, headers and body of a webhook execute request.

    ``files`` holds ``(filename, content, content_type)`` tuples.  When it is
    non-empty the body is sent as multipart form data (``payload_json`` plus
    ``files[n]`` parts), otherwise as a JSON document.
    """
    payload: dict
    files: tuple = ()
    method: str = "POST"
    headers: dict = field(default_factory=dict)

    @property
    def is_multipart(self) -> bool:
        return bool(self.files)

    def body(self) -> str:
        """JSON text of the payload (the ``payload_json`` part when multipart)."""
        return json.dumps(self.payload, default=str)

    def to_requests_kwargs(self) -> dict:
        """Keyword arguments for ``requests.Session.request``."""
        kwargs = {"headers": dict(self.headers)}
        if self.is_multipart:
            kwargs["data"] = {"payload_json": self.body()}
            kwargs["files"] = {
                f"files[{i}]": (name, content, content_type)
                for i, (name, content, content_type) in enumerate(self.files)
            }
        else:
            kwargs["data"] = self.body().encode("utf-8")
        return kwargs


def _as_component_list(components):
    """Best-effort coercion of editor state into a component list."""
    if components is None:
        return []
    if isinstance(components, dict):
        return [components]
    if isinstance(components, tuple):
        return list(components)
    return components


def find_attachment_refs(node, found=None):
    """Return filenames referenced as ``attachment://<name>`` anywhere in *node*.

    Order of first appearance is preserved.
    """
    if found is None:
        found = []
    if isinstance(node, str):
        if node.startswith(ATTACHMENT_SCHEME):
            name = node[len(ATTACHMENT_SCHEME):]
            if name and name not in found:
                found.append(name)
    elif isinstance(node, dict):
        for value in node.values():
            find_attachment_refs(value, found)
    elif isinstance(node, (list, tuple)):
        for value in node:
            find_attachment_refs(value, found)
    return found


def build_payload(components, post_title=None, attachments=()):
    """Return the JSON payload for *components*.

    Parameters
    ----------
    components : list[dict]
        Top-level Components V2 tree.
    post_title : str, optional
        Name of the forum thread to create (``thread_name``).
    attachments : sequence of Attachment
        Files that will travel with the request; listed in ``attachments``.
    """
    payload = {
        "components": _as_component_list(components),
        "flags": IS_COMPONENTS_V2,
    }
    if post_title:
        payload["thread_name"] = post_title
    if attachments:
        payload["attachments"] = [
            {"id": i, "filename": a.filename} for i, a in enumerate(attachments)
        ]
    return payload


def prepare_request(components, post_title=None, *, attachments=None):
    """Build the webhook execute request for *components*.

    Parameters
    ----------
    components : list[dict]
        Component tree from the editor.  Never mutated.
    post_title : str, optional
        When set, the webhook creates a new forum thread with this name.
    attachments : Mapping[str, Attachment], optional
        Uploaded files by filename.  Only those referenced from the tree are sent.

    Returns
    -------
    WebhookRequest
    """
    used = []
    if attachments is not None:
        for name in find_attachment_refs(components):
            attachment = attachments.get(name)
            if attachment is not None:
                used.append(attachment)

    payload = build_payload(components, post_title, used)
    if used:
        return WebhookRequest(
            payload=payload,
            files=tuple((a.filename, a.content, a.content_type) for a in used),
        )
    return WebhookRequest(
        payload=payload,
        headers={"Content-Type": "application/json"},
    )
