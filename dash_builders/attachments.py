"""Message attachments kept in the browser's ``dcc.Store``.

Uploads live in per-session store data (a list of plain dicts), so every
browser tab only ever sees and sends its own files.  Components reference
them by name (``attachment://<filename>``); the request builder looks them
up in the mapping returned by :func:`attachments_from_store`.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
from dataclasses import dataclass


@dataclass(frozen=True)
class Attachment:
    """A single file uploaded alongside the message."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "content_type": self.content_type,
            "data": base64.b64encode(self.content).decode("ascii"),
        }

    @classmethod
    def from_dict(cls, data) -> "Attachment | None":
        """Rebuild from store data; ``None`` for anything malformed."""
        if not isinstance(data, dict):
            return None
        filename, payload = data.get("filename"), data.get("data")
        if not isinstance(filename, str) or not filename or not isinstance(payload, str):
            return None
        try:
            content = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            return None
        content_type = data.get("content_type") or "application/octet-stream"
        return cls(filename=filename, content=content, content_type=content_type)


def parse_upload(contents, filename):
    """Decode a ``dcc.Upload`` data URL into an :class:`Attachment`.

    Parameters
    ----------
    contents : str
        ``data:<mime>;base64,<payload>`` string produced by ``dcc.Upload``.
    filename : str
        Original filename reported by the browser.

    Returns
    -------
    Attachment or None
        ``None`` when *contents* is not a base64 data URL.
    """
    if not contents or not filename or "," not in contents:
        return None
    header, _, payload = contents.partition(",")
    if not header.startswith("data:") or not header.endswith(";base64"):
        return None
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None
    mime = header[len("data:"):-len(";base64")]
    if not mime:
        mime = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return Attachment(filename=filename, content=data, content_type=mime)


def attachments_from_store(data) -> dict[str, Attachment]:
    """Return ``{filename: Attachment}`` from one session's store data."""
    files = {}
    for item in data if isinstance(data, list) else []:
        attachment = Attachment.from_dict(item)
        if attachment is not None:
            files[attachment.filename] = attachment
    return files


def add_uploads(data, contents, filenames):
    """Return new store data with the uploaded files added.

    A re-upload under an existing filename replaces the earlier file.  The
    input *data* is not modified.
    """
    files = attachments_from_store(data)
    for data_url, name in zip(contents or [], filenames or []):
        attachment = parse_upload(data_url, name)
        if attachment is not None:
            files[attachment.filename] = attachment
    return [a.to_dict() for a in files.values()]
