"""JSON code representation of the component tree."""

import json


def to_json(components):
    """Compact JSON, shaped like ``JSON.stringify`` output."""
    return json.dumps(components, separators=(",", ":"), ensure_ascii=False)


def serialize_state(components):
    """Return the tree as JSON with every ``"`` escaped as ``\\"``.

    Ready to paste inside a double-quoted string literal.
    """
    return to_json(components).replace('"', '\\"')


def unescape_codegen(text):
    """Inverse of :func:`serialize_state`'s quote escaping."""
    return text.replace('\\"', '"')
