"""Tests for dispatching webhook requests end to end."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from dash_builders.attachments import Attachment
from dash_builders.request import prepare_request
from dash_builders.response import Outcome
from dash_builders.state import SendState, apply_classification, begin_send
from dash_builders.webhook import (
    InvalidWebhookURLError,
    WebhookError,
    execute_request,
    send_message,
)

WEBHOOK_URL = "https://discord.com/api/webhooks/123/abc?thread_id=999"
RESOLVED_URL = "https://discord.com/api/v10/webhooks/123/abc?thread_id=999&with_components=true"
TREE = [{"type": 10, "content": "Hello"}]


def _make_response(status_code: int, body: Any = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def _make_session(*responses: MagicMock) -> MagicMock:
    session = MagicMock()
    session.request.side_effect = list(responses)
    return session


class TestSendMessage:
    def test_posts_to_resolved_target(self) -> None:
        session = _make_session(_make_response(204))
        result = send_message(TREE, WEBHOOK_URL, session=session, timeout=5)

        assert result.outcome is Outcome.SUCCESS
        assert result.response == {"status": "204 Success"}
        args, kwargs = session.request.call_args
        assert args == ("POST", RESOLVED_URL)
        assert kwargs["timeout"] == 5
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert json.loads(kwargs["data"])["components"] == TREE

    def test_success_does_not_read_body(self) -> None:
        resp = _make_response(204)
        send_message(TREE, WEBHOOK_URL, session=_make_session(resp))
        resp.json.assert_not_called()

    def test_validation_error_passed_through(self) -> None:
        body = {"code": 50035, "message": "Invalid Form Body", "errors": {}}
        result = send_message(TREE, WEBHOOK_URL, session=_make_session(_make_response(400, body)))
        assert result.outcome is Outcome.ERROR
        assert result.response == body
        assert result.status_code == 400

    def test_needs_title_clears_prior_response(self) -> None:
        state = SendState(response={"code": 50035})
        state = begin_send(state)
        result = send_message(
            TREE, WEBHOOK_URL, session=_make_session(_make_response(400, {"code": 220001}))
        )
        state = apply_classification(state, result)
        assert result.outcome is Outcome.NEEDS_TITLE
        assert state.response is None
        assert state.awaiting_title

    def test_titled_retry_sends_thread_name(self) -> None:
        session = _make_session(_make_response(204))
        send_message(TREE, WEBHOOK_URL, post_title="Release notes", can_prompt_title=False, session=session)
        payload = json.loads(session.request.call_args.kwargs["data"])
        assert payload["thread_name"] == "Release notes"

    def test_titled_retry_repeated_220001_is_error(self) -> None:
        session = _make_session(_make_response(400, {"code": 220001}))
        result = send_message(TREE, WEBHOOK_URL, post_title="t", can_prompt_title=False, session=session)
        assert result.outcome is Outcome.ERROR
        assert result.response == {"code": 220001}

    def test_url_resolved_on_every_call(self) -> None:
        session = _make_session(_make_response(204), _make_response(204))
        send_message(TREE, "https://discord.com/api/webhooks/1/a", session=session)
        send_message(TREE, "https://discord.com/api/webhooks/2/b", session=session)
        urls = [c.args[1] for c in session.request.call_args_list]
        assert urls == [
            "https://discord.com/api/v10/webhooks/1/a?with_components=true",
            "https://discord.com/api/v10/webhooks/2/b?with_components=true",
        ]

    def test_attachments_sent_multipart(self) -> None:
        files = {"cat.png": Attachment("cat.png", b"\x89PNG", "image/png")}
        tree = [{"type": 12, "items": [{"media": {"url": "attachment://cat.png"}}]}]
        session = _make_session(_make_response(204))

        send_message(tree, WEBHOOK_URL, attachments=files, session=session)
        kwargs = session.request.call_args.kwargs
        assert kwargs["files"] == {"files[0]": ("cat.png", b"\x89PNG", "image/png")}
        assert "payload_json" in kwargs["data"]

    @pytest.mark.parametrize("url", ["", "not a url", None])
    def test_malformed_url_raises_before_network(self, url) -> None:
        session = MagicMock()
        with pytest.raises(InvalidWebhookURLError) as exc_info:
            send_message(TREE, url, session=session)
        assert isinstance(exc_info.value, WebhookError)
        assert isinstance(exc_info.value, ValueError)
        session.request.assert_not_called()

    def test_network_failure_propagates(self) -> None:
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("boom")
        with pytest.raises(requests.ConnectionError):
            send_message(TREE, WEBHOOK_URL, session=session)

    def test_non_json_error_body_propagates(self) -> None:
        resp = _make_response(502, ValueError("Expecting value"))
        with pytest.raises(ValueError):
            send_message(TREE, WEBHOOK_URL, session=_make_session(resp))


class TestExecuteRequest:
    def test_defaults_to_requests_module(self, capsys) -> None:
        with patch("dash_builders.webhook.requests.request") as mock_request:
            mock_request.return_value = _make_response(204)
            status, body = execute_request(RESOLVED_URL, prepare_request(TREE))

        assert (status, body) == (204, None)
        assert mock_request.call_args.args == ("POST", RESOLVED_URL)
        assert mock_request.call_args.kwargs["timeout"] == 10
        assert "[dash-builders] Webhook response: 204" in capsys.readouterr().out
