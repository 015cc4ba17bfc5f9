"""Tests for webhook response classification and the send state machine."""

from __future__ import annotations

import pytest

from dash_builders.response import Classification, Outcome, classify_response, get_errors
from dash_builders.state import (
    SendPhase,
    SendState,
    apply_classification,
    begin_send,
    cancel_title,
)

INVALID_FORM = {
    "code": 50035,
    "message": "Invalid Form Body",
    "errors": {
        "components": {
            "0": {
                "content": {
                    "_errors": [{"code": "BASE_TYPE_REQUIRED", "message": "This field is required"}]
                }
            },
            "1": {
                "accessory": {
                    "media": {
                        "url": {"_errors": [{"code": "URL_TYPE_INVALID_URL", "message": "Not a well formed URL."}]}
                    }
                }
            },
        }
    },
}


class TestClassifyResponse:
    @pytest.mark.parametrize("body", [None, "", {"code": 220001}, {"id": "1"}])
    def test_204_is_success_regardless_of_body(self, body) -> None:
        result = classify_response(204, body)
        assert result == Classification(Outcome.SUCCESS, {"status": "204 Success"}, 204)

    def test_220001_needs_title(self) -> None:
        result = classify_response(400, {"code": 220001, "message": "Webhooks posted to forum channels must have a thread_name or thread_id"})
        assert result.outcome is Outcome.NEEDS_TITLE
        assert result.response is None

    @pytest.mark.parametrize(
        "body",
        [
            {"code": 220001, "errors": []},
            {"code": 220001, "message": {"text": "x"}},
            {"code": 220001, "errors": None, "message": None},
            {"code": 220001.0},
        ],
    )
    def test_220001_needs_title_whatever_the_other_fields(self, body) -> None:
        assert classify_response(400, body).outcome is Outcome.NEEDS_TITLE

    def test_220001_without_prompt_is_error(self) -> None:
        body = {"code": 220001}
        result = classify_response(400, body, can_prompt_title=False)
        assert result.outcome is Outcome.ERROR
        assert result.response is body

    @pytest.mark.parametrize(
        "body",
        [INVALID_FORM, {"message": "no code"}, {"code": "220001"}, {"code": True}, [], None, {"code": 10015}],
    )
    def test_other_bodies_passed_through(self, body) -> None:
        result = classify_response(400, body)
        assert result.outcome is Outcome.ERROR
        assert result.response is body

    def test_200_is_not_success(self) -> None:
        body = {"id": "123", "content": ""}
        assert classify_response(200, body).outcome is Outcome.ERROR


class TestGetErrors:
    def test_flattens_nested_errors(self) -> None:
        assert get_errors(INVALID_FORM) == {
            "components.0.content": ["This field is required"],
            "components.1.accessory.media.url": ["Not a well formed URL."],
        }

    @pytest.mark.parametrize(
        "response",
        [None, {"status": "204 Success"}, {"code": 10015}, "x", {"code": 50035, "errors": []}],
    )
    def test_no_errors(self, response) -> None:
        assert get_errors(response) == {}


class TestSendState:
    def test_begin_send_clears_previous_response(self) -> None:
        state = SendState(response={"code": 50035})
        assert begin_send(state).response is None

    def test_needs_title_flow(self) -> None:
        state = begin_send(SendState(response={"code": 50035}))
        state = apply_classification(state, classify_response(400, {"code": 220001}))
        assert state == SendState(phase=SendPhase.AWAITING_TITLE, response=None)
        assert state.awaiting_title

        # Titled retry gets 220001 again: plain error, no second prompt
        retry = classify_response(400, {"code": 220001}, can_prompt_title=not state.awaiting_title)
        state = apply_classification(begin_send(state), retry)
        assert state.phase is SendPhase.AWAITING_SEND
        assert state.response == {"code": 220001}

    def test_titled_retry_success(self) -> None:
        state = SendState(phase=SendPhase.AWAITING_TITLE)
        state = apply_classification(begin_send(state), classify_response(204))
        assert state == SendState(response={"status": "204 Success"})

    def test_cancel_title_has_no_side_effects(self) -> None:
        state = SendState(phase=SendPhase.AWAITING_TITLE)
        assert cancel_title(state) == SendState()

    def test_dict_roundtrip(self) -> None:
        state = SendState(phase=SendPhase.AWAITING_TITLE, response=None)
        assert SendState.from_dict(state.to_dict()) == state

    @pytest.mark.parametrize("data", [None, [], {"phase": "bogus"}, {"response": "text"}])
    def test_from_dict_tolerates_junk(self, data) -> None:
        assert SendState.from_dict(data) == SendState()
