"""Send state machine for the builder page.

The page keeps one :class:`SendState` in a ``dcc.Store``; callbacks move it
forward with the transition functions below and never mutate it in place.

    AWAITING_SEND --220001--> AWAITING_TITLE --titled send--> AWAITING_SEND
                                            --dismiss-----> AWAITING_SEND
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .response import Classification, Outcome


class SendPhase(str, Enum):
    AWAITING_SEND = "awaiting_send"
    AWAITING_TITLE = "awaiting_title"


@dataclass(frozen=True)
class SendState:
    phase: SendPhase = SendPhase.AWAITING_SEND
    response: dict | None = None

    @property
    def awaiting_title(self) -> bool:
        return self.phase is SendPhase.AWAITING_TITLE

    def to_dict(self) -> dict:
        return {"phase": self.phase.value, "response": self.response}

    @classmethod
    def from_dict(cls, data) -> "SendState":
        """Rebuild from store data; unknown or missing data gives the initial state."""
        if not isinstance(data, dict):
            return cls()
        try:
            phase = SendPhase(data.get("phase", SendPhase.AWAITING_SEND.value))
        except ValueError:
            phase = SendPhase.AWAITING_SEND
        response = data.get("response")
        return cls(phase=phase, response=response if isinstance(response, dict) else None)


def begin_send(state: SendState) -> SendState:
    """Clear the previous result before a new one can be observed."""
    return replace(state, response=None)


def apply_classification(state: SendState, result: Classification) -> SendState:
    if result.outcome is Outcome.NEEDS_TITLE:
        return SendState(phase=SendPhase.AWAITING_TITLE, response=None)
    return SendState(phase=SendPhase.AWAITING_SEND, response=result.response)


def cancel_title(state: SendState) -> SendState:
    """Dismiss the title prompt.  No request has been made for it yet."""
    return replace(state, phase=SendPhase.AWAITING_SEND)
