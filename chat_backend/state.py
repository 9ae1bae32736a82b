"""Pure transition functions over SessionState snapshots."""

from dataclasses import replace
from typing import Optional

from chat_backend.errors import CREDENTIAL_MISSING
from chat_backend.models import Role, SessionState, Status, Turn


def new_session(system_instruction: str) -> SessionState:
    return SessionState(system_instruction=system_instruction)


def with_pending_input(state: SessionState, text: str) -> SessionState:
    return replace(state, pending_input=text)


def with_system_instruction(state: SessionState, text: str) -> SessionState:
    return replace(state, system_instruction=text)


def reject_missing_credential(state: SessionState, message: str = CREDENTIAL_MISSING) -> SessionState:
    return replace(state, last_error=message or CREDENTIAL_MISSING, status=Status.IDLE)


def begin_send(state: SessionState, text: str) -> SessionState:
    """Commit the user turn and enter SENDING."""
    return replace(
        state,
        transcript=state.transcript + (Turn(Role.USER, text),),
        pending_input="",
        last_error=None,
        status=Status.SENDING,
    )


def complete_send(state: SessionState, text: str) -> SessionState:
    return replace(
        state,
        transcript=state.transcript + (Turn(Role.ASSISTANT, text),),
        status=Status.IDLE,
    )


def fail_send(state: SessionState, message: Optional[str]) -> SessionState:
    # the user turn committed by begin_send stays in the transcript
    return replace(
        state,
        last_error=message or "Error: The request failed. Please try again.",
        status=Status.IDLE,
    )
