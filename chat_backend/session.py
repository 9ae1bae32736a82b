"""Chat session coordinator: one request in flight at a time."""

import asyncio
from typing import Callable, List, Optional

from chat_backend import state as transitions
from chat_backend.errors import ChatError, ConfigurationError, ValidationError
from chat_backend.models import SessionState, Status
from chat_backend.prompt import build_request
from chat_backend.providers.base import BaseProvider

Listener = Callable[[SessionState], None]


def validate_input(text: Optional[str]) -> str:
    """Return ``text`` unchanged, or raise ValidationError when it is blank."""
    if text is None or not text.strip():
        raise ValidationError("empty input")
    return text


class ChatSession:
    """Owns one SessionState and drives it through IDLE and SENDING.

    Nothing outside this class mutates the state. Renderers call
    ``subscribe`` and receive every new snapshot.
    """

    def __init__(self, provider: BaseProvider, system_instruction: str):
        self.provider = provider
        self._state = transitions.new_session(system_instruction)
        self._listeners: List[Listener] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for state snapshots; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_pending_input(self, text: str):
        self._apply(transitions.with_pending_input(self._state, text))

    def update_system_instruction(self, text: str):
        """Replace the system instruction. A request already in flight keeps the old one."""
        self._apply(transitions.with_system_instruction(self._state, text))

    def submit(self, text: Optional[str] = None) -> Optional[asyncio.Task]:
        """Start sending ``text`` (or the pending input) to the provider.

        Must be called from inside a running event loop. Returns as soon as
        the session is SENDING; the returned task finishes when the state is
        back to IDLE.

        Returns:
            The background task, or None when the call was a no-op or was
            rejected for a missing credential
        """
        if self._state.status is Status.SENDING:
            print("[CHAT] Ignoring submit while a request is in flight")
            return None

        if text is None:
            text = self._state.pending_input
        try:
            text = validate_input(text)
        except ValidationError:
            return None

        try:
            self.provider.require_configured()
        except ConfigurationError as e:
            print("[CHAT] No credential configured, not contacting the provider")
            self._apply(transitions.reject_missing_credential(self._state, str(e)))
            return None

        loop = asyncio.get_running_loop()
        request = build_request(text, self._state.system_instruction)
        self._apply(transitions.begin_send(self._state, text))

        self._task = loop.create_task(self._run(request))
        return self._task

    async def wait_idle(self):
        """Wait for the in-flight request, if any, to settle."""
        task = self._task
        if task is not None:
            await asyncio.shield(task)

    async def _run(self, request):
        try:
            response = await self.provider.generate(request)
        except ChatError as e:
            print(f"[CHAT] Request failed: {e}")
            self._apply(transitions.fail_send(self._state, str(e)))
            return
        except Exception as e:
            print(f"[CHAT] Unexpected provider error: {e!r}")
            self._apply(transitions.fail_send(self._state, f"Error: {str(e) or type(e).__name__}"))
            return

        self._apply(transitions.complete_send(self._state, response.text))

    def _apply(self, new_state: SessionState):
        if new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                print(f"[CHAT] Listener error: {e!r}")
