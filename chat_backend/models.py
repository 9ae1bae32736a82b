"""Data models for the workshop chat."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Status(str, Enum):
    IDLE = "idle"
    SENDING = "sending"


@dataclass(frozen=True)
class Turn:
    """A single message in the conversation."""
    role: Role
    content: str

    def to_dict(self):
        return {
            "role": self.role.value,
            "content": self.content
        }


@dataclass(frozen=True)
class SessionState:
    """Snapshot of one chat session.

    Snapshots are never mutated; the coordinator swaps in a new one on every
    transition. ``transcript`` is a tuple so past turns cannot be edited.
    """
    system_instruction: str
    transcript: Tuple[Turn, ...] = field(default_factory=tuple)
    pending_input: str = ""
    status: Status = Status.IDLE
    last_error: Optional[str] = None

    def to_dict(self):
        return {
            "transcript": [turn.to_dict() for turn in self.transcript],
            "pending_input": self.pending_input,
            "status": self.status.value,
            "last_error": self.last_error,
            "system_instruction": self.system_instruction
        }
