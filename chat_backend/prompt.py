"""
Single request builder shared by all providers.

Keeping it here means every provider receives the same generation settings
and the same structured system instruction.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 1000


@dataclass(frozen=True)
class InstructionPart:
    text: str


@dataclass(frozen=True)
class SystemInstruction:
    """Structured system instruction: ``{"parts": [{"text": ...}]}``."""
    parts: tuple[InstructionPart, ...]

    @classmethod
    def from_text(cls, text: str) -> "SystemInstruction":
        return cls(parts=(InstructionPart(text=text),))

    @property
    def text(self) -> str:
        return "\n".join(part.text for part in self.parts)

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {"parts": [{"text": part.text} for part in self.parts]}


def require_structured(instruction: Any) -> "SystemInstruction":
    """
    The endpoint ignores a system instruction sent as a bare string, so that
    form is rejected here instead of being sent.
    """
    if isinstance(instruction, str):
        raise TypeError(
            "system instruction must be a SystemInstruction with parts, not a bare string; "
            "use SystemInstruction.from_text()"
        )
    if not isinstance(instruction, SystemInstruction):
        raise TypeError(f"system instruction must be a SystemInstruction, got {type(instruction).__name__}")
    return instruction


@dataclass(frozen=True)
class GenerateRequest:
    """One stateless call to the text-generation endpoint."""
    user_text: str
    system_instruction: SystemInstruction
    temperature: float = TEMPERATURE
    max_output_tokens: int = MAX_OUTPUT_TOKENS

    def __post_init__(self):
        require_structured(self.system_instruction)


@dataclass(frozen=True)
class GenerateResponse:
    text: str


def build_request(user_text: str, system_instruction: str) -> GenerateRequest:
    """Build the outbound request for a single user turn.

    Only the new turn is sent; earlier transcript turns are not replayed.

    Args:
        user_text: The text the user just submitted
        system_instruction: Instruction text, wrapped into its structured form

    Returns:
        GenerateRequest with the fixed generation settings
    """
    return GenerateRequest(
        user_text=user_text,
        system_instruction=SystemInstruction.from_text(system_instruction),
    )
