"""Processing status state machine."""

from enum import Enum
from typing import Dict, FrozenSet

from cvenhancer.exceptions import InvalidTransitionError


class ProcessingStatus(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    ENHANCING = "enhancing"
    COMPLETED = "completed"
    ERROR = "error"


# A new upload restarts at PARSING; loading a saved snapshot jumps to COMPLETED.
TRANSITIONS: Dict[ProcessingStatus, FrozenSet[ProcessingStatus]] = {
    ProcessingStatus.IDLE: frozenset({ProcessingStatus.PARSING, ProcessingStatus.COMPLETED}),
    ProcessingStatus.PARSING: frozenset({ProcessingStatus.ENHANCING, ProcessingStatus.ERROR}),
    ProcessingStatus.ENHANCING: frozenset({ProcessingStatus.COMPLETED, ProcessingStatus.ERROR}),
    ProcessingStatus.COMPLETED: frozenset({ProcessingStatus.PARSING, ProcessingStatus.COMPLETED}),
    ProcessingStatus.ERROR: frozenset({ProcessingStatus.PARSING, ProcessingStatus.COMPLETED}),
}


def check_transition(current: ProcessingStatus, target: ProcessingStatus) -> None:
    """
    Raise if ``current -> target`` is not an allowed transition.

    Raises:
        InvalidTransitionError: For any transition outside TRANSITIONS
    """
    if target not in TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Invalid status transition: {current.value} -> {target.value}"
        )


def is_busy(status: ProcessingStatus) -> bool:
    return status in (ProcessingStatus.PARSING, ProcessingStatus.ENHANCING)
