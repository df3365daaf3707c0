import math
import re

from src.common.exceptions import InvalidRequestException
from src.tasks.store.schemas import Priority

INVALID_ID_MESSAGE = "invalid id"
INVALID_PRIORITY_MESSAGE = "invalid priority. Must be HIGH, MEDIUM, or LOW"

# Largest id a 64-bit integer column can hold
MAX_TASK_ID = 2**63 - 1

# Numeric forms a JavaScript Number() accepts; no digit separators
DECIMAL_ID_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
RADIX_ID_PATTERN = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def parse_task_id(raw_id: str) -> int:
    """Parse a task id from a path segment.

    Any finite number is accepted and truncated toward zero, so "12.5" resolves
    to task 12 and "-1" to a task that can never exist.
    """
    text = raw_id.strip()
    value: float
    if RADIX_ID_PATTERN.fullmatch(text):
        value = int(text, 0)
    elif DECIMAL_ID_PATTERN.fullmatch(text):
        value = float(text)
    else:
        raise InvalidRequestException(INVALID_ID_MESSAGE)

    if not math.isfinite(value) or abs(value) >= MAX_TASK_ID:
        raise InvalidRequestException(INVALID_ID_MESSAGE)

    return int(value)


def parse_completion_task_id(raw_id: str) -> int:
    """Strict variant used by the completion endpoint: no decimal separators."""
    if "." in raw_id or "," in raw_id:
        raise InvalidRequestException(INVALID_ID_MESSAGE)

    return parse_task_id(raw_id)


def parse_priority(value: str | None) -> Priority | None:
    if not value:
        return None

    try:
        return Priority(value)
    except ValueError as e:
        raise InvalidRequestException(INVALID_PRIORITY_MESSAGE) from e


def parse_required_priority(value: str | None) -> Priority:
    priority = parse_priority(value)
    if priority is None:
        raise InvalidRequestException(INVALID_PRIORITY_MESSAGE)
    return priority
