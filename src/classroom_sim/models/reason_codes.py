"""
Condition Codes
===============

Fixed set of machine-readable condition codes for core operations.

Every operation that can be handed bad input returns one of these codes
instead of raising into the tick pipeline.

Rules:
    - No free-text explanations
    - One clear cause per code
    - Every condition is recoverable locally
"""

from enum import Enum


class ConditionCode(str, Enum):
    """
    Machine-readable outcome codes.

    Attributes:
        OK: Operation applied
        INVALID_REFERENCE: Index, id or mode name not present; state unchanged
        CLOCK_REGRESSION: Tick timestamp earlier than the last one; tick skipped
        FALLBACK_SELECTION: Candidate set fully excluded; first candidate used
        CANCELLED: Pending swap selection cancelled by tapping the same slot
        PENDING: Swap selection waiting for its second slot
        IGNORED: Input intentionally dropped (e.g. empty slot tapped while idle)
    """

    OK = "OK"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    CLOCK_REGRESSION = "CLOCK_REGRESSION"
    FALLBACK_SELECTION = "FALLBACK_SELECTION"

    # Swap selection states
    CANCELLED = "CANCELLED"
    PENDING = "PENDING"
    IGNORED = "IGNORED"
