"""Time-of-day keyword detection.

Hides how free-text input is recognized as a request for a medication schedule.
"""

from enum import Enum


class Period(str, Enum):
    """Schedule periods a user can ask for by name."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NO_MATCH = "no_match"

    @property
    def is_match(self) -> bool:
        return self is not Period.NO_MATCH


_KEYWORDS = {
    Period.MORNING.value: Period.MORNING,
    Period.AFTERNOON.value: Period.AFTERNOON,
    Period.EVENING.value: Period.EVENING,
}


def classify(text: str) -> Period:
    """Classify user input as a schedule period.

    Only an exact keyword (after trimming and case-folding) matches, so
    "Morning " is MORNING but "morning routine" is NO_MATCH.

    Args:
        text: Raw user input

    Returns:
        The matched Period, or Period.NO_MATCH
    """
    return _KEYWORDS.get(text.strip().casefold(), Period.NO_MATCH)
