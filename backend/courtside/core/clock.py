"""
Time source for date-boundary checks (no booking in the past).

Routes depend on `get_today` instead of reading the system clock directly,
so tests can pin "today" with a dependency override.
"""

from datetime import date


def get_today() -> date:
    return date.today()
