"""Quiz-related constants shared across core and server layers."""

OPTION_COUNT: int = 4
OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")
PASSING_PERCENTAGE: float = 70.0
COMPLETION_HISTORY_CAPACITY: int = 1000
