"""Assessment-related constants shared across the engine and the server."""

DEFAULT_DURATION_SECONDS: int = 1800
TICK_INTERVAL_MS: int = 1000
DEFAULT_QUIZ_DIRECTORY: str = "quizzes"

# (minimum score percent, message), checked from the top.
PERFORMANCE_TIERS: tuple[tuple[int, str], ...] = (
    (90, "Excellent! Outstanding performance!"),
    (80, "Great job! You're doing well!"),
    (70, "Good work! Keep practicing!"),
    (0, "Keep studying! You'll improve!"),
)
