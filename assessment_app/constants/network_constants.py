"""Network configuration constants for the assessment server."""

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000
API_TITLE: str = "TimedQuiz API"
API_VERSION: str = "0.1.0"
