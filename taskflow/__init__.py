"""TaskFlow: session-authenticated personal task API."""

__version__ = "1.0.0"
