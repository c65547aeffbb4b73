"""Executive Assistant backend: meeting scheduling, unread email drafting and chat."""

__version__ = "1.0.0"
