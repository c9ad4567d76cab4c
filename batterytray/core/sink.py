"""Notification sink interface."""

from abc import ABC, abstractmethod


class NotificationSink(ABC):
    """Somewhere to show the rendered battery summary."""

    @abstractmethod
    def set_text(self, text: str) -> bool:
        """Display ``text``. Returns False if the surface rejected it."""
        ...
