"""User-facing notifications raised by the pagination controller."""

from typing import List, Protocol, Tuple

from config.logging_config import get_logger

logger = get_logger("pagination.notifications")


class Notifier(Protocol):
    """Toast-style sink for messages the user should see."""

    def info(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Notifier that writes messages to the application log."""

    def info(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


class RecordingNotifier:
    """Notifier that keeps messages in memory, for consoles and tests."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    @property
    def errors(self) -> List[str]:
        return [message for level, message in self.messages if level == "error"]
