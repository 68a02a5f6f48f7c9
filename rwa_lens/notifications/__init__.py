"""Report and alert delivery channels."""
from .email import EmailNotifier
from .telegram import TelegramNotifier

__all__ = ["EmailNotifier", "TelegramNotifier"]
