"""
Движок бронирования общих ресурсов команды.

Отслеживает, кто сейчас владеет каждым ресурсом и кто ждет своей очереди,
и обеспечивает монопольный доступ к ресурсу в порядке поступления запросов.
"""

from .bootstrap import bootstrap_app
from .commands import ResourceQueueCommands, ResourceWithBookings

__all__ = [
    "bootstrap_app",
    "ResourceQueueCommands",
    "ResourceWithBookings",
]
