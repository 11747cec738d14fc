"""
Модуль контекста статуса (Status Publisher).

Строит строки статуса ресурсов и публикует их во внешний канал.
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
