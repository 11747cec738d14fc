"""
Модуль контекста ресурсов (Resource Registry).

Отвечает за создание, поиск и мягкое удаление ресурсов команды.
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
