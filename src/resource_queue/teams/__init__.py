"""
Модуль контекста команд (Team Directory).

Отвечает за регистрацию команд и хранение канала публикации статуса.
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
