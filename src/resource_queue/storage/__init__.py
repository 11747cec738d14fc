"""
Модуль документного хранилища.

Описывает контракт хранения, которому должен удовлетворять внешний слой
персистентности, и его реализации в памяти и в JSON-файле.
"""

from . import infrastructure, interfaces

__all__ = [
    "interfaces",
    "infrastructure",
]
