"""
Модуль контекста бронирований (Booking Queue).

Отвечает за очередь запросов на ресурс:
- Постановку в очередь в порядке поступления
- Освобождение ресурса и передачу его следующему в очереди
- Вычисление состояния очереди
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
