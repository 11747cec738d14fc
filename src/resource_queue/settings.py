"""
Настройки движка очередей ресурсов.

Значения читаются из переменных окружения с префиксом ``RESOURCE_QUEUE_``
и из файла ``.env`` в рабочем каталоге.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RESOURCE_QUEUE_", env_file=".env", extra="ignore"
    )

    storage_backend: Literal["memory", "json"] = Field("memory")
    storage_path: str = Field("data/resource_queue.json")
    transaction_max_attempts: int = Field(3, ge=1)
    # Проверять уникальность имени ресурса в одной транзакции с созданием
    strict_resource_names: bool = Field(True)
    log_level: str = Field("INFO")
    log_json: bool = Field(False)


def get_settings() -> Settings:
    """Читает настройки из окружения и файла ``.env``."""
    return Settings()
