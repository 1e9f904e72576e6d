# impactsite/config/__init__.py
from __future__ import annotations

from typing import Dict, Type

from .config import BaseConfig, DevelopmentConfig, ProductionConfig, TestingConfig

# ---------------------------------------------------------------------------
# Lookup by short name (APP_ENV / FLASK_CONFIG=development, ...)
# ---------------------------------------------------------------------------
CONFIG_BY_NAME: Dict[str, Type[BaseConfig]] = {
    "base": BaseConfig,
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}

__all__ = [
    "BaseConfig",
    "DevelopmentConfig",
    "TestingConfig",
    "ProductionConfig",
    "CONFIG_BY_NAME",
]
