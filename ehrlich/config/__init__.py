"""EHRLICH — Модуль конфігурації"""
from .settings import (
    EhrlichConfig,
    get_default_config,
    CertaintyConfig,
    AnswerConfig,
    EngineConfig,
    CombinationStrategy,
)
from .loader import save_config, load_config, save_yaml, load_yaml, config_from_dict

__all__ = [
    "EhrlichConfig",
    "get_default_config",
    "CertaintyConfig",
    "AnswerConfig",
    "EngineConfig",
    "CombinationStrategy",
    "save_config",
    "load_config",
    "save_yaml",
    "load_yaml",
    "config_from_dict",
]
