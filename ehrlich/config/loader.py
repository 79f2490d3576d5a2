"""EHRLICH — Завантаження конфігурації"""
import yaml
from pathlib import Path
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict

from .settings import (
    EhrlichConfig,
    CertaintyConfig,
    AnswerConfig,
    EngineConfig,
    CombinationStrategy,
)


def _plain(value: Any) -> Any:
    """Enum -> str, щоб yaml.safe_load міг прочитати файл назад"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def save_yaml(config: EhrlichConfig, path: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(_plain(asdict(config)), f, default_flow_style=False, allow_unicode=True)


def load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def config_from_dict(data: Dict[str, Any]) -> EhrlichConfig:
    """Зібрати EhrlichConfig з вкладеного словника (невідомі ключі ігноруються)"""
    data = dict(data or {})
    
    certainty = dict(data.pop("certainty", None) or {})
    if "strategy" in certainty:
        certainty["strategy"] = CombinationStrategy(certainty["strategy"])
    answers = data.pop("answers", None) or {}
    engine = data.pop("engine", None) or {}
    
    top_level = {k: v for k, v in data.items() if k in ("version", "project_name", "knowledge_path")}
    
    return EhrlichConfig(
        certainty=CertaintyConfig(**certainty),
        answers=AnswerConfig(**answers),
        engine=EngineConfig(**engine),
        **top_level,
    )


def save_config(config: EhrlichConfig, path: str) -> None:
    save_yaml(config, path)


def load_config(path: str) -> EhrlichConfig:
    return config_from_dict(load_yaml(path))
