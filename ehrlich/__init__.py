"""
EHRLICH — Експертна система медичної діагностики

Архітектура: база знань + certainty factors (у традиції MYCIN) + покроковий опитувальник

Модулі:
- config: Конфігурація системи
- schemas: Pydantic моделі (пацієнт, симптоми, хвороби, пороги)
- knowledge: Інтерфейс бази знань та каталог
- certainty: Обчислення certainty factor
- diagnosis_engine: Сесія діагностики (state machine) та звіти
- api: Backend API
"""

__version__ = "0.1.0"

from .config import EhrlichConfig, get_default_config
