"""
EHRLICH — Модуль certainty factor (certainty)

Чисті функції без стану сесії.

Компоненти:
- CertaintyCalculator / MycinCalculator / AdditiveCalculator
- create_calculator: калькулятор за CertaintyConfig.strategy
- adjusted_weight, combine, normalize_answer: скорочення для MYCIN

Приклад використання:
    from ehrlich.certainty import combine, adjusted_weight
    
    cf = 0.0
    cf = combine(cf, adjusted_weight(0.6, affirmed=True))   # 0.6
    cf = combine(cf, adjusted_weight(0.4, affirmed=True))   # 0.76
"""

from .calculator import (
    CertaintyCalculator,
    MycinCalculator,
    AdditiveCalculator,
    NormalizedAnswer,
    create_calculator,
    adjusted_weight,
    combine,
    normalize_answer,
)


__all__ = [
    "CertaintyCalculator",
    "MycinCalculator",
    "AdditiveCalculator",
    "NormalizedAnswer",
    "create_calculator",
    "adjusted_weight",
    "combine",
    "normalize_answer",
]
