"""
EHRLICH — Налаштування системи

Всі параметри движка зібрані в dataclass-и для:
- Типізації
- Легкого доступу через config.certainty.denial_factor
- Серіалізації в YAML

Пороги діагностики (CF_REMOVE, CF_CONCLUDE, температура, пульс) сюди НЕ входять:
вони належать базі знань і приходять через KnowledgeProvider.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================

class CombinationStrategy(str, Enum):
    """Формула оновлення certainty factor"""
    MYCIN = "mycin"          # CF + W(1 - CF), змішані знаки через min(|CF|, |W|)
    ADDITIVE = "additive"    # CF + W з обрізанням до [cf_min, cf_max]


# =============================================================================
# CERTAINTY CONFIGURATION
# =============================================================================

@dataclass
class CertaintyConfig:
    """Параметри обчислення certainty factor"""
    
    strategy: CombinationStrategy = CombinationStrategy.MYCIN
    
    # Заперечна відповідь дає -weight * denial_factor
    denial_factor: float = 1.0
    
    # Межі CF
    cf_min: float = -1.0
    cf_max: float = 1.0


# =============================================================================
# ANSWER CONFIGURATION
# =============================================================================

@dataclass
class AnswerConfig:
    """Допустимі відповіді на дихотомічні питання (без урахування регістру)"""
    
    affirmative: List[str] = field(default_factory=lambda: ["yes", "y", "true", "1", "oo"])
    negative: List[str] = field(default_factory=lambda: ["no", "n", "false", "0", "hindi"])


# =============================================================================
# ENGINE CONFIGURATION
# =============================================================================

@dataclass
class EngineConfig:
    """Параметри сесії діагностики"""
    
    # Відповідь оновлює всі хвороби, що ще містять симптом
    shared_evidence: bool = True
    
    # Відображення
    cf_precision: int = 2
    top_n_ranking: int = 5


# =============================================================================
# MAIN CONFIGURATION
# =============================================================================

@dataclass
class EhrlichConfig:
    """
    Головна конфігурація EHRLICH
    
    Приклад використання:
        config = EhrlichConfig()
        print(config.certainty.strategy)  # CombinationStrategy.MYCIN
        print(config.engine.shared_evidence)  # True
    """
    
    # Метадані
    version: str = "0.1.0"
    project_name: str = "EHRLICH"
    
    # База знань
    knowledge_path: Optional[str] = None
    
    # Компоненти
    certainty: CertaintyConfig = field(default_factory=CertaintyConfig)
    answers: AnswerConfig = field(default_factory=AnswerConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)


# =============================================================================
# DEFAULT CONFIG INSTANCE
# =============================================================================

def get_default_config() -> EhrlichConfig:
    """Отримати конфігурацію за замовчуванням"""
    return EhrlichConfig()
