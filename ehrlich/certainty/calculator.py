"""
EHRLICH — Обчислення certainty factor

Три операції, без стану сесії:
- adjusted_weight(weight, affirmed): вага симптому з урахуванням відповіді
- combine(old_cf, evidence): оновлений CF хвороби
- normalize_answer(symptom, raw, age, thresholds): відповідь -> (affirmed, emergency_hit)

Формула оновлення підключається через CombinationStrategy:

    MYCIN:
        CF, W >= 0        -> CF + W * (1 - CF)
        CF, W <  0        -> CF + W * (1 + CF)
        різні знаки       -> (CF + W) / (1 - min(|CF|, |W|))

    ADDITIVE:
        clip(CF + W, cf_min, cf_max)

Движок застосовує combine послідовно, у порядку відповідей.
"""

import math
from typing import NamedTuple, Optional, Union

from ehrlich.config import AnswerConfig, CertaintyConfig, CombinationStrategy
from ehrlich.exceptions import InvalidAnswer
from ehrlich.schemas import SymptomKind, SymptomSpec, Thresholds


RawAnswer = Union[str, bool, int, float]


class NormalizedAnswer(NamedTuple):
    """Відповідь, зведена до так/ні"""
    affirmed: bool
    emergency_hit: bool
    value: Optional[float] = None  # числове значення для температури / пульсу


class CertaintyCalculator:
    """
    Базовий калькулятор (формула MYCIN).
    
    Приклад:
        calc = CertaintyCalculator()
        
        answer = calc.normalize_answer(fever, "39.5", patient_age=10, thresholds=t)
        evidence = calc.adjusted_weight(fever.weight, answer.affirmed)
        new_cf = calc.combine(0.0, evidence)
    """
    
    strategy = CombinationStrategy.MYCIN
    
    def __init__(
        self,
        config: Optional[CertaintyConfig] = None,
        answers: Optional[AnswerConfig] = None
    ):
        self.config = config or CertaintyConfig()
        self.answers = answers or AnswerConfig()
        
        self._affirmative = {t.strip().lower() for t in self.answers.affirmative}
        self._negative = {t.strip().lower() for t in self.answers.negative}
        
        overlap = self._affirmative & self._negative
        if overlap:
            raise ValueError(f"Answer tokens are both affirmative and negative: {sorted(overlap)}")
    
    # =========================================================================
    # EVIDENCE
    # =========================================================================
    
    def adjusted_weight(self, weight: float, affirmed: bool) -> float:
        """Відповідь "так" -> +weight, "ні" -> -weight * denial_factor"""
        if affirmed:
            return weight
        return -weight * self.config.denial_factor
    
    def combine(self, old_cf: float, evidence: float) -> float:
        """Об'єднати поточний CF з новим свідченням"""
        if old_cf >= 0 and evidence >= 0:
            new_cf = old_cf + evidence * (1 - old_cf)
        elif old_cf < 0 and evidence < 0:
            new_cf = old_cf + evidence * (1 + old_cf)
        else:
            denominator = 1 - min(abs(old_cf), abs(evidence))
            # CF = +1 і W = -1 (або навпаки): повна суперечність
            new_cf = (old_cf + evidence) / denominator if denominator > 0 else 0.0
        
        return self._clip(new_cf)
    
    def _clip(self, cf: float) -> float:
        return max(self.config.cf_min, min(self.config.cf_max, cf))
    
    # =========================================================================
    # ANSWERS
    # =========================================================================
    
    def normalize_answer(
        self,
        symptom: SymptomSpec,
        raw_answer: RawAnswer,
        patient_age: float,
        thresholds: Thresholds
    ) -> NormalizedAnswer:
        """
        Звести відповідь до (affirmed, emergency_hit).
        
        Args:
            symptom: Симптом, на який відповідають
            raw_answer: "yes" / "no" або число для температури і пульсу
            patient_age: Вік пацієнта (поріг брадикардії залежить від віку)
            thresholds: Пороги бази знань
            
        Raises:
            InvalidAnswer: відповідь не розпізнано
        """
        if symptom.kind == SymptomKind.FEVER:
            value = self.parse_numeric(raw_answer)
            return NormalizedAnswer(
                affirmed=value >= thresholds.fever_diagnosis,
                emergency_hit=value >= thresholds.fever_emergency,
                value=value,
            )
        
        if symptom.kind == SymptomKind.HEART_RATE:
            value = self.parse_numeric(raw_answer)
            if patient_age < thresholds.adult_age:
                diagnosis_rate = thresholds.slow_heart_rate_child
            else:
                diagnosis_rate = thresholds.slow_heart_rate_adult
            return NormalizedAnswer(
                affirmed=value < diagnosis_rate,
                emergency_hit=value < thresholds.slow_heart_rate_emergency,
                value=value,
            )
        
        affirmed = self.parse_boolean(raw_answer)
        
        if symptom.kind == SymptomKind.CRITICAL:
            return NormalizedAnswer(affirmed=affirmed, emergency_hit=affirmed)
        
        return NormalizedAnswer(affirmed=affirmed, emergency_hit=False)
    
    def parse_boolean(self, raw_answer: RawAnswer) -> bool:
        if isinstance(raw_answer, bool):
            return raw_answer
        
        token = str(raw_answer).strip().lower()
        if token in self._affirmative:
            return True
        if token in self._negative:
            return False
        
        raise InvalidAnswer(f"Expected yes or no, got {raw_answer!r}", raw_answer=str(raw_answer))
    
    @staticmethod
    def parse_numeric(raw_answer: RawAnswer) -> float:
        """Невід'ємне скінченне число"""
        if isinstance(raw_answer, bool):
            raise InvalidAnswer("Expected a number, got a yes/no answer", raw_answer=str(raw_answer))
        
        try:
            value = float(str(raw_answer).strip())
        except ValueError:
            raise InvalidAnswer(f"Expected a number, got {raw_answer!r}", raw_answer=str(raw_answer))
        
        if not math.isfinite(value) or value < 0:
            raise InvalidAnswer(f"Expected a non-negative number, got {raw_answer!r}", raw_answer=str(raw_answer))
        
        return value
    
    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"strategy={self.strategy.value}, "
            f"denial_factor={self.config.denial_factor}"
            f")"
        )


class MycinCalculator(CertaintyCalculator):
    """Формула MYCIN (за замовчуванням)"""
    strategy = CombinationStrategy.MYCIN


class AdditiveCalculator(CertaintyCalculator):
    """Просте додавання з обрізанням до [cf_min, cf_max]"""
    
    strategy = CombinationStrategy.ADDITIVE
    
    def combine(self, old_cf: float, evidence: float) -> float:
        return self._clip(old_cf + evidence)


_CALCULATORS = {
    CombinationStrategy.MYCIN: MycinCalculator,
    CombinationStrategy.ADDITIVE: AdditiveCalculator,
}


def create_calculator(
    config: Optional[CertaintyConfig] = None,
    answers: Optional[AnswerConfig] = None
) -> CertaintyCalculator:
    """Створити калькулятор за стратегією з конфігурації"""
    config = config or CertaintyConfig()
    return _CALCULATORS[CombinationStrategy(config.strategy)](config, answers)


# =============================================================================
# MODULE-LEVEL SHORTCUTS (стратегія за замовчуванням)
# =============================================================================

_default = MycinCalculator()


def adjusted_weight(weight: float, affirmed: bool) -> float:
    return _default.adjusted_weight(weight, affirmed)


def combine(old_cf: float, evidence: float) -> float:
    return _default.combine(old_cf, evidence)


def normalize_answer(
    symptom: SymptomSpec,
    raw_answer: RawAnswer,
    patient_age: float,
    thresholds: Thresholds
) -> NormalizedAnswer:
    return _default.normalize_answer(symptom, raw_answer, patient_age, thresholds)
