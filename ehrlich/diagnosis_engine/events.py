"""
EHRLICH — Події сесії

submit() повертає рівно одну подію:
- NextQuestion: наступне питання
- Diagnosed: фінальний діагноз
- InvalidInput: відповідь не розпізнано, стан не змінився
- EmergencyRaised: прапорець невідкладного стану щойно встановлено;
  follow_up: NextQuestion або Diagnosed, яку інакше повернув би виклик
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

from ehrlich.schemas import DiagnosisReport


@dataclass(frozen=True)
class NextQuestion:
    text: str
    symptom_id: str
    disease_id: str
    is_numeric_prompt: bool = False
    
    type = "next_question"
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "text": self.text,
            "symptom_id": self.symptom_id,
            "disease_id": self.disease_id,
            "is_numeric_prompt": self.is_numeric_prompt,
        }


@dataclass(frozen=True)
class Diagnosed:
    report: DiagnosisReport
    
    type = "diagnosed"
    
    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "report": self.report.model_dump(mode="json")}


@dataclass(frozen=True)
class InvalidInput:
    reason: str
    question: NextQuestion
    
    type = "invalid_input"
    
    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "reason": self.reason, "question": self.question.to_dict()}


@dataclass(frozen=True)
class EmergencyRaised:
    follow_up: Union[NextQuestion, Diagnosed]
    
    type = "emergency_raised"
    
    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "follow_up": self.follow_up.to_dict()}


SessionEvent = Union[NextQuestion, Diagnosed, InvalidInput, EmergencyRaised]
