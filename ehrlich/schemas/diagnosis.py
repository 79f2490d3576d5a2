"""
EHRLICH — Схеми результатів діагностики

Pydantic моделі для:
- ConfidenceLevel: якісний опис certainty factor
- RankedDisease: хвороба з поточним CF
- DiagnosisReport: фінальний результат сесії
"""

from typing import List
from enum import Enum
from pydantic import BaseModel, Field


class ConfidenceLevel(str, Enum):
    """Рівень впевненості"""
    VERY_HIGH = "very_high"   # >= 0.8
    HIGH = "high"             # 0.6 - 0.8
    MEDIUM = "medium"         # 0.4 - 0.6
    LOW = "low"               # 0.2 - 0.4
    VERY_LOW = "very_low"     # < 0.2
    
    @classmethod
    def from_cf(cls, cf: float) -> "ConfidenceLevel":
        if cf >= 0.8:
            return cls.VERY_HIGH
        elif cf >= 0.6:
            return cls.HIGH
        elif cf >= 0.4:
            return cls.MEDIUM
        elif cf >= 0.2:
            return cls.LOW
        else:
            return cls.VERY_LOW
    
    @property
    def qualifier(self) -> str:
        """Словесний опис для шаблону діагнозу"""
        return {
            "very_high": "almost certainly",
            "high": "most likely",
            "medium": "probably",
            "low": "possibly",
            "very_low": "are unlikely to",
        }[self.value]


class RankedDisease(BaseModel):
    """Хвороба з її certainty factor"""
    rank: int = Field(..., ge=1)
    disease_id: str
    full_name: str
    cf: float


class DiagnosisReport(BaseModel):
    """
    Фінальний результат діагностики.
    
    confidence_percent = max(0, cf) * 100 навіть якщо жодна хвороба
    не досягла порогу CF_CONCLUDE.
    """
    patient_name: str
    disease_id: str = Field(..., description="Обрана хвороба (максимальний CF)")
    full_name: str
    cf: float = Field(..., description="CF обраної хвороби")
    confidence_percent: float = Field(..., ge=0.0, le=100.0)
    confidence_level: ConfidenceLevel
    emergency: bool = Field(default=False)
    concluded_early: bool = Field(
        default=False,
        description="Сесія завершена порогом CF_CONCLUDE, а не вичерпанням хвороб"
    )
    description: str = Field(..., description="Текст діагнозу з шаблону бази знань")
    ranking: List[RankedDisease] = Field(default_factory=list)
    questions_asked: int = Field(default=0, ge=0)
    
    class Config:
        json_schema_extra = {
            "example": {
                "patient_name": "Juan",
                "disease_id": "sle",
                "full_name": "Systemic lupus erythematosus",
                "cf": 0.86,
                "confidence_percent": 86.0,
                "confidence_level": "very_high",
                "emergency": False,
                "concluded_early": True,
                "description": "Juan, you almost certainly have Systemic lupus erythematosus (certainty factor 0.86).",
                "ranking": [],
                "questions_asked": 4
            }
        }
