"""
EHRLICH — Схеми даних пацієнта

Pydantic моделі для:
- Sex: біологічна стать (впливає на фільтрацію симптомів)
- Patient: ім'я, вік, стать; незмінні після старту сесії
"""

from enum import Enum
from pydantic import BaseModel, Field, field_validator


class Sex(str, Enum):
    """Стать пацієнта"""
    MALE = "male"
    FEMALE = "female"


class Patient(BaseModel):
    """
    Дані пацієнта.
    
    Приклад:
        patient = Patient(name="Juan", age=10, sex=Sex.FEMALE)
        patient.is_adult(19)  # False
    """
    name: str = Field(..., min_length=1, description="Ім'я пацієнта")
    age: float = Field(..., ge=0.0, description="Вік (роки)")
    sex: Sex = Field(..., description="Стать")
    
    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v
    
    @field_validator('sex', mode='before')
    @classmethod
    def normalize_sex(cls, v):
        """'Male' / 'FEMALE' -> Sex"""
        if isinstance(v, str):
            return v.strip().lower()
        return v
    
    def is_adult(self, adult_age_cutoff: float) -> bool:
        """Чи вважається пацієнт дорослим"""
        return self.age >= adult_age_cutoff
    
    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "Juan dela Cruz",
                "age": 35,
                "sex": "male"
            }
        }
