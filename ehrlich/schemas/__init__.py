"""
EHRLICH — Модуль схем даних (schemas)

Pydantic моделі для валідації та серіалізації даних.

Компоненти:
- patient.py: Sex, Patient
- knowledge.py: SymptomKind, SymptomSpec, DiseaseSpec, Thresholds, DiagnosisTemplates, KnowledgeBase
- diagnosis.py: ConfidenceLevel, RankedDisease, DiagnosisReport

Приклад використання:
    from ehrlich.schemas import Patient, Sex, KnowledgeBase
    
    patient = Patient(name="Juan", age=35, sex=Sex.MALE)
    kb = KnowledgeBase.model_validate(yaml.safe_load(text))
"""

# Patient schemas
from .patient import (
    Sex,
    Patient,
)

# Knowledge schemas
from .knowledge import (
    SymptomKind,
    SymptomSpec,
    DiseaseSpec,
    Thresholds,
    DiagnosisTemplates,
    KnowledgeBase,
)

# Diagnosis schemas
from .diagnosis import (
    ConfidenceLevel,
    RankedDisease,
    DiagnosisReport,
)


__all__ = [
    # Patient
    "Sex",
    "Patient",
    
    # Knowledge
    "SymptomKind",
    "SymptomSpec",
    "DiseaseSpec",
    "Thresholds",
    "DiagnosisTemplates",
    "KnowledgeBase",
    
    # Diagnosis
    "ConfidenceLevel",
    "RankedDisease",
    "DiagnosisReport",
]
