"""
EHRLICH — Схеми бази знань

Pydantic моделі для:
- SymptomKind: тип питання (дихотомічне / температура / пульс / критичне)
- SymptomSpec: симптом з вагою та текстом питання
- DiseaseSpec: хвороба з упорядкованим списком симптомів
- Thresholds: глобальні пороги бази знань
- DiagnosisTemplates: шаблони фінального діагнозу
- KnowledgeBase: повний каталог (файл YAML/JSON)
"""

from typing import Dict, List, Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator


class SymptomKind(str, Enum):
    """Тип симптому"""
    BOOLEAN = "boolean"          # так / ні
    FEVER = "fever"              # температура тіла, °C
    HEART_RATE = "heart_rate"    # пульс, уд/хв
    CRITICAL = "critical"        # так / ні, "так" = невідкладний стан (біль у грудях)
    
    @property
    def is_numeric(self) -> bool:
        return self in (SymptomKind.FEVER, SymptomKind.HEART_RATE)


class SymptomSpec(BaseModel):
    """
    Симптом бази знань.
    
    Вага глобальна для симптому; хвороба може перевизначити її
    через DiseaseSpec.symptom_weights.
    """
    symptom_id: str = Field(..., description="Ідентифікатор симптому")
    text: str = Field(..., description="Текст питання")
    weight: float = Field(..., ge=0.0, le=1.0, description="Вага симптому")
    kind: SymptomKind = Field(default=SymptomKind.BOOLEAN)
    
    # Застосовність
    female_only: bool = Field(default=False, description="Тільки для пацієнток")
    pediatric_only: bool = Field(default=False, description="Тільки для дітей")
    
    @property
    def is_numeric(self) -> bool:
        return self.kind.is_numeric
    
    class Config:
        frozen = True


class DiseaseSpec(BaseModel):
    """Хвороба: порядок симптомів значущий і задається базою знань"""
    disease_id: str = Field(..., description="Ідентифікатор хвороби")
    full_name: str = Field(..., description="Повна назва")
    symptoms: List[str] = Field(default_factory=list, description="Упорядковані ID симптомів")
    initial_cf: float = Field(default=0.0, ge=-1.0, le=1.0)
    symptom_weights: Dict[str, float] = Field(
        default_factory=dict,
        description="Вага симптому саме для цієї хвороби (замість глобальної)"
    )
    
    @field_validator('symptoms')
    @classmethod
    def no_duplicates(cls, v: List[str]) -> List[str]:
        if len(set(v)) != len(v):
            raise ValueError("duplicate symptom ids in disease")
        return v
    
    @model_validator(mode='after')
    def check_weights(self) -> "DiseaseSpec":
        unknown = [s for s in self.symptom_weights if s not in self.symptoms]
        if unknown:
            raise ValueError(f"symptom_weights for symptoms not in disease: {unknown}")
        if any(not 0.0 <= w <= 1.0 for w in self.symptom_weights.values()):
            raise ValueError("symptom weights must be within [0, 1]")
        return self
    
    class Config:
        frozen = True


class Thresholds(BaseModel):
    """
    Глобальні пороги бази знань.
    
    Температура: >= fever_emergency -> невідкладний стан, >= fever_diagnosis -> "так".
    Пульс: < slow_heart_rate_emergency -> невідкладний стан,
           < slow_heart_rate_child / _adult -> "так" (брадикардія).
    """
    adult_age: float = Field(default=19.0, ge=0.0)
    
    fever_emergency: float = Field(default=40.0)
    fever_diagnosis: float = Field(default=37.5)
    
    slow_heart_rate_emergency: float = Field(default=40.0)
    slow_heart_rate_child: float = Field(default=70.0)
    slow_heart_rate_adult: float = Field(default=60.0)
    
    cf_remove: float = Field(default=-0.2, ge=-1.0, le=1.0)
    cf_conclude: float = Field(default=0.8, ge=-1.0, le=1.0)
    
    @model_validator(mode='after')
    def check_order(self) -> "Thresholds":
        if self.cf_remove >= self.cf_conclude:
            raise ValueError("cf_remove must be below cf_conclude")
        if self.fever_diagnosis > self.fever_emergency:
            raise ValueError("fever_diagnosis must not exceed fever_emergency")
        return self
    
    class Config:
        frozen = True


class DiagnosisTemplates(BaseModel):
    """
    Шаблони фінального діагнозу (str.format).
    
    Поля: {patient_name}, {disease}, {confidence}, {qualifier}
    """
    diagnosis: str = Field(
        default="{patient_name}, you {qualifier} have {disease} (certainty factor {confidence:.2f})."
    )
    inconclusive: str = Field(
        default=(
            "{patient_name}, no disease in the knowledge base could be established with enough "
            "certainty. Please consult a larger hospital for a more thorough diagnosis."
        )
    )
    emergency_notice: str = Field(
        default="EMERGENCY! Immediate medical attention is required."
    )
    referral_threshold: float = Field(default=0.2)
    
    class Config:
        frozen = True


class KnowledgeBase(BaseModel):
    """
    Повний каталог бази знань.
    
    Приклад (YAML):
        thresholds:
          adult_age: 19
          cf_remove: -0.2
          cf_conclude: 0.8
        symptoms:
          fever: {text: "Body temperature (°C)?", weight: 0.6, kind: fever}
        diseases:
          - {disease_id: sle, full_name: Systemic lupus erythematosus, symptoms: [fever]}
    """
    thresholds: Thresholds = Field(default_factory=Thresholds)
    templates: DiagnosisTemplates = Field(default_factory=DiagnosisTemplates)
    symptoms: Dict[str, SymptomSpec] = Field(default_factory=dict)
    diseases: List[DiseaseSpec] = Field(default_factory=list)
    
    @model_validator(mode='before')
    @classmethod
    def fill_symptom_ids(cls, data):
        """Ключ словника symptoms стає symptom_id"""
        if isinstance(data, dict) and isinstance(data.get("symptoms"), dict):
            symptoms = {}
            for key, spec in data["symptoms"].items():
                if isinstance(spec, dict):
                    spec = {"symptom_id": key, **spec}
                symptoms[key] = spec
            data = {**data, "symptoms": symptoms}
        return data
    
    @model_validator(mode='after')
    def check_references(self) -> "KnowledgeBase":
        seen = set()
        for disease in self.diseases:
            if disease.disease_id in seen:
                raise ValueError(f"duplicate disease id: {disease.disease_id}")
            seen.add(disease.disease_id)
            
            unknown = [s for s in disease.symptoms if s not in self.symptoms]
            if unknown:
                raise ValueError(f"disease {disease.disease_id} references unknown symptoms: {unknown}")
        return self
    
    def get_disease(self, disease_id: str) -> Optional[DiseaseSpec]:
        for disease in self.diseases:
            if disease.disease_id == disease_id:
                return disease
        return None
