"""
EHRLICH — Каталог бази знань

CatalogKnowledgeProvider: KnowledgeProvider поверх KnowledgeBase,
завантаженої з YAML / JSON файлу або зі словника.

Структура файлу:
    thresholds: {adult_age, fever_emergency, fever_diagnosis,
                 slow_heart_rate_emergency, slow_heart_rate_child,
                 slow_heart_rate_adult, cf_remove, cf_conclude}
    templates:  {diagnosis, inconclusive, emergency_notice, referral_threshold}
    symptoms:   {symptom_id: {text, weight, kind, female_only, pediatric_only}}
    diseases:   [{disease_id, full_name, symptoms: [...], initial_cf, symptom_weights}]
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from ehrlich.exceptions import ProviderUnavailable
from ehrlich.schemas import (
    ConfidenceLevel,
    DiseaseSpec,
    KnowledgeBase,
    SymptomSpec,
    Thresholds,
)

from .provider import KnowledgeProvider


class CatalogKnowledgeProvider(KnowledgeProvider):
    """
    База знань у пам'яті.
    
    Приклад використання:
        provider = CatalogKnowledgeProvider.from_file("data/knowledge_base.yaml")
        
        print(f"Хвороб: {provider.disease_count()}")
        for symptom in provider.symptoms_of("sle"):
            print(symptom.symptom_id, symptom.weight)
    """
    
    def __init__(self, raw_data: Dict[str, Any], source: Optional[str] = None):
        """
        Args:
            raw_data: Словник у форматі файлу бази знань
            source: Звідки завантажено (для повідомлень)
        """
        self.source = source
        self._raw_data = copy.deepcopy(raw_data)
        self._kb: KnowledgeBase = None
        self._index: Dict[str, int] = {}
        self._symptom_to_diseases: Dict[str, List[str]] = {}
        self.reset_count = 0
        
        self._load()
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogKnowledgeProvider":
        return cls(data, source="<dict>")
    
    @classmethod
    def from_file(cls, path: str) -> "CatalogKnowledgeProvider":
        """
        Завантажити з .yaml / .yml / .json.
        
        Raises:
            ProviderUnavailable: файл відсутній або має невалідний формат
        """
        path = Path(path)
        if not path.exists():
            raise ProviderUnavailable(f"Knowledge base file not found: {path}")
        
        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ProviderUnavailable(f"Cannot read knowledge base {path}: {e}", cause=e) from e
        
        if not isinstance(data, dict):
            raise ProviderUnavailable(f"Knowledge base {path} must be a mapping")
        
        return cls(data, source=str(path))
    
    def _load(self) -> None:
        """Провалідувати та проіндексувати дані"""
        try:
            self._kb = KnowledgeBase.model_validate(copy.deepcopy(self._raw_data))
        except ValidationError as e:
            raise ProviderUnavailable(f"Invalid knowledge base ({self.source}): {e}", cause=e) from e
        
        self._index = {d.disease_id: i for i, d in enumerate(self._kb.diseases)}
        
        # Індекс symptom → diseases
        self._symptom_to_diseases = {}
        for disease in self._kb.diseases:
            for symptom_id in disease.symptoms:
                self._symptom_to_diseases.setdefault(symptom_id, []).append(disease.disease_id)
    
    # === KnowledgeProvider ===
    
    def disease_count(self) -> int:
        return len(self._kb.diseases)
    
    def disease_at(self, index: int) -> DiseaseSpec:
        if not 0 <= index < len(self._kb.diseases):
            raise IndexError(f"Disease index out of range: {index}")
        return self._kb.diseases[index]
    
    def symptoms_of(self, disease_id: str) -> List[SymptomSpec]:
        disease = self.get_disease(disease_id)
        if disease is None:
            raise KeyError(disease_id)
        return [self._kb.symptoms[s] for s in disease.symptoms]
    
    def symptom(self, symptom_id: str) -> SymptomSpec:
        return self._kb.symptoms[symptom_id]
    
    def weight_for(self, disease_id: str, symptom_id: str) -> float:
        disease = self.get_disease(disease_id)
        if disease is not None and symptom_id in disease.symptom_weights:
            return disease.symptom_weights[symptom_id]
        return self.symptom(symptom_id).weight
    
    def full_name_of(self, disease_id: str) -> str:
        disease = self.get_disease(disease_id)
        if disease is None:
            raise KeyError(disease_id)
        return disease.full_name
    
    def thresholds(self) -> Thresholds:
        return self._kb.thresholds
    
    def diagnosis_template(
        self,
        patient_name: str,
        max_cf: float,
        disease_id: str,
        emergency: bool
    ) -> str:
        """
        Текст діагнозу.
        
        Якщо max_cf нижче referral_threshold, рекомендація звернутися до
        більшої лікарні; при невідкладному стані додається попередження.
        """
        templates = self._kb.templates
        fields = {
            "patient_name": patient_name,
            "disease": self.full_name_of(disease_id),
            "confidence": max_cf,
            "qualifier": ConfidenceLevel.from_cf(max_cf).qualifier,
        }
        
        if max_cf < templates.referral_threshold:
            text = templates.inconclusive.format(**fields)
        else:
            text = templates.diagnosis.format(**fields)
        
        if emergency:
            text = f"{templates.emergency_notice.format(**fields)}\n\n{text}"
        
        return text
    
    def reset(self) -> None:
        """Перебудувати каталог з початкових даних"""
        self._load()
        self.reset_count += 1
    
    # === Додаткові запити ===
    
    @property
    def knowledge_base(self) -> KnowledgeBase:
        return self._kb
    
    @property
    def disease_ids(self) -> List[str]:
        return [d.disease_id for d in self._kb.diseases]
    
    def get_disease(self, disease_id: str) -> Optional[DiseaseSpec]:
        index = self._index.get(disease_id)
        return self._kb.diseases[index] if index is not None else None
    
    def get_diseases_by_symptom(self, symptom_id: str) -> List[str]:
        """Всі хвороби, що мають цей симптом"""
        return list(self._symptom_to_diseases.get(symptom_id, []))
    
    def get_statistics(self) -> Dict:
        """Статистика бази знань"""
        counts = [len(d.symptoms) for d in self._kb.diseases]
        return {
            "disease_count": len(counts),
            "symptom_count": len(self._kb.symptoms),
            "avg_symptoms_per_disease": sum(counts) / len(counts) if counts else 0,
            "min_symptoms": min(counts) if counts else 0,
            "max_symptoms": max(counts) if counts else 0,
        }
    
    def __repr__(self) -> str:
        return (
            f"CatalogKnowledgeProvider("
            f"diseases={self.disease_count()}, "
            f"symptoms={len(self._kb.symptoms)}, "
            f"source={self.source}"
            f")"
        )
