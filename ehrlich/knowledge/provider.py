"""
EHRLICH — Інтерфейс бази знань

KnowledgeProvider: абстракція над сховищем знань. Движок читає через неї:
- каталог хвороб у фіксованому порядку
- упорядковані симптоми кожної хвороби
- ваги, типи та тексти питань симптомів
- глобальні пороги
- шаблон фінального діагнозу

Провайдер незмінний після завантаження і може спільно використовуватись
кількома сесіями тільки на читання.
"""

from abc import ABC, abstractmethod
from typing import List

from ehrlich.schemas import DiseaseSpec, SymptomSpec, Thresholds


class KnowledgeProvider(ABC):
    """
    Контракт бази знань.
    
    Реалізація: CatalogKnowledgeProvider (ehrlich.knowledge.catalog).
    """
    
    # === Каталог ===
    
    @abstractmethod
    def disease_count(self) -> int:
        """Кількість хвороб"""
    
    @abstractmethod
    def disease_at(self, index: int) -> DiseaseSpec:
        """Хвороба за індексом 0..disease_count()-1 (стабільний порядок)"""
    
    @abstractmethod
    def symptoms_of(self, disease_id: str) -> List[SymptomSpec]:
        """Упорядковані симптоми хвороби"""
    
    @abstractmethod
    def symptom(self, symptom_id: str) -> SymptomSpec:
        """Опис симптому"""
    
    def weight_of(self, symptom_id: str) -> float:
        return self.symptom(symptom_id).weight
    
    def weight_for(self, disease_id: str, symptom_id: str) -> float:
        """Вага симптому в контексті хвороби (за замовчуванням глобальна)"""
        return self.weight_of(symptom_id)
    
    def display_text_of(self, symptom_id: str) -> str:
        return self.symptom(symptom_id).text
    
    def full_name_of(self, disease_id: str) -> str:
        for index in range(self.disease_count()):
            disease = self.disease_at(index)
            if disease.disease_id == disease_id:
                return disease.full_name
        raise KeyError(disease_id)
    
    # === Пороги ===
    
    @abstractmethod
    def thresholds(self) -> Thresholds:
        """Всі глобальні пороги одним об'єктом"""
    
    def adult_age_cutoff(self) -> float:
        return self.thresholds().adult_age
    
    def cf_remove(self) -> float:
        return self.thresholds().cf_remove
    
    def cf_conclude(self) -> float:
        return self.thresholds().cf_conclude
    
    def fever_emergency(self) -> float:
        return self.thresholds().fever_emergency
    
    def fever_diagnosis(self) -> float:
        return self.thresholds().fever_diagnosis
    
    def slow_heart_rate_emergency(self) -> float:
        return self.thresholds().slow_heart_rate_emergency
    
    def slow_heart_rate_child(self) -> float:
        return self.thresholds().slow_heart_rate_child
    
    def slow_heart_rate_adult(self) -> float:
        return self.thresholds().slow_heart_rate_adult
    
    # === Діагноз ===
    
    @abstractmethod
    def diagnosis_template(
        self,
        patient_name: str,
        max_cf: float,
        disease_id: str,
        emergency: bool
    ) -> str:
        """Текст фінального діагнозу"""
    
    # === Життєвий цикл ===
    
    @abstractmethod
    def reset(self) -> None:
        """Повернути провайдер до початкового стану (перед рестартом сесії)"""
