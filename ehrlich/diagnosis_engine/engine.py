"""
EHRLICH — Головний діагностичний движок

DiagnosisEngine тримає базу знань і конфігурацію та створює сесії:
- start_session(patient): нова сесія
- restart(session): скинути базу знань і почати заново для того ж пацієнта
- run_full_diagnosis(patient, answer_func): прогнати сесію до діагнозу
"""

from pathlib import Path
from typing import Callable, Optional

from ehrlich.config import EhrlichConfig, get_default_config
from ehrlich.certainty import CertaintyCalculator, create_calculator
from ehrlich.exceptions import InvalidAnswer, ProviderUnavailable
from ehrlich.knowledge import CatalogKnowledgeProvider, KnowledgeProvider
from ehrlich.schemas import DiagnosisReport, Patient

from .events import EmergencyRaised, InvalidInput, NextQuestion
from .session import DiagnosticSession


class DiagnosisEngine:
    """
    Головний діагностичний движок.
    
    Приклад використання:
        engine = DiagnosisEngine.from_knowledge_file("data/knowledge_base.yaml")
        
        session = engine.start_session(Patient(name="Juan", age=35, sex="male"))
        event = session.initial_event
        
        while session.is_active:
            event = session.submit(get_user_answer(event))
        
        print(session.result.description)
    """
    
    def __init__(
        self,
        provider: KnowledgeProvider,
        config: Optional[EhrlichConfig] = None,
        calculator: Optional[CertaintyCalculator] = None
    ):
        """
        Args:
            provider: База знань (спільна для всіх сесій, тільки читання)
            config: Конфігурація
            calculator: Калькулятор CF (за замовчуванням за config.certainty.strategy)
        """
        self.provider = provider
        self.config = config or get_default_config()
        self.calculator = calculator or create_calculator(
            self.config.certainty, self.config.answers
        )
    
    @classmethod
    def from_knowledge_file(
        cls,
        knowledge_path: str,
        config: Optional[EhrlichConfig] = None
    ) -> "DiagnosisEngine":
        """
        Створити з файлу бази знань (.yaml / .json).
        
        Raises:
            ProviderUnavailable: файл відсутній або невалідний
        """
        provider = CatalogKnowledgeProvider.from_file(knowledge_path)
        return cls(provider, config)
    
    @classmethod
    def from_config(cls, config: EhrlichConfig) -> "DiagnosisEngine":
        """Створити за config.knowledge_path"""
        if not config.knowledge_path:
            raise ProviderUnavailable("No knowledge_path configured")
        return cls.from_knowledge_file(str(Path(config.knowledge_path)), config)
    
    def start_session(
        self,
        patient: Patient,
        session_id: Optional[str] = None
    ) -> DiagnosticSession:
        """
        Почати нову сесію.
        
        Raises:
            ProviderUnavailable: база знань не надала каталог або пороги
        """
        return DiagnosticSession(
            patient=patient,
            provider=self.provider,
            config=self.config,
            calculator=self.calculator,
            session_id=session_id,
        )
    
    def restart(self, session: DiagnosticSession) -> DiagnosticSession:
        """
        Відкинути сесію та почати нову для того ж пацієнта.
        
        База знань скидається рівно один раз перед створенням нової сесії.
        """
        self.provider.reset()
        return self.start_session(session.patient)
    
    def run_full_diagnosis(
        self,
        patient: Patient,
        answer_func: Callable[[NextQuestion], str],
        max_invalid_answers: int = 3
    ) -> DiagnosisReport:
        """
        Прогнати сесію до діагнозу.
        
        Args:
            patient: Пацієнт
            answer_func: Функція, що повертає відповідь на питання
            max_invalid_answers: Скільки разів поспіль можна відповісти некоректно
            
        Returns:
            DiagnosisReport
            
        Raises:
            InvalidAnswer: answer_func некоректно відповіла max_invalid_answers разів поспіль
        """
        session = self.start_session(patient)
        event = session.initial_event
        invalid_streak = 0
        
        while session.is_active:
            if isinstance(event, EmergencyRaised):
                event = event.follow_up
            if isinstance(event, InvalidInput):
                invalid_streak += 1
                if invalid_streak >= max_invalid_answers:
                    raise InvalidAnswer(event.reason)
                event = event.question
            else:
                invalid_streak = 0
            
            event = session.submit(answer_func(event))
        
        return session.result
    
    @property
    def n_diseases(self) -> int:
        return self.provider.disease_count()
    
    def __repr__(self) -> str:
        return (
            f"DiagnosisEngine("
            f"diseases={self.n_diseases}, "
            f"calculator={self.calculator!r}, "
            f"shared_evidence={self.config.engine.shared_evidence}"
            f")"
        )
