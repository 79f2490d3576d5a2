"""
EHRLICH — Сесія діагностики

DiagnosticSession: state machine одного пацієнта:

    INITIALIZING -> AWAITING_ANSWER(i, j) -> ... -> DIAGNOSED

Стан:
- хвороби в порядку бази знань, кожна з CF та списком ще не заданих симптомів
- курсор хвороби i та курсор симптому j
- прапорець невідкладного стану (тільки false -> true)
- журнал відповідей

Перехід submit(answer):
1. нормалізація відповіді (InvalidAnswer -> InvalidInput, стан не змінюється)
2. emergency_hit -> прапорець
3. CF = combine(CF, adjusted_weight(weight, affirmed))
4. симптом вилучається зі списку (більше не питається)
5. CF < CF_REMOVE -> наступна хвороба
6. є ще симптоми -> наступне питання; немає і CF >= CF_CONCLUDE -> діагноз;
   інакше -> наступна хвороба
7. хвороби вичерпано -> діагноз (максимальний CF серед усіх)
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import uuid

from ehrlich.config import EhrlichConfig
from ehrlich.certainty import CertaintyCalculator, create_calculator
from ehrlich.exceptions import InvalidAnswer, ProviderUnavailable, SubmitOnTerminalSession
from ehrlich.knowledge import KnowledgeProvider
from ehrlich.schemas import DiagnosisReport, Patient, Sex, SymptomSpec, Thresholds

from .events import (
    Diagnosed,
    EmergencyRaised,
    InvalidInput,
    NextQuestion,
    SessionEvent,
)


class SessionStatus(str, Enum):
    """Статус сесії"""
    INITIALIZING = "initializing"
    AWAITING_ANSWER = "awaiting_answer"
    DIAGNOSED = "diagnosed"


@dataclass
class DiseaseState:
    """Поточний стан однієї хвороби"""
    disease_id: str
    full_name: str
    cf: float
    remaining: List[str] = field(default_factory=list)
    weights: Dict[str, float] = field(default_factory=dict)
    eliminated: bool = False
    
    @property
    def is_exhausted(self) -> bool:
        return not self.remaining


@dataclass
class AnswerRecord:
    """Запис у журналі відповідей"""
    symptom_id: str
    raw_answer: str
    affirmed: bool
    emergency_hit: bool
    evidence: float
    disease_id: str           # поточна хвороба на момент відповіді
    cf: float                 # її CF після відповіді
    updated: Dict[str, float] = field(default_factory=dict)  # всі змінені CF
    timestamp: datetime = field(default_factory=datetime.now)


class DiagnosticSession:
    """
    Сесія діагностики.
    
    Створюється один раз на пацієнта; змінюється тільки через submit().
    Рестарт створює нову сесію (див. DiagnosisEngine.restart).
    
    Приклад:
        session = DiagnosticSession(patient, provider)
        event = session.initial_event
        
        while session.is_active:
            print(event.text)
            event = session.submit(input("> "))
        
        print(session.result.description)
    """
    
    def __init__(
        self,
        patient: Patient,
        provider: KnowledgeProvider,
        config: Optional[EhrlichConfig] = None,
        calculator: Optional[CertaintyCalculator] = None,
        session_id: Optional[str] = None
    ):
        """
        Args:
            patient: Пацієнт (вік і стать фіксуються тут)
            provider: База знань
            config: Конфігурація (за замовчуванням EhrlichConfig())
            calculator: Калькулятор CF (за замовчуванням за config.certainty.strategy)
            session_id: Ідентифікатор (генерується, якщо не задано)
            
        Raises:
            ProviderUnavailable: база знань не надала каталог або пороги
        """
        self.session_id = session_id or str(uuid.uuid4())[:8]
        self.patient = patient
        self.provider = provider
        self.config = config or EhrlichConfig()
        self.calculator = calculator or create_calculator(
            self.config.certainty, self.config.answers
        )
        
        self.status = SessionStatus.INITIALIZING
        self.thresholds: Optional[Thresholds] = None
        self.diseases: List[DiseaseState] = []
        self.i = 0
        self.j = 0
        self.emergency = False
        self.answers: List[AnswerRecord] = []
        self.filtered_symptoms: Dict[str, List[str]] = {"female_only": [], "pediatric_only": []}
        self.concluded_early = False
        self.result: Optional[DiagnosisReport] = None
        
        self._symptoms: Dict[str, SymptomSpec] = {}
        
        self.created_at = datetime.now()
        self.updated_at = self.created_at
        
        self._load_knowledge()
        self.initial_event = self._start()
        self.last_event: SessionEvent = self.initial_event
    
    # =========================================================================
    # INITIALIZATION
    # =========================================================================
    
    def _load_knowledge(self) -> None:
        """Зчитати каталог і пороги; відфільтрувати нерелевантні симптоми"""
        try:
            self.thresholds = self.provider.thresholds()
            if not isinstance(self.thresholds, Thresholds):
                raise ProviderUnavailable(
                    f"Knowledge provider returned no thresholds: {self.thresholds!r}"
                )
            n_diseases = self.provider.disease_count()
            
            diseases = []
            for index in range(n_diseases):
                spec = self.provider.disease_at(index)
                symptoms = self.provider.symptoms_of(spec.disease_id)
                weights = {}
                for symptom in symptoms:
                    self._symptoms[symptom.symptom_id] = symptom
                    weights[symptom.symptom_id] = self.provider.weight_for(
                        spec.disease_id, symptom.symptom_id
                    )
                diseases.append((spec, symptoms, weights))
        except ProviderUnavailable:
            raise
        except Exception as e:
            raise ProviderUnavailable(f"Knowledge provider failed: {e}", cause=e) from e
        
        if not diseases:
            raise ProviderUnavailable("Knowledge provider supplied no diseases")
        
        is_male = self.patient.sex == Sex.MALE
        is_adult = self.patient.is_adult(self.thresholds.adult_age)
        
        for spec, symptoms, weights in diseases:
            remaining = []
            for symptom in symptoms:
                if is_male and symptom.female_only:
                    self._note_filtered("female_only", symptom.symptom_id)
                elif is_adult and symptom.pediatric_only:
                    self._note_filtered("pediatric_only", symptom.symptom_id)
                else:
                    remaining.append(symptom.symptom_id)
            
            self.diseases.append(DiseaseState(
                disease_id=spec.disease_id,
                full_name=spec.full_name,
                cf=spec.initial_cf,
                remaining=remaining,
                weights=weights,
            ))
    
    def _note_filtered(self, reason: str, symptom_id: str) -> None:
        if symptom_id not in self.filtered_symptoms[reason]:
            self.filtered_symptoms[reason].append(symptom_id)
    
    def _start(self) -> SessionEvent:
        self.status = SessionStatus.AWAITING_ANSWER
        self.i = 0
        self.j = 0
        
        if not self._can_ask(self.diseases[0]):
            return self._advance()
        
        return self._question_event()
    
    # =========================================================================
    # TRANSITIONS
    # =========================================================================
    
    def submit(self, raw_answer) -> SessionEvent:
        """
        Обробити відповідь на поточне питання.
        
        Args:
            raw_answer: "yes" / "no" або число (температура, пульс)
            
        Returns:
            NextQuestion | Diagnosed | InvalidInput | EmergencyRaised
            
        Raises:
            SubmitOnTerminalSession: сесія вже завершена
        """
        if self.status != SessionStatus.AWAITING_ANSWER:
            raise SubmitOnTerminalSession(self.session_id)
        
        current = self.diseases[self.i]
        symptom = self._symptoms[current.remaining[self.j]]
        
        try:
            answer = self.calculator.normalize_answer(
                symptom, raw_answer, self.patient.age, self.thresholds
            )
        except InvalidAnswer as e:
            event = InvalidInput(reason=e.message, question=self._question_event())
            self.last_event = event
            return event
        
        emergency_before = self.emergency
        if answer.emergency_hit:
            self.emergency = True
        
        evidence = self.calculator.adjusted_weight(
            current.weights[symptom.symptom_id], answer.affirmed
        )
        updated = self._apply_evidence(symptom.symptom_id, answer.affirmed)
        
        self.answers.append(AnswerRecord(
            symptom_id=symptom.symptom_id,
            raw_answer=str(raw_answer),
            affirmed=answer.affirmed,
            emergency_hit=answer.emergency_hit,
            evidence=evidence,
            disease_id=current.disease_id,
            cf=current.cf,
            updated=updated,
        ))
        self.updated_at = datetime.now()
        
        event = self._after_answer()
        if self.emergency and not emergency_before:
            event = EmergencyRaised(follow_up=event)
        
        self.last_event = event
        return event
    
    def _apply_evidence(self, symptom_id: str, affirmed: bool) -> Dict[str, float]:
        """
        Оновити CF і вилучити симптом.
        
        Вага береться для кожної хвороби окремо (weight_for).
        
        shared_evidence: всі хвороби, у списку яких ще є симптом;
        інакше тільки поточна.
        """
        if self.config.engine.shared_evidence:
            targets = [d for d in self.diseases if symptom_id in d.remaining]
        else:
            targets = [self.diseases[self.i]]
        
        updated = {}
        for disease in targets:
            evidence = self.calculator.adjusted_weight(disease.weights[symptom_id], affirmed)
            disease.cf = self.calculator.combine(disease.cf, evidence)
            disease.remaining.remove(symptom_id)
            updated[disease.disease_id] = disease.cf
        
        return updated
    
    def _after_answer(self) -> SessionEvent:
        current = self.diseases[self.i]
        
        if current.cf < self.thresholds.cf_remove:
            current.eliminated = True
            return self._advance()
        
        if not current.is_exhausted:
            self.j = 0
            return self._question_event()
        
        if current.cf >= self.thresholds.cf_conclude:
            self.concluded_early = True
            return self._finalize()
        
        return self._advance()
    
    def _advance(self) -> SessionEvent:
        """Перейти до наступної хвороби, що ще має симптоми"""
        while True:
            self.i += 1
            self.j = 0
            
            if self.i >= len(self.diseases):
                return self._finalize()
            
            if self._can_ask(self.diseases[self.i]):
                return self._question_event()
    
    def _can_ask(self, disease: DiseaseState) -> bool:
        """
        Чи можна питати про хворобу, коли курсор доходить до неї.
        
        CF нижче CF_REMOVE (початковий або від спільного симптому) відкидає
        хворобу без питань.
        """
        if disease.cf < self.thresholds.cf_remove:
            disease.eliminated = True
            return False
        return not disease.is_exhausted
    
    def _finalize(self) -> Diagnosed:
        from .report import build_diagnosis_report
        
        self.status = SessionStatus.DIAGNOSED
        self.result = build_diagnosis_report(self)
        return Diagnosed(report=self.result)
    
    def _question_event(self) -> NextQuestion:
        disease = self.diseases[self.i]
        symptom = self._symptoms[disease.remaining[self.j]]
        return NextQuestion(
            text=symptom.text,
            symptom_id=symptom.symptom_id,
            disease_id=disease.disease_id,
            is_numeric_prompt=symptom.is_numeric,
        )
    
    # =========================================================================
    # VIEWS
    # =========================================================================
    
    @property
    def report(self) -> "SessionReport":
        from .report import SessionReport
        return SessionReport(self)
    
    def current_question(self) -> NextQuestion:
        return self.report.current_question()
    
    def cf_table(self) -> Dict[str, str]:
        return self.report.cf_table()
    
    def is_emergency(self) -> bool:
        return self.emergency
    
    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.AWAITING_ANSWER
    
    @property
    def current_disease(self) -> Optional[DiseaseState]:
        if 0 <= self.i < len(self.diseases):
            return self.diseases[self.i]
        return None
    
    @property
    def current_symptom(self) -> Optional[SymptomSpec]:
        if not self.is_active:
            return None
        return self._symptoms[self.diseases[self.i].remaining[self.j]]
    
    @property
    def n_questions_asked(self) -> int:
        return len(self.answers)
    
    def __repr__(self) -> str:
        return (
            f"DiagnosticSession("
            f"id={self.session_id}, "
            f"status={self.status.value}, "
            f"i={self.i}, j={self.j}, "
            f"answers={self.n_questions_asked}, "
            f"emergency={self.emergency}"
            f")"
        )
