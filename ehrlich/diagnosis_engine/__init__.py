"""
EHRLICH — Діагностичний движок (Diagnosis Engine)

Покроковий опитувальник на certainty factors:
хвороби перебираються в порядку бази знань, симптоми кожної по черзі;
хвороба відкидається при CF < CF_REMOVE, діагноз ставиться при CF >= CF_CONCLUDE
або коли хвороби вичерпано.

Компоненти:
- DiagnosisEngine: створення та рестарт сесій
- DiagnosticSession: state machine одного пацієнта
- SessionReport: представлення стану для UI
- NextQuestion / Diagnosed / InvalidInput / EmergencyRaised: події submit()

Приклад використання:
    from ehrlich.diagnosis_engine import DiagnosisEngine
    from ehrlich.schemas import Patient
    
    engine = DiagnosisEngine.from_knowledge_file("data/knowledge_base.yaml")
    session = engine.start_session(Patient(name="Juan", age=35, sex="male"))
    
    event = session.initial_event
    while session.is_active:
        print(f"Q: {event.text}")
        event = session.submit(input("> "))
    
    print(session.report.explain())
"""

from .events import (
    NextQuestion,
    Diagnosed,
    InvalidInput,
    EmergencyRaised,
    SessionEvent,
)
from .session import (
    DiagnosticSession,
    SessionStatus,
    DiseaseState,
    AnswerRecord,
)
from .report import (
    SessionReport,
    build_diagnosis_report,
    rank_diseases,
)
from .engine import DiagnosisEngine


__all__ = [
    # Engine
    "DiagnosisEngine",
    
    # Session
    "DiagnosticSession",
    "SessionStatus",
    "DiseaseState",
    "AnswerRecord",
    
    # Report
    "SessionReport",
    "build_diagnosis_report",
    "rank_diseases",
    
    # Events
    "NextQuestion",
    "Diagnosed",
    "InvalidInput",
    "EmergencyRaised",
    "SessionEvent",
]
