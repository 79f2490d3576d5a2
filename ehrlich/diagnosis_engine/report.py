"""
EHRLICH — Звіти сесії

SessionReport: представлення стану сесії тільки на читання:
- current_question(): поточне питання (тільки AWAITING_ANSWER)
- cf_table(): назва хвороби -> CF з фіксованою точністю
- is_emergency()
- final_diagnosis(): фінальний діагноз (тільки DIAGNOSED)

build_diagnosis_report() обирає хворобу з максимальним CF серед УСІХ хвороб
(при рівності перша за порядком бази знань).
"""

from typing import Any, Dict, List, Optional

import numpy as np

from ehrlich.schemas import ConfidenceLevel, DiagnosisReport, RankedDisease

from .events import NextQuestion
from .session import DiagnosticSession, SessionStatus


def rank_diseases(session: DiagnosticSession, n: Optional[int] = None) -> List[RankedDisease]:
    """Хвороби за спаданням CF (стабільно: при рівності зберігається порядок бази знань)"""
    cfs = np.array([d.cf for d in session.diseases], dtype=float)
    order = np.argsort(-cfs, kind="stable")
    if n is not None:
        order = order[:n]
    
    return [
        RankedDisease(
            rank=rank + 1,
            disease_id=session.diseases[idx].disease_id,
            full_name=session.diseases[idx].full_name,
            cf=float(cfs[idx]),
        )
        for rank, idx in enumerate(order)
    ]


def build_diagnosis_report(session: DiagnosticSession) -> DiagnosisReport:
    """Фінальний результат: повторний перегляд усіх CF"""
    cfs = np.array([d.cf for d in session.diseases], dtype=float)
    
    # argmax повертає перше входження максимуму
    best = int(np.argmax(cfs))
    disease = session.diseases[best]
    max_cf = float(cfs[best])
    
    description = session.provider.diagnosis_template(
        session.patient.name, max_cf, disease.disease_id, session.emergency
    )
    
    return DiagnosisReport(
        patient_name=session.patient.name,
        disease_id=disease.disease_id,
        full_name=disease.full_name,
        cf=max_cf,
        confidence_percent=max(0.0, max_cf) * 100,
        confidence_level=ConfidenceLevel.from_cf(max_cf),
        emergency=session.emergency,
        concluded_early=session.concluded_early,
        description=description,
        ranking=rank_diseases(session, session.config.engine.top_n_ranking),
        questions_asked=session.n_questions_asked,
    )


class SessionReport:
    """
    Представлення сесії для UI.
    
    Приклад:
        report = SessionReport(session)
        
        for name, cf in report.cf_table().items():
            print(f"{name}: {cf}")
        
        if report.is_emergency():
            print("EMERGENCY!")
    """
    
    def __init__(self, session: DiagnosticSession):
        self.session = session
        self.precision = session.config.engine.cf_precision
    
    def current_question(self) -> NextQuestion:
        if self.session.status != SessionStatus.AWAITING_ANSWER:
            raise RuntimeError("Session is not awaiting an answer")
        return self.session._question_event()
    
    def cf_table(self) -> Dict[str, str]:
        """Повна назва хвороби -> CF (рядок з фіксованою точністю)"""
        return {
            d.full_name: f"{d.cf:.{self.precision}f}"
            for d in self.session.diseases
        }
    
    def cf_values(self) -> Dict[str, float]:
        """ID хвороби -> CF"""
        return {d.disease_id: d.cf for d in self.session.diseases}
    
    def is_emergency(self) -> bool:
        return self.session.emergency
    
    def final_diagnosis(self) -> DiagnosisReport:
        if self.session.status != SessionStatus.DIAGNOSED:
            raise RuntimeError("Session is not diagnosed yet")
        return self.session.result
    
    def ranking(self, n: Optional[int] = None) -> List[RankedDisease]:
        return rank_diseases(self.session, n)
    
    def format_cf_log(self, symptom_id: str) -> str:
        """
        Технічний журнал після відповіді:
        
            Symptom: fever
            Certainty factors:
            SYSTEMIC LUPUS ERYTHEMATOSUS: 0.60
        """
        lines = [f"Symptom: {symptom_id}", "Certainty factors:"]
        for name, cf in self.cf_table().items():
            lines.append(f"{name.upper()}: {cf}")
        return "\n".join(lines) + "\n"
    
    def explain(self) -> str:
        """Текстове пояснення перебігу сесії"""
        session = self.session
        
        lines = []
        lines.append(f"Consultation: {session.patient.name} "
                     f"({session.patient.sex.value}, {session.patient.age:g} y)")
        lines.append("=" * 50)
        
        filtered = session.filtered_symptoms
        if filtered["female_only"]:
            lines.append(f"\nFemale-specific symptoms removed: {', '.join(filtered['female_only'])}")
        if filtered["pediatric_only"]:
            lines.append(f"Pediatric symptoms removed: {', '.join(filtered['pediatric_only'])}")
        
        lines.append(f"\nAnswers ({len(session.answers)}):")
        for record in session.answers:
            marker = "✓" if record.affirmed else "✗"
            alert = " [EMERGENCY]" if record.emergency_hit else ""
            lines.append(f"  {marker} {record.symptom_id} = {record.raw_answer} "
                         f"(evidence {record.evidence:+.2f}){alert}")
        
        lines.append("\nCertainty factors:")
        for i, d in enumerate(session.diseases):
            marker = "→" if session.is_active and i == session.i else " "
            state = " (ruled out)" if d.eliminated else ""
            lines.append(f"  {marker} {d.full_name}: {d.cf:.{self.precision}f}{state}")
        
        if session.result is not None:
            lines.append(f"\nDiagnosis: {session.result.full_name} "
                         f"({session.result.confidence_percent:.1f}%)")
        
        if session.emergency:
            lines.append("\nEMERGENCY! Medical attention required")
        
        return "\n".join(lines)
    
    def get_summary(self) -> Dict[str, Any]:
        """Підсумок сесії (для API)"""
        session = self.session
        question = self.current_question() if session.is_active else None
        
        return {
            "session_id": session.session_id,
            "status": session.status.value,
            "patient": session.patient.model_dump(mode="json"),
            "current_question": question.to_dict() if question else None,
            "cf_table": self.cf_table(),
            "emergency": session.emergency,
            "questions_asked": session.n_questions_asked,
            "answers": [
                {
                    "symptom_id": a.symptom_id,
                    "raw_answer": a.raw_answer,
                    "affirmed": a.affirmed,
                    "emergency_hit": a.emergency_hit,
                    "cf": a.cf,
                }
                for a in session.answers
            ],
            "filtered_symptoms": session.filtered_symptoms,
            "final_diagnosis": session.result.model_dump(mode="json") if session.result else None,
            "created_at": session.created_at.isoformat(),
            "updated_at": session.updated_at.isoformat(),
        }
