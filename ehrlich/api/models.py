"""
EHRLICH API — Pydantic Models

Моделі для запитів та відповідей REST API.
"""

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field

from ehrlich.schemas import DiagnosisReport, Sex


# === Request Models ===

class CreateSessionRequest(BaseModel):
    """Запит на початок сесії"""
    name: str = Field(..., min_length=1, description="Ім'я пацієнта")
    age: float = Field(..., ge=0.0, description="Вік пацієнта")
    sex: Sex = Field(..., description="Стать пацієнта (male/female)")
    
    class Config:
        json_schema_extra = {
            "example": {"name": "Maria", "age": 34, "sex": "female"}
        }


class AnswerRequest(BaseModel):
    """Відповідь на поточне питання"""
    answer: Union[bool, float, str] = Field(
        ...,
        description="yes / no, або число для температури та пульсу"
    )
    
    class Config:
        json_schema_extra = {
            "example": {"answer": "yes"}
        }


# === Response Models ===

class QuestionResponse(BaseModel):
    """Питання для користувача"""
    text: str
    symptom_id: str
    disease_id: str
    is_numeric_prompt: bool = False


class AnswerLogEntry(BaseModel):
    symptom_id: str
    raw_answer: str
    affirmed: bool
    emergency_hit: bool
    cf: float


class SessionStateResponse(BaseModel):
    """Стан сесії"""
    session_id: str
    status: str
    patient: Dict[str, Any]
    current_question: Optional[QuestionResponse] = None
    cf_table: Dict[str, str] = Field(default_factory=dict)
    emergency: bool = False
    questions_asked: int = 0
    answers: List[AnswerLogEntry] = Field(default_factory=list)
    filtered_symptoms: Dict[str, List[str]] = Field(default_factory=dict)
    final_diagnosis: Optional[DiagnosisReport] = None
    created_at: str
    updated_at: str


class EventResponse(BaseModel):
    """
    Подія, яку повернув submit().
    
    type: next_question | emergency_raised | diagnosed | invalid_input
    """
    type: str
    question: Optional[QuestionResponse] = None
    report: Optional[DiagnosisReport] = None
    reason: Optional[str] = None
    emergency_raised: bool = False


class AnswerResponse(BaseModel):
    """Результат відповіді"""
    accepted: bool
    event: EventResponse
    session_state: SessionStateResponse


class SessionListItem(BaseModel):
    session_id: str
    status: str
    patient_name: str
    emergency: bool


class HealthResponse(BaseModel):
    """Стан сервера"""
    status: str
    version: str
    knowledge_loaded: bool
    diseases: int
    active_sessions: int


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
