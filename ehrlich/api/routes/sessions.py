"""
EHRLICH — Sessions Routes

Endpoints для інтерактивних сесій діагностики:
- Створення сесії
- Отримання стану
- Відповідь на питання
- Рестарт
- Закриття сесії
"""

from fastapi import APIRouter, Depends, HTTPException

from ehrlich.diagnosis_engine import (
    Diagnosed,
    DiagnosticSession,
    EmergencyRaised,
    InvalidInput,
    NextQuestion,
    SessionEvent,
)
from ehrlich.exceptions import ProviderUnavailable, SubmitOnTerminalSession
from ehrlich.schemas import Patient

from ..dependencies import (
    get_knowledge, get_sessions,
    KnowledgeManager, SessionManager
)
from ..models import (
    AnswerRequest,
    AnswerResponse,
    CreateSessionRequest,
    EventResponse,
    QuestionResponse,
    SessionListItem,
    SessionStateResponse,
)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def session_to_response(session: DiagnosticSession) -> SessionStateResponse:
    """Конвертувати сесію в Pydantic модель"""
    return SessionStateResponse.model_validate(session.report.get_summary())


def event_to_response(event: SessionEvent) -> EventResponse:
    """Конвертувати подію submit() в Pydantic модель"""
    emergency_raised = isinstance(event, EmergencyRaised)
    if emergency_raised:
        inner = event.follow_up
    else:
        inner = event
    
    response = EventResponse(type=event.type, emergency_raised=emergency_raised)
    
    if isinstance(inner, NextQuestion):
        response.question = QuestionResponse(**inner.to_dict())
    elif isinstance(inner, Diagnosed):
        response.report = inner.report
    elif isinstance(inner, InvalidInput):
        response.reason = inner.reason
        response.question = QuestionResponse(**inner.question.to_dict())
    
    return response


def _get_or_404(sessions: SessionManager, session_id: str) -> DiagnosticSession:
    session = sessions.get_session(session_id)
    if not session:
        raise HTTPException(
            status_code=404,
            detail=f"Session {session_id} not found"
        )
    return session


@router.post("", response_model=SessionStateResponse)
async def create_session(
    request: CreateSessionRequest,
    knowledge: KnowledgeManager = Depends(get_knowledge),
    sessions: SessionManager = Depends(get_sessions)
) -> SessionStateResponse:
    """
    Створити нову сесію діагностики.
    
    Приклад:
    ```json
    {
        "name": "Maria",
        "age": 34,
        "sex": "female"
    }
    ```
    """
    try:
        engine = knowledge.get_engine()
        patient = Patient(name=request.name, age=request.age, sex=request.sex)
        session = sessions.create_session(engine, patient)
    except ProviderUnavailable as e:
        raise HTTPException(status_code=503, detail=e.message)
    
    return session_to_response(session)


@router.get("")
async def list_sessions(
    sessions: SessionManager = Depends(get_sessions)
) -> dict:
    """Список сесій"""
    items = [
        SessionListItem(
            session_id=s.session_id,
            status=s.status.value,
            patient_name=s.patient.name,
            emergency=s.emergency,
        )
        for s in list(sessions.sessions.values())
    ]
    return {"sessions": items, "total": len(items)}


@router.get("/{session_id}", response_model=SessionStateResponse)
async def get_session(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionStateResponse:
    """
    Отримати поточний стан сесії.
    
    Повертає:
    - Статус сесії
    - Поточне питання (якщо є)
    - Таблицю certainty factors
    - Прапорець невідкладного стану
    - Фінальний діагноз (якщо є)
    """
    session = _get_or_404(sessions, session_id)
    return session_to_response(session)


@router.post("/{session_id}/answer", response_model=AnswerResponse)
async def answer_question(
    session_id: str,
    request: AnswerRequest,
    sessions: SessionManager = Depends(get_sessions)
) -> AnswerResponse:
    """
    Відповісти на поточне питання.
    
    - **answer**: "yes" / "no", або число для температури (°C) та пульсу (уд/хв)
    
    Некоректна відповідь повертає подію `invalid_input` з тим самим питанням.
    Відповідь на завершену сесію: 409, сесія видаляється.
    """
    session = _get_or_404(sessions, session_id)
    
    try:
        event = session.submit(request.answer)
    except SubmitOnTerminalSession as e:
        sessions.delete_session(session_id)
        raise HTTPException(status_code=409, detail=e.message)
    
    return AnswerResponse(
        accepted=not isinstance(event, InvalidInput),
        event=event_to_response(event),
        session_state=session_to_response(session)
    )


@router.post("/{session_id}/restart", response_model=SessionStateResponse)
async def restart_session(
    session_id: str,
    knowledge: KnowledgeManager = Depends(get_knowledge),
    sessions: SessionManager = Depends(get_sessions)
) -> SessionStateResponse:
    """
    Стерти дані поточної сесії та почати заново для того ж пацієнта.
    
    Повертає нову сесію (з новим session_id).
    """
    try:
        engine = knowledge.get_engine()
        session = sessions.restart_session(engine, session_id)
    except ProviderUnavailable as e:
        raise HTTPException(status_code=503, detail=e.message)
    
    if session is None:
        raise HTTPException(
            status_code=404,
            detail=f"Session {session_id} not found"
        )
    
    return session_to_response(session)


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions)
) -> dict:
    """
    Закрити та видалити сесію.
    """
    success = sessions.delete_session(session_id)
    
    if not success:
        raise HTTPException(
            status_code=404,
            detail=f"Session {session_id} not found"
        )
    
    return {"deleted": True, "session_id": session_id}
