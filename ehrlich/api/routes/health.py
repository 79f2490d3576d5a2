"""
EHRLICH — Health Routes

Health check та інформація про систему.
"""

from fastapi import APIRouter, Depends

from ehrlich import __version__

from ..dependencies import get_knowledge, get_sessions, KnowledgeManager, SessionManager
from ..models import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    knowledge: KnowledgeManager = Depends(get_knowledge),
    sessions: SessionManager = Depends(get_sessions)
) -> HealthResponse:
    """
    Перевірка стану сервера.
    
    Повертає:
    - Статус сервера
    - Чи завантажена база знань
    - Кількість хвороб
    - Кількість сесій
    """
    return HealthResponse(
        status="ok" if knowledge.is_loaded else "degraded",
        version=__version__,
        knowledge_loaded=knowledge.is_loaded,
        diseases=len(knowledge.disease_list),
        active_sessions=sessions.get_active_count()
    )


@router.get("/")
async def root():
    """Головна сторінка API"""
    return {
        "name": "EHRLICH API",
        "version": __version__,
        "description": "Експертна система діагностики на certainty factors",
        "docs": "/docs",
        "health": "/health",
    }
