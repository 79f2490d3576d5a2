"""
EHRLICH — REST API модуль

FastAPI REST API для діагностичної системи.

Компоненти:
- app.py: FastAPI application
- routes/: API endpoints
- models.py: Pydantic models
- dependencies.py: База знань та сесії

Запуск:
    uvicorn ehrlich.api.app:app --reload --port 8000

Endpoints:
    GET    /                               - Root info
    GET    /health                         - Health check
    
    POST   /api/sessions                   - Почати сесію
    GET    /api/sessions                   - Список сесій
    GET    /api/sessions/{id}              - Стан сесії
    POST   /api/sessions/{id}/answer       - Відповісти на питання
    POST   /api/sessions/{id}/restart      - Почати заново
    DELETE /api/sessions/{id}              - Закрити сесію
    
    GET    /api/diseases                   - Список хвороб
    GET    /api/diseases/{disease_id}      - Хвороба та її симптоми
"""

from .app import app
from .dependencies import knowledge_manager, session_manager, get_knowledge, get_sessions


__all__ = [
    "app",
    "knowledge_manager",
    "session_manager",
    "get_knowledge",
    "get_sessions",
]
