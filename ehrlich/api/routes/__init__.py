"""
EHRLICH — API Routes

Експорт всіх роутерів.
"""

from .health import router as health_router
from .knowledge import router as knowledge_router
from .sessions import router as sessions_router

__all__ = [
    'health_router',
    'knowledge_router',
    'sessions_router',
]
