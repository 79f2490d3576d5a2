"""
EHRLICH — API Dependencies

Dependency Injection для FastAPI.
Завантаження бази знань, зберігання сесій.
"""

from typing import Dict, List, Optional
from datetime import datetime, timedelta
import threading

from ehrlich.config import get_default_config
from ehrlich.diagnosis_engine import DiagnosisEngine, DiagnosticSession
from ehrlich.exceptions import ProviderUnavailable
from ehrlich.knowledge import CatalogKnowledgeProvider
from ehrlich.schemas import Patient

from .config import config


class KnowledgeManager:
    """
    Менеджер бази знань: завантажує каталог один раз.
    Singleton pattern.
    """
    
    _instance = None
    _lock = threading.Lock()
    
    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        if self._initialized:
            return
        
        self._initialized = True
        self.is_loaded = False
        self.provider: Optional[CatalogKnowledgeProvider] = None
        self.engine: Optional[DiagnosisEngine] = None
        self.error: Optional[str] = None
    
    def load(self, knowledge_path: Optional[str] = None) -> bool:
        """Завантажити базу знань"""
        if self.is_loaded and knowledge_path is None:
            return True
        
        path = knowledge_path or config.knowledge_path
        
        try:
            print("📦 Завантаження бази знань...")
            
            if not path:
                raise ProviderUnavailable("Knowledge base path is not configured")
            
            self.provider = CatalogKnowledgeProvider.from_file(path)
            self.engine = DiagnosisEngine(self.provider, get_default_config())
            
            stats = self.provider.get_statistics()
            print(f"   ✅ Knowledge base: {stats['disease_count']} diseases, {stats['symptom_count']} symptoms")
            
            self.is_loaded = True
            self.error = None
            return True
            
        except ProviderUnavailable as e:
            self.error = e.message
            self.is_loaded = False
            print(f"❌ Помилка завантаження: {e}")
            return False
    
    def get_engine(self) -> DiagnosisEngine:
        """Отримати движок (ProviderUnavailable, якщо база знань не завантажена)"""
        if not self.is_loaded:
            self.load()
        if self.engine is None:
            raise ProviderUnavailable(self.error or "Knowledge base not loaded")
        return self.engine
    
    @property
    def disease_list(self) -> List[dict]:
        if self.provider is None:
            return []
        return [
            {"disease_id": d.disease_id, "full_name": d.full_name, "symptom_count": len(d.symptoms)}
            for d in self.provider.knowledge_base.diseases
        ]


class SessionManager:
    """
    Менеджер сесій діагностики.
    Зберігає активні сесії в пам'яті.
    """
    
    _instance = None
    _lock = threading.Lock()
    
    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        if self._initialized:
            return
        
        self._initialized = True
        self.sessions: Dict[str, DiagnosticSession] = {}
        self.lock = threading.Lock()
    
    def create_session(self, engine: DiagnosisEngine, patient: Patient) -> DiagnosticSession:
        """Створити нову сесію"""
        session = engine.start_session(patient)
        self._store(session)
        return session
    
    def restart_session(self, engine: DiagnosisEngine, session_id: str) -> Optional[DiagnosticSession]:
        """Відкинути сесію та створити нову для того ж пацієнта"""
        with self.lock:
            old = self.sessions.pop(session_id, None)
        
        if old is None:
            return None
        
        session = engine.restart(old)
        self._store(session)
        return session
    
    def _store(self, session: DiagnosticSession) -> None:
        with self.lock:
            # Очистка старих сесій
            self._cleanup_old_sessions()
            
            if len(self.sessions) >= config.max_sessions:
                oldest = min(self.sessions.values(), key=lambda s: s.updated_at)
                del self.sessions[oldest.session_id]
            
            self.sessions[session.session_id] = session
    
    def get_session(self, session_id: str) -> Optional[DiagnosticSession]:
        """Отримати сесію"""
        return self.sessions.get(session_id)
    
    def delete_session(self, session_id: str) -> bool:
        """Видалити сесію"""
        with self.lock:
            if session_id in self.sessions:
                del self.sessions[session_id]
                return True
        return False
    
    def get_active_count(self) -> int:
        """Кількість сесій"""
        return len(self.sessions)
    
    def clear(self) -> None:
        with self.lock:
            self.sessions.clear()
    
    def _cleanup_old_sessions(self):
        """Видалити застарілі сесії"""
        timeout = timedelta(minutes=config.session_timeout_minutes)
        now = datetime.now()
        
        expired = [
            sid for sid, session in self.sessions.items()
            if now - session.updated_at > timeout
        ]
        
        for sid in expired:
            del self.sessions[sid]


# Глобальні менеджери
knowledge_manager = KnowledgeManager()
session_manager = SessionManager()


# Dependency functions для FastAPI
def get_knowledge() -> KnowledgeManager:
    """Dependency: отримати менеджер бази знань"""
    if not knowledge_manager.is_loaded:
        knowledge_manager.load()
    return knowledge_manager


def get_sessions() -> SessionManager:
    """Dependency: отримати менеджер сесій"""
    return session_manager
