"""
EHRLICH — API Configuration

Налаштування FastAPI сервера та шлях до бази знань.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
import os


@dataclass
class APIConfig:
    """Конфігурація API сервера"""
    
    # Сервер
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True
    reload: bool = False
    
    # CORS
    cors_origins: list = field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list = field(default_factory=lambda: ["*"])
    cors_allow_headers: list = field(default_factory=lambda: ["*"])
    
    # База знань
    knowledge_path: Optional[str] = None
    
    # Сесії
    max_sessions: int = 1000
    session_timeout_minutes: int = 60
    
    # API
    api_prefix: str = "/api"
    api_title: str = "EHRLICH API"
    api_description: str = "Експертна система діагностики автоімунних хвороб на certainty factors"
    
    def __post_init__(self):
        """Автоматичне визначення шляху до бази знань"""
        if self.knowledge_path is None:
            current = Path(__file__).parent.parent.parent
            
            possible_roots = [
                current,
                Path.cwd(),
            ]
            
            for root in possible_roots:
                kb_path = root / "data" / "knowledge_base.yaml"
                if kb_path.exists():
                    self.knowledge_path = str(kb_path)
                    break
    
    @classmethod
    def from_env(cls) -> 'APIConfig':
        """Створити конфігурацію з environment variables"""
        return cls(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("API_PORT", "8000")),
            debug=os.getenv("API_DEBUG", "true").lower() == "true",
            knowledge_path=os.getenv("KNOWLEDGE_PATH"),
        )


# Глобальна конфігурація
config = APIConfig.from_env()
