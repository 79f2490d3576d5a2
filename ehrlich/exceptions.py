"""
EHRLICH — Винятки

- InvalidAnswer: відповідь не розпізнано (не фатально, питання повторюється)
- SubmitOnTerminalSession: submit() після завершення сесії (фатально)
- ProviderUnavailable: база знань не надала каталог або пороги (фатально при старті)
"""

from typing import Optional


class EhrlichError(Exception):
    """Базовий виняток EHRLICH"""
    
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidAnswer(EhrlichError, ValueError):
    
    def __init__(self, message: str, raw_answer: Optional[str] = None):
        self.raw_answer = raw_answer
        super().__init__(message)


class SubmitOnTerminalSession(EhrlichError, RuntimeError):
    
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} is already diagnosed; start a new session")


class ProviderUnavailable(EhrlichError, RuntimeError):
    
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
