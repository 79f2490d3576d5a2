"""
EHRLICH — FastAPI Application

Збирає REST API: база знань вантажиться при старті, сесії живуть у пам'яті.

Запуск:
    uvicorn ehrlich.api.app:app --reload --host 0.0.0.0 --port 8000

    або:

    python scripts/run_api.py --knowledge data/knowledge_base.yaml
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time

from ehrlich import __version__
from ehrlich.exceptions import (
    EhrlichError,
    ProviderUnavailable,
    SubmitOnTerminalSession,
)

from .config import config
from .dependencies import knowledge_manager, session_manager
from .routes import (
    health_router,
    knowledge_router,
    sessions_router,
)


# Винятки движка -> HTTP статус
ERROR_STATUS = {
    ProviderUnavailable: 503,
    SubmitOnTerminalSession: 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Завантажити базу знань до першого запиту"""
    print("=" * 60)
    print(f"🏥 EHRLICH API v{__version__}")
    print("=" * 60)

    if knowledge_manager.load():
        print(f"✅ Ready: {len(knowledge_manager.disease_list)} diseases")
    else:
        print(f"⚠️ No knowledge base, sessions will return 503: {knowledge_manager.error}")

    print(f"📍 Docs: http://{config.host}:{config.port}/docs")
    print("=" * 60)

    yield

    print(f"🛑 EHRLICH API stopping ({session_manager.get_active_count()} sessions dropped)")


app = FastAPI(
    title=config.api_title,
    description=config.api_description,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=config.cors_allow_credentials,
    allow_methods=config.cors_allow_methods,
    allow_headers=config.cors_allow_headers,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.time()
    response = await call_next(request)

    if request.url.path.startswith(config.api_prefix):
        elapsed_ms = (time.time() - started) * 1000
        print(f"📨 {request.method} {request.url.path} → {response.status_code} ({elapsed_ms:.1f}ms)")

    return response


@app.exception_handler(EhrlichError)
async def ehrlich_error_handler(request: Request, exc: EhrlichError):
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        400,
    )
    print(f"⚠️ {type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": exc.message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    print(f"❌ Error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if config.debug else None
        }
    )


app.include_router(health_router)
app.include_router(knowledge_router, prefix=config.api_prefix)
app.include_router(sessions_router, prefix=config.api_prefix)
