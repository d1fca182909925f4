from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.http.health import router as health_router
from app.api.http.documents import router as documents_router
from app.api.http.access import router as access_router
from app.api.http.invitations import router as invitations_router
from app.api.http.presence import router as presence_router
from app.core.errors import CollaborationError
from app.core.logging import setup_logging

setup_logging()

app = FastAPI(
    title="DocCollab",
    description="Управление доступом и совместной работой над документами",
    version="1.0.0"
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CollaborationError)
async def collaboration_error_handler(request: Request, exc: CollaborationError):
    """Ошибки ядра превращаются в JSON-ответ с соответствующим статусом"""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers
    )


# Подключаем роутеры
app.include_router(health_router)
app.include_router(documents_router)
app.include_router(access_router)
app.include_router(invitations_router)
app.include_router(presence_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "DocCollab API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
