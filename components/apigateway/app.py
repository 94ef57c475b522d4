from __future__ import annotations
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from components.authservice import AuthConfig, AuthService, auth_router, register_error_handlers, set_auth_service
from components.taskservice import InMemoryTaskStore, TaskService, get_router as get_task_router
from .observability import RequestContextMiddleware, configure_logging
from .settings import AppSettings, CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS, CORS_EXPOSE_HEADERS


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    auth_service: Optional[AuthService] = None,
    task_service: Optional[TaskService] = None,
) -> FastAPI:
    settings = settings or AppSettings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
        expose_headers=CORS_EXPOSE_HEADERS,
    )
    app.add_middleware(RequestContextMiddleware)

    set_auth_service(app, auth_service or AuthService.from_config(AuthConfig()))
    register_error_handlers(app)

    task_service = task_service or TaskService(InMemoryTaskStore())

    # Routers
    app.include_router(auth_router)
    app.include_router(get_task_router(lambda: task_service))

    @app.get("/health")
    def health():
        return {"ok": True, "version": settings.app_version}

    return app
