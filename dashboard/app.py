#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exam Command Centre - FastAPI Application
REST backend persisting study tasks, notes and the exam date to SQLite

Version: 1.0.0
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from dashboard.api import state, tasks
from dashboard.config import DashboardSettings, get_settings
from dashboard.core.data_manager import DataManager
from dashboard.errors import PayloadTooLarge, error_response, register_exception_handlers

logger = logging.getLogger(__name__)

def create_app(settings: Optional[DashboardSettings] = None) -> FastAPI:
    """Application factory"""
    settings = settings or get_settings()

    data_manager = DataManager(settings.DB_PATH)
    data_manager.initialize()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")
        logger.info(f"📝 Tasks stored: {data_manager.count_tasks()}")
        if settings.allow_all_origins:
            logger.info("🌐 CORS: all origins allowed")
        else:
            logger.info(f"🌐 CORS_ORIGINS={settings.CORS_ORIGINS}")
        yield
        logger.info("🛑 API stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Study tasks, notes and exam countdown storage",
        version=settings.VERSION,
        docs_url=settings.DOCS_URL,
        redoc_url=None,
        openapi_url=settings.OPENAPI_URL,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.data_manager = data_manager

    # ===== MIDDLEWARE =====

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Request logging, timing header and body size limit"""
        start_time = time.time()

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > settings.MAX_BODY_BYTES:
            logger.warning(f"⚠️ {request.method} {request.url.path} rejected: body of {content_length} bytes")
            return error_response(PayloadTooLarge.status_code, PayloadTooLarge.reason)

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response

    # Outermost layer: 413 answers of the middleware above still carry CORS headers
    # Requests without an Origin header (curl, server-to-server) are never blocked
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # ===== ROUTES =====

    app.include_router(tasks.router, prefix=settings.API_PREFIX)
    app.include_router(state.router, prefix=settings.API_PREFIX)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        prefix = settings.API_PREFIX
        return f"{settings.APP_NAME} is running. Try /health, {prefix}/tasks, {prefix}/state"

    @app.get("/health")
    async def health_check():
        """Liveness check for the hosting platform"""
        return {"ok": True}

    return app

# ===== STARTUP =====

def run_dashboard(
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: bool = False,
    settings: Optional[DashboardSettings] = None
):
    """Run the API with uvicorn"""
    settings = settings or get_settings()
    settings.setup_logging()

    host = host or settings.HOST
    port = port or settings.PORT

    logger.info(f"🌐 API running on http://{host}:{port}")
    logger.info(f"📊 Database: {settings.DB_PATH}")

    if reload:
        uvicorn.run(
            "dashboard.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            log_level=settings.LOG_LEVEL.lower(),
            server_header=False
        )
    else:
        uvicorn.run(
            create_app(settings),
            host=host,
            port=port,
            log_level=settings.LOG_LEVEL.lower(),
            server_header=False
        )

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Run the Exam Command Centre API')
    parser.add_argument('--host', default=None, help='Bind host')
    parser.add_argument('--port', type=int, default=None, help='Bind port')
    parser.add_argument('--reload', action='store_true', help='Auto reload')

    args = parser.parse_args()

    run_dashboard(host=args.host, port=args.port, reload=args.reload)
