import os
from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import errors
from app.config import settings, Settings
from app.database import init_db
from app.logger import configure_logging, request_logging_middleware
from app.users.routers import router as auth_router
from app.expenses.router import router as expenses_router
from app.budgets.router import router as budgets_router


def _build_file(build_dir: str, full_path: str) -> str | None:
    """Path of a file shipped in the build, or None if missing or outside it."""
    request_file = os.path.abspath(os.path.join(build_dir, full_path))
    if os.path.commonpath([build_dir, request_file]) != build_dir:
        return None
    return request_file if os.path.isfile(request_file) else None


def _mount_frontend(app: FastAPI, build_dir: str) -> None:
    build_dir = os.path.abspath(build_dir)
    if not os.path.isdir(build_dir):
        logger.debug(f"Frontend build not found at {build_dir}; serving API only")
        return

    assets_dir = os.path.join(build_dir, "assets")
    if os.path.isdir(assets_dir):
        app.mount("/assets", StaticFiles(directory=assets_dir), name="assets")

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_spa(full_path: str):
        if full_path.startswith("api/"):
            return JSONResponse(
                status_code=404,
                content={"success": False, "message": f"No route for /{full_path}"},
            )

        # Files in the build (favicon.ico, manifest.json, ...) are served as is
        request_file = _build_file(build_dir, full_path)
        if request_file:
            return FileResponse(request_file)

        # Otherwise the SPA handles the route
        return FileResponse(os.path.join(build_dir, "index.html"))


def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or settings

    # Database startup
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(app_settings)
        init_db()
        logger.info(f"{app_settings.APP_NAME} {app_settings.VERSION} started")
        yield
        logger.info(f"{app_settings.APP_NAME} shutdown")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Expense claims, approvals and category budgets.",
        version=app_settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_logging_middleware)

    # Every failure leaves as {"success": false, "message": ...}
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
    app.include_router(expenses_router, prefix="/api/expenses", tags=["Expenses"])
    app.include_router(budgets_router, prefix="/api/budgets", tags=["Budgets"])

    @app.get("/api/health", tags=["Health"])
    def health_check():
        return {
            "success": True,
            "message": f"{app_settings.APP_NAME} API is running",
            "timestamp": datetime.utcnow().isoformat(),
        }

    _mount_frontend(app, app_settings.FRONTEND_BUILD_DIR)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
