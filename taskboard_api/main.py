"""
Taskboard API Server

Task assignment and progress tracking over a document store, exposed as a
REST API with bearer token auth.

Usage:
    python3 -m taskboard_api.main
    # or
    uvicorn taskboard_api.main:app --host 0.0.0.0 --port 8000 --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard_api.auth import init_auth
from taskboard_api.routes.auth import router as auth_router
from taskboard_api.routes.tasks import router as tasks_router
from taskboard_api.routes.users import router as users_router
from taskboard_api.store import init_store
from taskboard_api.uploads import init_uploads
from taskboard_core import __version__
from taskboard_core.config import ApiConfig
from taskboard_core.exceptions import TaskboardError

logger = logging.getLogger(__name__)

config = ApiConfig.from_env()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Taskboard API",
    description=(
        "REST API for assigning tasks and tracking their progress.\n\n"
        "**Admins** create, assign and delete tasks and see fleet-wide dashboards.\n\n"
        "**Members** work through checklists on their tasks; progress and status follow."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.allowed_origin],
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

# ── Startup init ─────────────────────────────────────────────────────────────

init_auth(config)
init_store(config.store_url)
init_uploads(config.upload_dir)


# ── Error handlers ───────────────────────────────────────────────────────────

@app.exception_handler(TaskboardError)
async def _taskboard_error_handler(request: Request, exc: TaskboardError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"message": "; ".join(problems) or "Invalid request"})


@app.exception_handler(Exception)
async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server error"})


# ── Routers ──────────────────────────────────────────────────────────────────

app.include_router(auth_router, prefix="/api")
app.include_router(tasks_router, prefix="/api")
app.include_router(users_router, prefix="/api")

app.mount("/uploads", StaticFiles(directory=config.upload_dir, check_dir=False), name="uploads")


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health", tags=["meta"])
def health():
    """Liveness check."""
    return {"status": "ok", "service": "taskboard-api"}


@app.get("/", tags=["meta"])
def root():
    """API info."""
    return {
        "service": "Taskboard API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "auth": {
                "register":       "POST /api/auth/register",
                "login":          "POST /api/auth/login",
                "profile":        "GET  /api/auth/profile",
                "update_profile": "PUT  /api/auth/update-profile",
                "upload_image":   "POST /api/auth/upload-image",
            },
            "tasks": {
                "list":           "GET    /api/tasks",
                "get":            "GET    /api/tasks/{id}",
                "create":         "POST   /api/tasks",
                "update":         "PUT    /api/tasks/{id}",
                "delete":         "DELETE /api/tasks/{id}",
                "status":         "PUT    /api/tasks/{id}/status",
                "checklist":      "PUT    /api/tasks/{id}/todo",
                "dashboard":      "GET    /api/tasks/dashboard-data",
                "user_dashboard": "GET    /api/tasks/user-dashboard-data",
            },
            "users": {
                "list":   "GET    /api/users",
                "get":    "GET    /api/users/{id}",
                "delete": "DELETE /api/users/{id}",
            },
        },
    }


def run():
    """Start the server with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run(
        "taskboard_api.main:app",
        host="0.0.0.0",
        port=config.port,
        reload=False,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    run()
