import logging

from fastapi import FastAPI

from app.core.logging_middleware import LoggingMiddleware
from app.db.init_db import init_db

from app.routers.auth import router as auth_router
from app.routers.dashboard import router as dashboard_router
from app.routers.grades import router as grades_router
from app.routers.subjects import router as subjects_router
from app.routers.tasks import router as tasks_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="EduSprint")

# Middleware
app.add_middleware(LoggingMiddleware)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(subjects_router, prefix="/subjects", tags=["subjects"])
app.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
app.include_router(grades_router, prefix="/grades", tags=["grades"])

# Dashboards (no prefix; routes define full paths)
app.include_router(dashboard_router)
