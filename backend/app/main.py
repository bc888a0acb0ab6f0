# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .database.base import Base
from .database.session import engine
from .config import settings
from .logging_config import configure_logging

# Import all models to ensure they're registered with Base
from .database import models  # noqa: F401
from .routers.records import build_router
from .services.registry import ENTITIES

configure_logging()

app = FastAPI(
    title="University Journal",
    description="Groups, students, teachers, subjects and grades with CSV/PDF export",
    version="1.0.0"
)

# CORS middleware for frontend communication (between client req and api logic)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create all database tables
Base.metadata.create_all(bind=engine)

# One resource family per entity: /groups, /students, /teachers, /subjects, /grades
for entity in ENTITIES.values():
    app.include_router(build_router(entity))


@app.get("/")
def root():
    return {
        "status": "ok",
        "service": "University Journal API",
        "version": "1.0.0",
        "sections": [
            {"name": entity.name, "title": entity.title}
            for entity in ENTITIES.values()
        ]
    }

@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "database": engine.url.get_backend_name()
    }

#   cd backend
#   python -m uvicorn app.main:app --reload
#   API docs (interactive): http://127.0.0.1:8000/docs
