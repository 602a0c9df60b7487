from fastapi import APIRouter
from app.routers import progress, goals, competencies, reviews

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(progress.router, tags=["Progress Scoring"])
api_router.include_router(goals.router, tags=["Goals & OKRs"])
api_router.include_router(competencies.router, tags=["Competency Matrix"])
api_router.include_router(reviews.router, tags=["Performance Reviews"])
