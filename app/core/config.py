import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class ScoringSettings(BaseModel):
    default_weight: float = Field(default=float(os.getenv("DEFAULT_GOAL_WEIGHT", "1.0")))
    max_proficiency_level: int = 5
    proficient_level: int = 3  # counted as "covered" in team matrices
    months_per_level: int = int(os.getenv("MONTHS_PER_LEVEL", "3"))
    development_plan_months: int = int(os.getenv("DEVELOPMENT_PLAN_MONTHS", "6"))

class ReviewSettings(BaseModel):
    default_phase_days: int = int(os.getenv("REVIEW_DEFAULT_PHASE_DAYS", "7"))
    min_peers: int = 3
    max_peers: int = 5

class Config(BaseModel):
    app_name: str = "HR Performance Service"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    version: str = "1.0.0"
    build_id: str = os.getenv("BUILD_ID", "local")
    request_id_header: str = "X-Request-ID"
    organization_header: str = "X-Organization-ID"

    # CORS: comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    scoring: ScoringSettings = ScoringSettings()
    reviews: ReviewSettings = ReviewSettings()

settings = Config()

# --- Startup checks ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing") and "*" in settings.cors_origins:
    _logger.warning("CORS_ORIGINS allows any origin outside development.")
