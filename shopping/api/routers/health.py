# shopping/api/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopping.data.database import get_db
from shopping.domain.schemas import HealthOut
from shopping.utils.settings import SERVICE_NAME
from shopping.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "up"
    except SQLAlchemyError as e:
        logger.warning("Health check database probe failed", error=str(e))
        database = "down"

    return {
        "status": "healthy" if database == "up" else "degraded",
        "service": SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc),
        "database": database,
    }
