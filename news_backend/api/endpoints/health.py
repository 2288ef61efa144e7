from datetime import datetime, timezone
from typing import Dict, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import text

from ... import __version__
from ...core.database import get_db

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "database": "unhealthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    return {
        "status": "healthy",
        "service": "News Backend",
        "version": __version__,
        "database": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
