from fastapi import APIRouter, Depends
from sqlmodel import Session, text
from datetime import datetime

from shopadmin.config import settings
from shopadmin.database import get_session

router = APIRouter()


@router.get("/health")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"

    try:
        # simple DB ping
        session.exec(text("SELECT 1"))
    except Exception:
        db_status = "failed"

    return {
        "success": True,
        "message": "Server is running",
        "database": db_status,
        "environment": settings.ENV,
        "timestamp": datetime.utcnow().isoformat(),
    }
