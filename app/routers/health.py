# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + bill cache.
"""

import os
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.services.bill_cache import BillCache, get_bill_cache
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db), cache: BillCache = Depends(get_bill_cache)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "bill_cache": "unknown",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    if not os.path.exists(cache.path):
        result["bill_cache"] = "empty"
    else:
        try:
            result["bill_cache"] = f"ok ({len(cache.load())} bills)"
        except Exception as e:
            result["bill_cache"] = f"error: {str(e)}"
            result["status"] = "degraded"

    return result
