from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from okr_app.core import settings
from okr_app.db import get_db

router = APIRouter()


@router.get("", tags=["health"])
def health(db: Session = Depends(get_db)):
    """Health check endpoint, including a database round trip."""
    db.execute(text("SELECT 1"))
    return {"status": "ok", "version": settings.api_version}
