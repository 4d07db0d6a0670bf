import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..deps import get_db

router = APIRouter()
logger = logging.getLogger("quickcook.ready")


@router.get("/ready")
def ready(db: Session = Depends(get_db)):
    db_ok = False
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        logger.warning(f"Datastore not reachable: {e.__class__.__name__}")
    return {"ok": True, "db_ok": db_ok}
