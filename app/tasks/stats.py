# app/tasks/stats.py
from app.celery_worker import celery_app
from app.data.database import SessionLocal
from app.repos.stats_repo import StatsRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="app.tasks.stats.record_play_task", ignore_result=True)
def record_play_task(track_id: int):
    db = SessionLocal()
    try:
        StatsRepo(db).increment_play_count(track_id)
        db.commit()
        logger.debug(f"Play recorded for track {track_id}")
    finally:
        db.close()
