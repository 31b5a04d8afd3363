# app/services/stats_service.py
from app.tasks.stats import record_play_task
from app.utils.logging import get_logger

logger = get_logger(__name__)


class PlayCounter:
    """
    Licznik odtworzen preview.
    Statystyka niekrytyczna - wysylana asynchronicznie przez Celery,
    przy niedostepnym brokerze gubimy inkrementacje.
    """

    @staticmethod
    def record_play(track_id: int):
        try:
            record_play_task.delay(track_id)
        except Exception as e:
            logger.warning(f"Dropped play count for track {track_id}: {e}")
