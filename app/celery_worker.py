# app/celery_worker.py
from celery import Celery

from app.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "store",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "app.tasks.stats",
)

#bez beat schedule - serwis jest sterowany requestami
celery_app.conf.timezone = "UTC"
#broker niedostepny = szybki blad, a nie wiszacy request
celery_app.conf.broker_connection_retry_on_startup = False
celery_app.conf.broker_transport_options = {"max_retries": 1}
