# backend/celery_app.py
import os
import sys
import logging
from dotenv import load_dotenv

logging.basicConfig(stream=sys.stdout, level=logging.INFO)
_log = logging.getLogger("env_loader")

BASE_DIR = os.path.dirname(os.path.abspath(__file__))        # backend/
PROJECT_ROOT = os.path.dirname(BASE_DIR)                     # project root (parent of backend)

for p in (os.path.join(PROJECT_ROOT, ".env"), os.path.join(BASE_DIR, ".env")):
    if os.path.exists(p):
        load_dotenv(p, override=False)
        _log.info("Loaded .env from: %s", p)
        break
else:
    load_dotenv(override=False)
# ---------------------------------------------------------

from celery import Celery
from core.config import settings


logger = logging.getLogger("celery_app")

BROKER = settings.celery_broker_url or settings.redis_url or "redis://127.0.0.1:6379/0"
BACKEND = settings.celery_result_backend or settings.redis_url or BROKER

app = Celery(
    "candidate_assessments",
    broker=BROKER,
    backend=BACKEND,
    include=["tasks.cleanup"],
)

# sensible dev defaults
app.conf.task_acks_late = True
app.conf.worker_prefetch_multiplier = 1
app.conf.broker_connection_retry_on_startup = True
app.conf.result_expires = 3600 * 24

app.conf.beat_schedule = {
    "cleanup-expired-videos": {
        "task": "tasks.cleanup.cleanup_expired_videos",
        "schedule": float(settings.cleanup_interval_seconds),
    },
}
