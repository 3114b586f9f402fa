"""
Celery application - background bulk jobs (seed, reindex) with RabbitMQ.
Design: Broker RabbitMQ; Redis as result backend.
"""

from celery import Celery

from news_api.config import get_settings

settings = get_settings()

celery_app = Celery(
    "news_api",
    broker=settings.celery_broker_url,
    backend=settings.redis_url,
    include=["news_api.queue.tasks"],
)

# Bulk jobs can run long; no automatic retries (a failed run is simply reported)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_time_limit=3600,
    task_soft_time_limit=3000,
    worker_prefetch_multiplier=1,  # Fair distribution
)
