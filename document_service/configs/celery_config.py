"""
Celery configuration settings.

Broker and result backend for the worker that runs the periodic orphan sweep.

Dependencies: pydantic, pydantic_settings
System role: Background task queue configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from document_service.configs.base import env_config


class CelerySettings(BaseSettings):
    """Celery broker, result backend and worker limits."""

    model_config = env_config("CELERY_")

    broker_url: str = Field(default="redis://localhost:6379/0", description="Redis broker URL")
    result_backend: str = Field(default="redis://localhost:6379/1", description="Redis result backend URL")
    result_expires: int = Field(default=86400, description="Seconds sweep reports are kept")
    task_time_limit: int = Field(default=900, gt=0, description="Hard limit for one sweep in seconds")
    worker_prefetch_multiplier: int = Field(default=1, ge=1)
