"""Orchestrator configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Orchestrator settings from environment."""

    # Celery broker / result backend
    redis_url: str = "redis://localhost:6379/0"

    # Kubernetes
    use_k8s: bool = True  # Set False for local dev without K8s
    request_timeout: float = 10.0

    # Pod sets without an explicit count are treated as this many pods
    default_pod_set_count: int = 1

    # Reconcile retry policy; the plugins themselves never retry
    max_reconcile_retries: int = 5
    retry_backoff_seconds: int = 10
    task_soft_time_limit: int = 60
    task_time_limit: int = 90

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
