# File: /app/dependencies.py | Version: 2.0 | Path: /app/dependencies.py
"""
Injectable collaborators. Routes depend on these so tests can swap them
through `app.dependency_overrides`.
"""
from functools import lru_cache
from typing import Protocol

from app.core.config import settings
from app.services.deployments import DeploymentsClient, KubernetesDeploymentsClient


class WorkItemTypeCacheConfig(Protocol):
    def get_cache_control_work_item_type(self) -> str: ...

    def get_cache_control_work_item_types(self) -> str: ...


def get_cache_control_config() -> WorkItemTypeCacheConfig:
    return settings


@lru_cache(maxsize=1)
def _kubernetes_client() -> KubernetesDeploymentsClient:
    return KubernetesDeploymentsClient.from_settings(settings)


def get_deployments_client() -> DeploymentsClient:
    return _kubernetes_client()
