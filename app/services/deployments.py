# File: /app/services/deployments.py | Version: 1.0 | Title: Deployments client (Kubernetes-backed) for the apps facade
"""
Read-mostly view of applications deployed on Kubernetes.

Layout conventions:
  * environment ``e`` lives in namespace ``{prefix}-{e}``
  * a deployment belongs to a space via the label ``space=<space name>``
  * the application name is the ``app`` label (falls back to the deployment name)
  * within an application, a deployment is addressed by its environment name

Methods return None when the addressed object does not exist; any other
Kubernetes API failure is raised as InternalError.
"""
from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, Protocol

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client.rest import ApiException
from kubernetes.utils.quantity import parse_quantity

from app.core.errors import InternalError
from app.schemas.apps import (
    EnvStatCores,
    EnvStatMemory,
    EnvStats,
    PodStats,
    SimpleApp,
    SimpleDeployment,
    SimpleDeploymentStats,
    SimpleDeploymentStatSeries,
    SimpleEnvironment,
    SimpleSpace,
    TimedNumberTuple,
)

logger = logging.getLogger(__name__)

_MISSING = object()


class DeploymentsClient(Protocol):
    def get_space(self, space_id: str, space_name: str) -> SimpleSpace: ...

    def get_application(self, space_name: str, app_name: str) -> Optional[SimpleApp]: ...

    def get_deployment(
        self, space_name: str, app_name: str, env_name: str
    ) -> Optional[SimpleDeployment]: ...

    def get_deployment_stats(
        self, space_name: str, app_name: str, env_name: str, start: Optional[float] = None
    ) -> Optional[SimpleDeploymentStats]: ...

    def get_deployment_stat_series(
        self,
        space_name: str,
        app_name: str,
        env_name: str,
        start: Optional[float] = None,
        end: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> Optional[SimpleDeploymentStatSeries]: ...

    def scale_deployment(
        self, space_name: str, app_name: str, env_name: str, pod_count: int
    ) -> Optional[int]: ...

    def get_environments(self) -> List[SimpleEnvironment]: ...

    def get_environment(self, env_name: str) -> Optional[SimpleEnvironment]: ...

    def get_pods(self, env_name: str, app_name: str) -> Optional[List[Dict[str, Any]]]: ...


def _now_millis() -> float:
    return float(int(time.time() * 1000))


def _to_dict(obj: Any) -> Any:
    return obj.to_dict() if hasattr(obj, "to_dict") else obj


def _labels(obj: Any) -> Dict[str, str]:
    return dict(getattr(obj.metadata, "labels", None) or {})


def _selector(labels: Dict[str, str]) -> str:
    return ",".join(f"{k}={v}" for k, v in sorted(labels.items()))


def _quantity(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(parse_quantity(value))


class KubernetesDeploymentsClient:
    MEMORY_UNITS = "bytes"

    def __init__(
        self,
        *,
        apps_api: Any,
        core_api: Any,
        custom_api: Any = None,
        namespace_prefix: str,
        environments: List[str],
        serializer: Optional[Callable[[Any], Any]] = None,
        clock: Callable[[], float] = _now_millis,
    ):
        self._apps = apps_api
        self._core = core_api
        self._custom = custom_api
        self._prefix = namespace_prefix
        self._environments = list(environments)
        self._serialize = serializer or _to_dict
        self._clock = clock

    @classmethod
    def from_settings(cls, settings) -> "KubernetesDeploymentsClient":
        # In-cluster service account when deployed, local kubeconfig otherwise
        if settings.KUBE_IN_CLUSTER:
            k8s_config.load_incluster_config()
        else:
            k8s_config.load_kube_config()
        api_client = k8s_client.ApiClient()
        return cls(
            apps_api=k8s_client.AppsV1Api(api_client),
            core_api=k8s_client.CoreV1Api(api_client),
            custom_api=k8s_client.CustomObjectsApi(api_client),
            namespace_prefix=settings.APPS_NAMESPACE_PREFIX,
            environments=settings.apps_environments,
            serializer=api_client.sanitize_for_serialization,
        )

    # ----- plumbing -----

    def namespace(self, env_name: str) -> str:
        return f"{self._prefix}-{env_name}"

    def _call(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """Returns _MISSING on 404; other API errors become InternalError."""
        try:
            return fn(*args, **kwargs)
        except ApiException as exc:
            if exc.status == 404:
                return _MISSING
            logger.error(
                "Kubernetes API call %s failed: %s %s",
                getattr(fn, "__name__", fn), exc.status, exc.reason,
            )
            raise InternalError(f"orchestration API error: {exc.status} {exc.reason}") from exc

    def _list_deployments(self, env_name: str, selector: str) -> List[Any]:
        result = self._call(
            self._apps.list_namespaced_deployment, self.namespace(env_name), label_selector=selector
        )
        if result is _MISSING:
            return []
        return list(result.items or [])

    def _find_deployment(self, space_name: str, app_name: str, env_name: str) -> Optional[Any]:
        if env_name not in self._environments:
            return None
        for dep in self._list_deployments(env_name, f"space={space_name}"):
            if self._app_name(dep) == app_name:
                return dep
        return None

    @staticmethod
    def _app_name(dep: Any) -> str:
        return _labels(dep).get("app") or dep.metadata.name

    @staticmethod
    def _version(dep: Any) -> Optional[str]:
        version = _labels(dep).get("version")
        if version:
            return version
        containers = getattr(dep.spec.template.spec, "containers", None) or []
        if containers:
            image = containers[0].image or ""
            last = image.rsplit("/", 1)[-1]
            if ":" in last:
                return last.rsplit(":", 1)[1]
        return None

    def _pod_selector(self, dep: Any) -> str:
        match = getattr(dep.spec.selector, "match_labels", None) or {}
        return _selector(match) if match else f"app={self._app_name(dep)}"

    def _pod_stats(self, env_name: str, dep: Any) -> PodStats:
        result = self._call(
            self._core.list_namespaced_pod, self.namespace(env_name), label_selector=self._pod_selector(dep)
        )
        pods = [] if result is _MISSING else list(result.items or [])
        starting = running = stopping = 0
        for pod in pods:
            if getattr(pod.metadata, "deletion_timestamp", None):
                stopping += 1
            elif getattr(pod.status, "phase", None) == "Running":
                running += 1
            else:
                starting += 1
        return PodStats(starting=starting, running=running, stopping=stopping, total=len(pods))

    def _simple_deployment(self, env_name: str, dep: Any) -> SimpleDeployment:
        return SimpleDeployment(
            id=getattr(dep.metadata, "uid", None),
            name=env_name,
            version=self._version(dep),
            pods=self._pod_stats(env_name, dep),
        )

    # ----- spaces / applications / deployments -----

    def get_space(self, space_id: str, space_name: str) -> SimpleSpace:
        pipelines: "OrderedDict[str, List[SimpleDeployment]]" = OrderedDict()
        for env_name in self._environments:
            for dep in self._list_deployments(env_name, f"space={space_name}"):
                pipelines.setdefault(self._app_name(dep), []).append(
                    self._simple_deployment(env_name, dep)
                )
        apps = [SimpleApp(name=name, pipeline=pipeline) for name, pipeline in sorted(pipelines.items())]
        return SimpleSpace(id=space_id, name=space_name, applications=apps)

    def get_application(self, space_name: str, app_name: str) -> Optional[SimpleApp]:
        pipeline = []
        for env_name in self._environments:
            dep = self._find_deployment(space_name, app_name, env_name)
            if dep is not None:
                pipeline.append(self._simple_deployment(env_name, dep))
        if not pipeline:
            return None
        return SimpleApp(name=app_name, pipeline=pipeline)

    def get_deployment(self, space_name: str, app_name: str, env_name: str) -> Optional[SimpleDeployment]:
        dep = self._find_deployment(space_name, app_name, env_name)
        if dep is None:
            return None
        return self._simple_deployment(env_name, dep)

    def scale_deployment(self, space_name: str, app_name: str, env_name: str, pod_count: int) -> Optional[int]:
        dep = self._find_deployment(space_name, app_name, env_name)
        if dep is None:
            return None
        previous = getattr(dep.spec, "replicas", None)
        result = self._call(
            self._apps.patch_namespaced_deployment_scale,
            dep.metadata.name,
            self.namespace(env_name),
            {"spec": {"replicas": pod_count}},
        )
        if result is _MISSING:
            return None
        logger.info(
            "Scaled deployment %s in %s from %s to %d pods",
            dep.metadata.name, self.namespace(env_name), previous, pod_count,
        )
        return previous

    # ----- stats -----

    def _current_usage(self, env_name: str, dep: Any) -> Optional[SimpleDeploymentStats]:
        if self._custom is None:
            return None
        result = self._call(
            self._custom.list_namespaced_custom_object,
            "metrics.k8s.io",
            "v1beta1",
            self.namespace(env_name),
            "pods",
            label_selector=self._pod_selector(dep),
        )
        if result is _MISSING:
            return None
        cores = memory = 0.0
        for item in result.get("items", []):
            for container in item.get("containers", []):
                usage = container.get("usage") or {}
                cores += _quantity(usage.get("cpu")) or 0.0
                memory += _quantity(usage.get("memory")) or 0.0
        now = self._clock()
        return SimpleDeploymentStats(
            cores=TimedNumberTuple(time=now, value=cores),
            memory=TimedNumberTuple(time=now, value=memory),
        )

    def get_deployment_stats(
        self, space_name: str, app_name: str, env_name: str, start: Optional[float] = None
    ) -> Optional[SimpleDeploymentStats]:
        dep = self._find_deployment(space_name, app_name, env_name)
        if dep is None:
            return None
        # The metrics API only knows "now"; `start` cannot move the sample.
        return self._current_usage(env_name, dep) or SimpleDeploymentStats()

    def get_deployment_stat_series(
        self,
        space_name: str,
        app_name: str,
        env_name: str,
        start: Optional[float] = None,
        end: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> Optional[SimpleDeploymentStatSeries]:
        dep = self._find_deployment(space_name, app_name, env_name)
        if dep is None:
            return None
        series = SimpleDeploymentStatSeries(start=start, end=end)
        sample = self._current_usage(env_name, dep)
        if sample is None or (limit is not None and limit < 1):
            return series
        t = sample.cores.time
        if (start is None or t >= start) and (end is None or t <= end):
            series.cores.append(sample.cores)
            series.memory.append(sample.memory)
        return series

    # ----- environments -----

    def _environment(self, env_name: str) -> Optional[SimpleEnvironment]:
        ns = self._call(self._core.read_namespace, self.namespace(env_name))
        if ns is _MISSING:
            return None
        quotas = self._call(self._core.list_namespaced_resource_quota, self.namespace(env_name))
        hard: Dict[str, Any] = {}
        used: Dict[str, Any] = {}
        if quotas is not _MISSING and quotas.items:
            status = quotas.items[0].status
            hard = dict(getattr(status, "hard", None) or {})
            used = dict(getattr(status, "used", None) or {})

        def pick(values: Dict[str, Any], resource: str) -> Optional[float]:
            return _quantity(values.get(f"limits.{resource}", values.get(resource)))

        return SimpleEnvironment(
            id=getattr(ns.metadata, "uid", None),
            name=env_name,
            quota=EnvStats(
                cpucores=EnvStatCores(used=pick(used, "cpu"), quota=pick(hard, "cpu")),
                memory=EnvStatMemory(
                    used=pick(used, "memory"), quota=pick(hard, "memory"), units=self.MEMORY_UNITS
                ),
            ),
        )

    def get_environments(self) -> List[SimpleEnvironment]:
        envs = (self._environment(name) for name in self._environments)
        return [e for e in envs if e is not None]

    def get_environment(self, env_name: str) -> Optional[SimpleEnvironment]:
        if env_name not in self._environments:
            return None
        return self._environment(env_name)

    # ----- pods -----

    def get_pods(self, env_name: str, app_name: str) -> Optional[List[Dict[str, Any]]]:
        if env_name not in self._environments:
            return None
        result = self._call(
            self._core.list_namespaced_pod, self.namespace(env_name), label_selector=f"app={app_name}"
        )
        if result is _MISSING:
            return None
        return [self._serialize(pod) for pod in result.items or []]
