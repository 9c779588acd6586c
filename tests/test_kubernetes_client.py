# File: tests/test_kubernetes_client.py | Version: 1.0 | Title: Deployments client over fake Kubernetes APIs
from types import SimpleNamespace

import pytest
from kubernetes.client.rest import ApiException

from app.core.errors import InternalError
from app.services.deployments import KubernetesDeploymentsClient

NOW = 1_500_000_000_000.0


def _matches(labels, selector):
    if not selector:
        return True
    wanted = dict(part.split("=", 1) for part in selector.split(","))
    return all(labels.get(k) == v for k, v in wanted.items())


def make_deployment(name, space, app=None, version=None, image="registry/app:2.1.0", replicas=1):
    labels = {"space": space}
    if app:
        labels["app"] = app
    if version:
        labels["version"] = version
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, uid=f"uid-{name}", labels=labels),
        spec=SimpleNamespace(
            replicas=replicas,
            selector=SimpleNamespace(match_labels={"app": app or name}),
            template=SimpleNamespace(
                spec=SimpleNamespace(containers=[SimpleNamespace(image=image)])
            ),
        ),
    )


def make_pod(app, phase="Running", deleting=False):
    return SimpleNamespace(
        metadata=SimpleNamespace(
            name=f"{app}-pod", labels={"app": app}, deletion_timestamp="now" if deleting else None
        ),
        status=SimpleNamespace(phase=phase),
    )


class FakeAppsV1:
    def __init__(self, deployments):
        self.deployments = deployments  # namespace -> [deployment]
        self.scaled = []
        self.fail_with = None

    def list_namespaced_deployment(self, namespace, label_selector=None):
        if self.fail_with:
            raise ApiException(status=self.fail_with, reason="boom")
        if namespace not in self.deployments:
            raise ApiException(status=404, reason="Not Found")
        items = [d for d in self.deployments[namespace] if _matches(d.metadata.labels, label_selector)]
        return SimpleNamespace(items=items)

    def patch_namespaced_deployment_scale(self, name, namespace, body):
        self.scaled.append((name, namespace, body))
        return SimpleNamespace()


class FakeCoreV1:
    def __init__(self, pods, namespaces, quotas=None):
        self.pods = pods  # namespace -> [pod]
        self.namespaces = namespaces
        self.quotas = quotas or {}

    def list_namespaced_pod(self, namespace, label_selector=None):
        items = [p for p in self.pods.get(namespace, []) if _matches(p.metadata.labels, label_selector)]
        return SimpleNamespace(items=items)

    def read_namespace(self, name):
        if name not in self.namespaces:
            raise ApiException(status=404, reason="Not Found")
        return SimpleNamespace(metadata=SimpleNamespace(name=name, uid=f"ns-{name}"))

    def list_namespaced_resource_quota(self, namespace):
        quota = self.quotas.get(namespace)
        return SimpleNamespace(items=[quota] if quota else [])


class FakeCustomObjects:
    def __init__(self, usage):
        self.usage = usage  # namespace -> [{"cpu": .., "memory": ..}]

    def list_namespaced_custom_object(self, group, version, namespace, plural, label_selector=None):
        assert (group, version, plural) == ("metrics.k8s.io", "v1beta1", "pods")
        return {
            "items": [{"containers": [{"usage": u}]} for u in self.usage.get(namespace, [])]
        }


@pytest.fixture()
def cluster():
    apps = FakeAppsV1(
        {
            "fabric8-stage": [
                make_deployment("web-stage", "myspace", app="web", version="1.0.1"),
                make_deployment("worker", "myspace"),
                make_deployment("other", "elsewhere", app="other"),
            ],
            "fabric8-run": [make_deployment("web-run", "myspace", app="web", replicas=3)],
        }
    )
    core = FakeCoreV1(
        pods={
            "fabric8-stage": [
                make_pod("web"),
                make_pod("web", phase="Pending"),
                make_pod("web", deleting=True),
            ],
            "fabric8-run": [make_pod("web")],
        },
        namespaces={"fabric8-stage", "fabric8-run"},
        quotas={
            "fabric8-stage": SimpleNamespace(
                status=SimpleNamespace(
                    hard={"limits.cpu": "2", "limits.memory": "1Gi"},
                    used={"limits.cpu": "500m", "limits.memory": "256Mi"},
                )
            )
        },
    )
    custom = FakeCustomObjects({"fabric8-stage": [{"cpu": "250m", "memory": "64Mi"}, {"cpu": "250m"}]})
    return SimpleNamespace(apps=apps, core=core, custom=custom)


@pytest.fixture()
def deployments(cluster):
    return KubernetesDeploymentsClient(
        apps_api=cluster.apps,
        core_api=cluster.core,
        custom_api=cluster.custom,
        namespace_prefix="fabric8",
        environments=["stage", "run"],
        serializer=lambda pod: {"name": pod.metadata.name, "phase": pod.status.phase},
        clock=lambda: NOW,
    )


def test_space_groups_deployments_into_application_pipelines(deployments):
    space = deployments.get_space("2e0698d8-753e-4cef-bb7c-f027634824a2", "myspace")
    assert [a.name for a in space.applications] == ["web", "worker"]

    web = space.applications[0]
    assert [d.name for d in web.pipeline] == ["stage", "run"]
    assert web.pipeline[0].version == "1.0.1"
    # falls back to the image tag when there is no version label
    assert web.pipeline[1].version == "2.1.0"
    assert web.pipeline[0].pods.model_dump() == {"starting": 1, "running": 1, "stopping": 1, "total": 3}


def test_application_and_deployment_lookup(deployments):
    app = deployments.get_application("myspace", "web")
    assert app is not None and len(app.pipeline) == 2

    dep = deployments.get_deployment("myspace", "web", "run")
    assert dep.id == "uid-web-run"
    assert dep.pods.total == 1

    assert deployments.get_application("myspace", "missing") is None
    assert deployments.get_deployment("myspace", "web", "nope") is None
    assert deployments.get_deployment("elsewhere", "web", "stage") is None


def test_scale_returns_previous_replicas(deployments, cluster):
    assert deployments.scale_deployment("myspace", "web", "run", 5) == 3
    assert cluster.apps.scaled == [("web-run", "fabric8-run", {"spec": {"replicas": 5}})]
    assert deployments.scale_deployment("myspace", "ghost", "run", 1) is None


def test_stats_sum_container_usage(deployments):
    stats = deployments.get_deployment_stats("myspace", "web", "stage")
    assert stats.cores.value == pytest.approx(0.5)
    assert stats.memory.value == 64 * 1024 * 1024
    assert stats.cores.time == NOW


def test_stat_series_holds_current_sample_inside_window(deployments):
    series = deployments.get_deployment_stat_series("myspace", "web", "stage", NOW - 10, NOW + 10)
    assert len(series.cores) == 1 and len(series.memory) == 1

    past = deployments.get_deployment_stat_series("myspace", "web", "stage", 0, NOW - 10)
    assert past.cores == [] and past.start == 0


def test_stats_without_metrics_api_are_empty(cluster):
    client = KubernetesDeploymentsClient(
        apps_api=cluster.apps,
        core_api=cluster.core,
        namespace_prefix="fabric8",
        environments=["stage"],
    )
    stats = client.get_deployment_stats("myspace", "web", "stage")
    assert stats.cores is None and stats.memory is None


def test_environments_report_quota(deployments):
    envs = deployments.get_environments()
    assert [e.name for e in envs] == ["stage", "run"]

    stage = deployments.get_environment("stage")
    assert stage.id == "ns-fabric8-stage"
    assert stage.quota.cpucores.quota == 2.0
    assert stage.quota.cpucores.used == 0.5
    assert stage.quota.memory.quota == 1024 ** 3
    assert stage.quota.memory.units == "bytes"

    assert deployments.get_environment("run").quota.cpucores.quota is None
    assert deployments.get_environment("prod") is None


def test_missing_namespace_is_not_found(cluster):
    client = KubernetesDeploymentsClient(
        apps_api=cluster.apps,
        core_api=cluster.core,
        namespace_prefix="fabric8",
        environments=["stage", "dev"],
    )
    assert client.get_environment("dev") is None
    assert [e.name for e in client.get_environments()] == ["stage"]
    assert client.get_deployment("myspace", "web", "dev") is None


def test_pods_are_serialized(deployments):
    pods = deployments.get_pods("stage", "web")
    assert len(pods) == 3
    assert pods[0] == {"name": "web-pod", "phase": "Running"}
    assert deployments.get_pods("prod", "web") is None


def test_api_failures_become_internal_errors(deployments, cluster):
    cluster.apps.fail_with = 500
    with pytest.raises(InternalError) as excinfo:
        deployments.get_application("myspace", "web")
    assert excinfo.value.status_code == 500
