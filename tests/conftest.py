from unittest.mock import MagicMock

import pytest
from kubernetes.client.rest import ApiException

from orchestrator.app.config import Settings
from orchestrator.app.indexer import FieldIndexer
from orchestrator.app.kube import ObjectClient
from shared.schemas import (
    CoschedulingPodGroupPolicySource,
    ObjectMeta,
    PodGroupPolicy,
    RuntimeRef,
    TrainJob,
    TrainJobSpec,
)
from shared.schemas.runtime import (
    Container,
    JobSetSpec,
    JobSetTemplateSpec,
    JobSpec,
    JobTemplateSpec,
    PodSpec,
    PodTemplateSpec,
    ReplicatedJob,
    ResourceRequirements,
    TrainingRuntimeSpec,
)


# -------------------------------------------------------
# Helpers
# -------------------------------------------------------

def not_found():
    return ApiException(status=404, reason="Not Found")


def make_train_job(name="test-job", namespace="default", uid="", runtime="torch-distributed",
                   runtime_kind="ClusterTrainingRuntime"):
    return TrainJob(
        metadata=ObjectMeta(name=name, namespace=namespace, uid=uid),
        spec=TrainJobSpec(runtime_ref=RuntimeRef(name=runtime, kind=runtime_kind)),
    )


def coscheduling_policy(timeout=30):
    return PodGroupPolicy(coscheduling=CoschedulingPodGroupPolicySource(schedule_timeout_seconds=timeout))


def replicated_job(name="node", runtime_class=None, replicas=1, parallelism=None, requests=None):
    return ReplicatedJob(
        name=name,
        replicas=replicas,
        template=JobTemplateSpec(spec=JobSpec(
            parallelism=parallelism,
            template=PodTemplateSpec(spec=PodSpec(
                runtime_class_name=runtime_class,
                containers=[Container(name="trainer", resources=ResourceRequirements(requests=requests or {}))],
            )),
        )),
    )


def runtime_spec(*rjobs, policy=None):
    return TrainingRuntimeSpec(
        template=JobSetTemplateSpec(spec=JobSetSpec(replicated_jobs=list(rjobs))),
        pod_group_policy=policy,
    )


# -------------------------------------------------------
# Fixtures
# -------------------------------------------------------

@pytest.fixture
def settings():
    return Settings(use_k8s=True, default_pod_set_count=1, request_timeout=5.0)


@pytest.fixture
def api():
    api = MagicMock()
    api.get_namespaced_custom_object.side_effect = not_found()
    return api


@pytest.fixture
def client(api):
    return ObjectClient(api=api, request_timeout=5.0)


@pytest.fixture
def indexer():
    return FieldIndexer()
