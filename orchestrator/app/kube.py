"""Kubernetes access for train jobs, runtimes and pod groups."""

import logging
from typing import Optional, Union

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from shared.schemas import ClusterTrainingRuntime, PodGroup, TrainingRuntime, TrainJob
from shared.schemas.podgroup import POD_GROUP_GROUP, POD_GROUP_PLURAL, POD_GROUP_VERSION
from shared.schemas.runtime import CLUSTER_TRAINING_RUNTIME_KIND

logger = logging.getLogger(__name__)

TRAINER_GROUP = "trainer.kubeflow.org"
TRAINER_VERSION = "v1alpha1"


def is_not_found(exc: BaseException) -> bool:
    return isinstance(exc, ApiException) and exc.status == 404


def is_conflict(exc: BaseException) -> bool:
    return isinstance(exc, ApiException) and exc.status == 409


def _load_custom_objects_api() -> client.CustomObjectsApi:
    """Load K8s config (in-cluster or kubeconfig)."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        try:
            config.load_kube_config()
        except config.ConfigException:
            raise RuntimeError("Could not load Kubernetes config")
    return client.CustomObjectsApi()


class ObjectClient:
    """
    Typed reads and creates on top of CustomObjectsApi.

    Every call carries ``request_timeout`` so a stalled API server surfaces as
    an error instead of blocking the caller. ApiException is never caught here.
    """

    def __init__(self, api: Optional[client.CustomObjectsApi] = None, request_timeout: Optional[float] = None):
        self._api = api
        self.request_timeout = request_timeout

    @property
    def api(self) -> client.CustomObjectsApi:
        if self._api is None:
            self._api = _load_custom_objects_api()
        return self._api

    def get_pod_group(self, name: str, namespace: str) -> PodGroup:
        data = self.api.get_namespaced_custom_object(
            POD_GROUP_GROUP, POD_GROUP_VERSION, namespace, POD_GROUP_PLURAL, name,
            _request_timeout=self.request_timeout,
        )
        return PodGroup.model_validate(data)

    def create_pod_group(self, pod_group: PodGroup) -> None:
        self.api.create_namespaced_custom_object(
            POD_GROUP_GROUP, POD_GROUP_VERSION, pod_group.metadata.namespace, POD_GROUP_PLURAL,
            pod_group.to_manifest(),
            _request_timeout=self.request_timeout,
        )
        logger.info(f"Created PodGroup {pod_group.metadata.namespace}/{pod_group.metadata.name}")

    def get_train_job(self, name: str, namespace: str) -> TrainJob:
        data = self.api.get_namespaced_custom_object(
            TRAINER_GROUP, TRAINER_VERSION, namespace, "trainjobs", name,
            _request_timeout=self.request_timeout,
        )
        return TrainJob.model_validate(data)

    def list_train_jobs(self) -> list[TrainJob]:
        data = self.api.list_cluster_custom_object(
            TRAINER_GROUP, TRAINER_VERSION, "trainjobs",
            _request_timeout=self.request_timeout,
        )
        return [TrainJob.model_validate(item) for item in data.get("items", [])]

    def get_runtime(self, train_job: TrainJob) -> Union[TrainingRuntime, ClusterTrainingRuntime]:
        """Resolve the runtime a TrainJob refers to, namespaced or cluster-scoped."""
        ref = train_job.spec.runtime_ref
        if ref.kind == CLUSTER_TRAINING_RUNTIME_KIND:
            data = self.api.get_cluster_custom_object(
                TRAINER_GROUP, TRAINER_VERSION, "clustertrainingruntimes", ref.name,
                _request_timeout=self.request_timeout,
            )
            return ClusterTrainingRuntime.model_validate(data)
        data = self.api.get_namespaced_custom_object(
            TRAINER_GROUP, TRAINER_VERSION, train_job.metadata.namespace, "trainingruntimes", ref.name,
            _request_timeout=self.request_timeout,
        )
        return TrainingRuntime.model_validate(data)

    def list_training_runtimes(self) -> list[TrainingRuntime]:
        data = self.api.list_cluster_custom_object(
            TRAINER_GROUP, TRAINER_VERSION, "trainingruntimes",
            _request_timeout=self.request_timeout,
        )
        return [TrainingRuntime.model_validate(item) for item in data.get("items", [])]

    def list_cluster_training_runtimes(self) -> list[ClusterTrainingRuntime]:
        data = self.api.list_cluster_custom_object(
            TRAINER_GROUP, TRAINER_VERSION, "clustertrainingruntimes",
            _request_timeout=self.request_timeout,
        )
        return [ClusterTrainingRuntime.model_validate(item) for item in data.get("items", [])]
