"""Gang scheduling through scheduler-plugins PodGroups."""

import logging
from typing import Optional

from kubernetes.client.rest import ApiException

from orchestrator.app.config import Settings, get_settings
from orchestrator.app.indexer import FieldIndexer
from orchestrator.app.kube import ObjectClient, is_not_found
from orchestrator.app.plugins.base import ComponentBuilderPlugin, EnforcePodGroupPolicyPlugin
from orchestrator.app.plugins.indexer import (
    CLUSTER_TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
    TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
    index_cluster_training_runtime_container_runtime_class,
    index_training_runtime_container_runtime_class,
)
from orchestrator.app.resources import add_requests
from shared.schemas import POD_GROUP_LABEL, ObjectMeta, OwnerReference, PodGroup, PodGroupSpec, RuntimeInfo, TrainJob
from shared.schemas.runtime import CLUSTER_TRAINING_RUNTIME_KIND, TRAINING_RUNTIME_KIND

logger = logging.getLogger(__name__)


class Coscheduling(EnforcePodGroupPolicyPlugin, ComponentBuilderPlugin):
    """
    Makes every pod of a TrainJob part of one PodGroup.

    Pods are correlated through the pod group label and the PodGroup carries
    the member count, resource floor and timeout the coscheduling plugin needs
    to place all pods at once. An existing PodGroup is never touched again; it
    goes away with its TrainJob through the owner reference.
    """

    name = "coscheduling"

    def __init__(self, client: ObjectClient, indexer: FieldIndexer, settings: Optional[Settings] = None):
        self.client = client
        self.indexer = indexer
        self.settings = settings or get_settings()
        indexer.index_field(
            TRAINING_RUNTIME_KIND,
            TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
            index_training_runtime_container_runtime_class,
        )
        indexer.index_field(
            CLUSTER_TRAINING_RUNTIME_KIND,
            CLUSTER_TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
            index_cluster_training_runtime_container_runtime_class,
        )

    def enforce_pod_group_policy(self, info: Optional[RuntimeInfo], train_job: TrainJob) -> None:
        if info is None or info.pod_group_policy is None:
            return
        info.labels[POD_GROUP_LABEL] = train_job.metadata.name

    def build(self, info: Optional[RuntimeInfo], train_job: TrainJob) -> Optional[list[PodGroup]]:
        if info is None or info.pod_group_policy is None:
            return None

        name, namespace = train_job.metadata.name, train_job.metadata.namespace
        try:
            self.client.get_pod_group(name, namespace)
        except ApiException as e:
            if not is_not_found(e):
                raise
            logger.debug(f"PodGroup {namespace}/{name} not found, building it")
        else:
            return None

        min_member = 0
        min_resources: dict[str, str] = {}
        for pod_set in info.pod_sets:
            count = pod_set.count if pod_set.count is not None else self.settings.default_pod_set_count
            min_member += count
            min_resources = add_requests(min_resources, pod_set.single_pod_requests, count)

        timeout = None
        if info.pod_group_policy.coscheduling is not None:
            timeout = info.pod_group_policy.coscheduling.schedule_timeout_seconds

        pod_group = PodGroup(
            metadata=ObjectMeta(
                name=name,
                namespace=namespace,
                owner_references=[
                    OwnerReference(
                        api_version=train_job.api_version,
                        kind=train_job.kind,
                        name=name,
                        uid=train_job.metadata.uid,
                        controller=True,
                        block_owner_deletion=True,
                    )
                ],
            ),
            spec=PodGroupSpec(
                min_member=min_member,
                min_resources=min_resources,
                schedule_timeout_seconds=timeout,
            ),
        )
        return [pod_group]

    def runtimes_for_runtime_class(self, runtime_class: str) -> list:
        """Cached TrainingRuntimes and ClusterTrainingRuntimes whose pods request ``runtime_class``."""
        return self.indexer.list(
            TRAINING_RUNTIME_KIND, TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY, runtime_class,
        ) + self.indexer.list(
            CLUSTER_TRAINING_RUNTIME_KIND, CLUSTER_TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY, runtime_class,
        )
