"""Runs plugins against a TrainJob and derives the runtime info they work on."""

import logging
from typing import Any, Optional, Union

from orchestrator.app.config import Settings, get_settings
from orchestrator.app.indexer import FieldIndexer
from orchestrator.app.kube import ObjectClient
from orchestrator.app.plugins import PLUGIN_REGISTRY
from orchestrator.app.plugins.base import ComponentBuilderPlugin, EnforcePodGroupPolicyPlugin, Plugin
from orchestrator.app.resources import add_requests
from shared.schemas import ClusterTrainingRuntime, PodSet, RuntimeInfo, TrainingRuntime, TrainJob

logger = logging.getLogger(__name__)


class FrameworkError(Exception):
    """Raised when the framework cannot be assembled."""


def build_runtime_info(runtime: Union[TrainingRuntime, ClusterTrainingRuntime]) -> RuntimeInfo:
    """One PodSet per replicated job; count is replicas times job parallelism."""
    pod_sets = []
    for rjob in runtime.spec.template.spec.replicated_jobs:
        job_spec = rjob.template.spec
        requests: dict[str, str] = {}
        for container in job_spec.template.spec.containers:
            requests = add_requests(requests, container.resources.requests)
        pod_sets.append(PodSet(
            name=rjob.name,
            count=rjob.replicas * (job_spec.parallelism or 1),
            single_pod_requests=requests,
        ))
    return RuntimeInfo(pod_sets=pod_sets, pod_group_policy=runtime.spec.pod_group_policy)


class Framework:
    """Holds one instance of every registered plugin and dispatches by policy source."""

    def __init__(
        self,
        client: ObjectClient,
        indexer: Optional[FieldIndexer] = None,
        settings: Optional[Settings] = None,
        registry: Optional[dict[str, type]] = None,
    ):
        self.client = client
        self.indexer = indexer if indexer is not None else FieldIndexer()
        self.settings = settings or get_settings()
        self.plugins: dict[str, Plugin] = {}
        for tag, plugin_cls in (registry if registry is not None else PLUGIN_REGISTRY).items():
            try:
                self.plugins[tag] = plugin_cls(self.client, self.indexer, self.settings)
            except ValueError as e:
                raise FrameworkError(f"failed to initialize plugin {tag}: {e}") from e

    def _active(self, info: Optional[RuntimeInfo], contract: type) -> list:
        if info is None or info.pod_group_policy is None:
            return []
        plugin = self.plugins.get(info.pod_group_policy.source)
        if plugin is None or not isinstance(plugin, contract):
            return []
        return [plugin]

    def run_enforce_pod_group_policy_plugins(self, info: Optional[RuntimeInfo], train_job: TrainJob) -> None:
        for plugin in self._active(info, EnforcePodGroupPolicyPlugin):
            plugin.enforce_pod_group_policy(info, train_job)

    def run_component_builder_plugins(self, info: Optional[RuntimeInfo], train_job: TrainJob) -> list[Any]:
        objects: list[Any] = []
        for plugin in self._active(info, ComponentBuilderPlugin):
            built = plugin.build(info, train_job)
            if built:
                logger.debug(f"Plugin {plugin.name} built {len(built)} object(s) for {train_job.metadata.name}")
                objects.extend(built)
        return objects
