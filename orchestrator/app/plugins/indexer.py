"""Field index functions over the container runtime classes of training runtimes."""

from typing import Any, Optional

from shared.schemas import ClusterTrainingRuntime, TrainingRuntime
from shared.schemas.runtime import TrainingRuntimeSpec

TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY = (
    ".trainingRuntimeSpec.jobSetTemplateSpec.replicatedJobs.podTemplateSpec.runtimeClassName"
)
CLUSTER_TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY = (
    ".clusterTrainingRuntimeSpec.jobSetTemplateSpec.replicatedJobs.podTemplateSpec.runtimeClassName"
)


def _runtime_class_names(spec: TrainingRuntimeSpec) -> list[str]:
    return [
        rjob.template.spec.template.spec.runtime_class_name
        for rjob in spec.template.spec.replicated_jobs
        if rjob.template.spec.template.spec.runtime_class_name is not None
    ]


def index_training_runtime_container_runtime_class(obj: Any) -> Optional[list[str]]:
    if not isinstance(obj, TrainingRuntime):
        return None
    return _runtime_class_names(obj.spec)


def index_cluster_training_runtime_container_runtime_class(obj: Any) -> Optional[list[str]]:
    if not isinstance(obj, ClusterTrainingRuntime):
        return None
    return _runtime_class_names(obj.spec)
