"""Shared Pydantic schemas for train jobs, runtimes and pod groups."""

from .job import (
    CoschedulingPodGroupPolicySource,
    ObjectMeta,
    OwnerReference,
    PodGroupPolicy,
    RuntimeRef,
    TrainJob,
    TrainJobSpec,
)
from .podgroup import POD_GROUP_LABEL, PodGroup, PodGroupSpec
from .runtime import (
    ClusterTrainingRuntime,
    PodSet,
    ReplicatedJob,
    RuntimeInfo,
    TrainingRuntime,
    TrainingRuntimeSpec,
)

__all__ = [
    "ClusterTrainingRuntime",
    "CoschedulingPodGroupPolicySource",
    "ObjectMeta",
    "OwnerReference",
    "POD_GROUP_LABEL",
    "PodGroup",
    "PodGroupPolicy",
    "PodGroupSpec",
    "PodSet",
    "ReplicatedJob",
    "RuntimeInfo",
    "RuntimeRef",
    "TrainJob",
    "TrainJobSpec",
    "TrainingRuntime",
    "TrainingRuntimeSpec",
]
