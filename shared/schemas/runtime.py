"""Training runtime templates and the per-reconcile runtime info."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from .job import KubeModel, ObjectMeta, PodGroupPolicy

TRAINING_RUNTIME_KIND = "TrainingRuntime"
CLUSTER_TRAINING_RUNTIME_KIND = "ClusterTrainingRuntime"


class ResourceRequirements(KubeModel):
    requests: dict[str, str] = Field(default_factory=dict)
    limits: dict[str, str] = Field(default_factory=dict)


class Container(KubeModel):
    name: str = ""
    image: Optional[str] = None
    resources: ResourceRequirements = Field(default_factory=ResourceRequirements)


class PodSpec(KubeModel):
    runtime_class_name: Optional[str] = None
    containers: list[Container] = Field(default_factory=list)


class PodTemplateSpec(KubeModel):
    spec: PodSpec = Field(default_factory=PodSpec)


class JobSpec(KubeModel):
    parallelism: Optional[int] = None
    template: PodTemplateSpec = Field(default_factory=PodTemplateSpec)


class JobTemplateSpec(KubeModel):
    spec: JobSpec = Field(default_factory=JobSpec)


class ReplicatedJob(KubeModel):
    name: str = ""
    replicas: int = 1
    template: JobTemplateSpec = Field(default_factory=JobTemplateSpec)


class JobSetSpec(KubeModel):
    replicated_jobs: list[ReplicatedJob] = Field(default_factory=list)


class JobSetTemplateSpec(KubeModel):
    spec: JobSetSpec = Field(default_factory=JobSetSpec)


class TrainingRuntimeSpec(KubeModel):
    template: JobSetTemplateSpec = Field(default_factory=JobSetTemplateSpec)
    pod_group_policy: Optional[PodGroupPolicy] = None


# TrainingRuntime and ClusterTrainingRuntime must stay siblings: the index
# functions tell them apart with isinstance.
class TrainingRuntime(KubeModel):
    api_version: str = "trainer.kubeflow.org/v1alpha1"
    kind: Literal["TrainingRuntime"] = TRAINING_RUNTIME_KIND
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: TrainingRuntimeSpec = Field(default_factory=TrainingRuntimeSpec)


class ClusterTrainingRuntime(KubeModel):
    api_version: str = "trainer.kubeflow.org/v1alpha1"
    kind: Literal["ClusterTrainingRuntime"] = CLUSTER_TRAINING_RUNTIME_KIND
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: TrainingRuntimeSpec = Field(default_factory=TrainingRuntimeSpec)


class PodSet(BaseModel):
    """A named role within the job and how many pods it needs."""
    name: str
    count: Optional[int] = None
    single_pod_requests: dict[str, str] = Field(default_factory=dict)


class RuntimeInfo(BaseModel):
    """
    Scheduling plan computed fresh for every reconcile pass.

    Plugins may add to ``labels``; everything else is read-only to them.
    """
    pod_sets: list[PodSet] = Field(default_factory=list)
    pod_group_policy: Optional[PodGroupPolicy] = None
    labels: dict[str, str] = Field(default_factory=dict)
