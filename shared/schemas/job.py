"""TrainJob and object metadata schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TRAINER_API_VERSION = "trainer.kubeflow.org/v1alpha1"
TRAIN_JOB_KIND = "TrainJob"


class KubeModel(BaseModel):
    """Base for objects that round-trip through the Kubernetes API as camelCase JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_manifest(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class OwnerReference(KubeModel):
    api_version: str
    kind: str
    name: str
    uid: str = ""
    controller: Optional[bool] = None
    block_owner_deletion: Optional[bool] = None


class ObjectMeta(KubeModel):
    name: str = ""
    namespace: Optional[str] = None
    uid: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    owner_references: list[OwnerReference] = Field(default_factory=list)


class CoschedulingPodGroupPolicySource(KubeModel):
    """Gang scheduling through the scheduler-plugins coscheduling plugin."""
    schedule_timeout_seconds: Optional[int] = 60


class PodGroupPolicy(KubeModel):
    """Pod group policy of a runtime. Exactly one source is expected to be set."""
    coscheduling: Optional[CoschedulingPodGroupPolicySource] = None

    @property
    def source(self) -> Optional[str]:
        if self.coscheduling is not None:
            return "coscheduling"
        return None


class RuntimeRef(KubeModel):
    name: str
    api_group: str = "trainer.kubeflow.org"
    kind: str = "ClusterTrainingRuntime"


class TrainJobSpec(KubeModel):
    runtime_ref: RuntimeRef
    suspend: Optional[bool] = None


class TrainJob(KubeModel):
    """A distributed training job as stored in the cluster."""
    api_version: str = TRAINER_API_VERSION
    kind: str = TRAIN_JOB_KIND
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: Optional[TrainJobSpec] = None
