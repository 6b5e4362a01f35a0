"""PodGroup as consumed by the scheduler-plugins coscheduling controller."""

from typing import Optional

from pydantic import Field

from .job import KubeModel, ObjectMeta

POD_GROUP_GROUP = "scheduling.x-k8s.io"
POD_GROUP_VERSION = "v1alpha1"
POD_GROUP_PLURAL = "podgroups"
POD_GROUP_KIND = "PodGroup"

# Must match the label the coscheduling plugin reads from pods.
POD_GROUP_LABEL = "scheduling.x-k8s.io/pod-group"


class PodGroupSpec(KubeModel):
    min_member: int = 0
    min_resources: dict[str, str] = Field(default_factory=dict)
    schedule_timeout_seconds: Optional[int] = None


class PodGroup(KubeModel):
    api_version: str = f"{POD_GROUP_GROUP}/{POD_GROUP_VERSION}"
    kind: str = POD_GROUP_KIND
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: PodGroupSpec = Field(default_factory=PodGroupSpec)
