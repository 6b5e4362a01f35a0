"""Capability contracts the framework invokes plugins through."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from shared.schemas import RuntimeInfo, TrainJob


class Plugin(ABC):
    name: str = ""


class EnforcePodGroupPolicyPlugin(Plugin):
    """Invoked while the runtime info for a TrainJob is assembled."""

    @abstractmethod
    def enforce_pod_group_policy(self, info: Optional[RuntimeInfo], train_job: TrainJob) -> None:
        """Mutate ``info`` for the plugin's policy. Raise on failure."""


class ComponentBuilderPlugin(Plugin):
    """Invoked during the apply phase; returned objects are persisted by the caller."""

    @abstractmethod
    def build(self, info: Optional[RuntimeInfo], train_job: TrainJob) -> Optional[list[Any]]:
        ...
