import pytest

from orchestrator.app.indexer import FieldIndexer, IndexConflictError, IndexNotFoundError
from orchestrator.app.plugins.indexer import (
    CLUSTER_TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
    TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
    index_cluster_training_runtime_container_runtime_class,
    index_training_runtime_container_runtime_class,
)
from shared.schemas import ClusterTrainingRuntime, ObjectMeta, TrainingRuntime

from conftest import replicated_job, runtime_spec


def training_runtime(*rjobs, name="rt", namespace="default"):
    return TrainingRuntime(metadata=ObjectMeta(name=name, namespace=namespace), spec=runtime_spec(*rjobs))


def cluster_training_runtime(*rjobs, name="crt"):
    return ClusterTrainingRuntime(metadata=ObjectMeta(name=name), spec=runtime_spec(*rjobs))


# -------------------------------------------------------
# Index functions
# -------------------------------------------------------

@pytest.mark.parametrize("index, make, other", [
    (index_training_runtime_container_runtime_class, training_runtime, cluster_training_runtime),
    (index_cluster_training_runtime_container_runtime_class, cluster_training_runtime, training_runtime),
])
class TestRuntimeClassIndex:

    def test_wrong_type(self, index, make, other):
        assert index(other()) is None

    def test_unrelated_object(self, index, make, other):
        assert index({"kind": "TrainingRuntime"}) is None

    def test_empty_replicated_jobs(self, index, make, other):
        assert index(make()) == []

    def test_with_runtime_class_name(self, index, make, other):
        assert index(make(replicated_job(runtime_class="test-runtime-class"))) == ["test-runtime-class"]

    def test_multiple_runtime_class_names(self, index, make, other):
        obj = make(
            replicated_job(runtime_class="test-runtime-class-1"),
            replicated_job(runtime_class="test-runtime-class-2"),
        )
        assert index(obj) == ["test-runtime-class-1", "test-runtime-class-2"]

    def test_skips_undeclared_and_keeps_order(self, index, make, other):
        obj = make(
            replicated_job(name="launcher"),
            replicated_job(runtime_class="a"),
            replicated_job(runtime_class="b"),
            replicated_job(name="ps"),
        )
        assert index(obj) == ["a", "b"]

    def test_keeps_duplicates(self, index, make, other):
        obj = make(replicated_job(runtime_class="gvisor"), replicated_job(runtime_class="gvisor"))
        assert index(obj) == ["gvisor", "gvisor"]


# -------------------------------------------------------
# FieldIndexer
# -------------------------------------------------------

@pytest.fixture
def cache():
    indexer = FieldIndexer()
    indexer.index_field("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
                        index_training_runtime_container_runtime_class)
    indexer.index_field("ClusterTrainingRuntime", CLUSTER_TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
                        index_cluster_training_runtime_container_runtime_class)
    return indexer


def test_list_by_runtime_class(cache):
    kata = training_runtime(replicated_job(runtime_class="kata"), name="rt-kata")
    gvisor = training_runtime(replicated_job(runtime_class="gvisor"), name="rt-gvisor")
    cache.add(kata)
    cache.add(gvisor)

    assert cache.list("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY, "kata") == [kata]
    assert cache.list("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY, "runc") == []


def test_kinds_are_indexed_separately(cache):
    crt = cluster_training_runtime(replicated_job(runtime_class="kata"))
    cache.add(crt)

    assert cache.list("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY, "kata") == []
    assert cache.list("ClusterTrainingRuntime", CLUSTER_TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
                      "kata") == [crt]


def test_add_replaces_previous_version(cache):
    cache.add(training_runtime(replicated_job(runtime_class="kata")))
    updated = training_runtime(replicated_job(runtime_class="gvisor"))
    cache.add(updated)

    assert cache.list("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY, "kata") == []
    assert cache.list("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY, "gvisor") == [updated]


def test_delete_removes_from_index(cache):
    rt = training_runtime(replicated_job(runtime_class="kata"), replicated_job(runtime_class="kata"))
    cache.add(rt)
    cache.delete(rt)

    assert cache.list("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY, "kata") == []


def test_index_registered_after_add_covers_existing_objects():
    indexer = FieldIndexer()
    rt = training_runtime(replicated_job(runtime_class="kata"))
    indexer.add(rt)
    indexer.index_field("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
                        index_training_runtime_container_runtime_class)

    assert indexer.list("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY, "kata") == [rt]


def test_duplicate_registration_conflicts(cache):
    with pytest.raises(IndexConflictError):
        cache.index_field("TrainingRuntime", TRAINING_RUNTIME_CONTAINER_RUNTIME_CLASS_KEY,
                          index_training_runtime_container_runtime_class)


def test_unknown_index(cache):
    with pytest.raises(IndexNotFoundError):
        cache.list("TrainingRuntime", ".spec.nodeSelector", "x")
