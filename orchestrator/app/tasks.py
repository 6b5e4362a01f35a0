"""Celery tasks: reconcile TrainJobs into PodGroups."""

import logging

from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from orchestrator.app.celery_app import app, settings
from orchestrator.app.framework import Framework, build_runtime_info
from orchestrator.app.indexer import FieldIndexer
from orchestrator.app.kube import ObjectClient, is_conflict, is_not_found
from orchestrator.app.plugins import PLUGIN_REGISTRY
from shared.schemas.runtime import CLUSTER_TRAINING_RUNTIME_KIND

logger = logging.getLogger(__name__)


def get_object_client() -> ObjectClient:
    return ObjectClient(request_timeout=settings.request_timeout)


@app.task(
    bind=True,
    name="orchestrator.tasks.reconcile_train_job",
    max_retries=settings.max_reconcile_retries,
)
def reconcile_train_job(self, namespace: str, name: str):
    """
    Build and apply the PodGroup of one TrainJob.

    Create races are settled by the API server: a 409 means another pass got
    there first. A TrainJob or runtime that is gone ends the task. Any other
    API or transport error retries the whole task.
    """
    if not settings.use_k8s:
        logger.info(f"[DEV] Would reconcile TrainJob {namespace}/{name}. Set USE_K8S=true for real runs.")
        return {"status": "skipped", "train_job": name}

    client = get_object_client()
    try:
        train_job = client.get_train_job(name, namespace)
        runtime = client.get_runtime(train_job)
    except ApiException as e:
        if not is_not_found(e):
            logger.warning(f"Reconcile of {namespace}/{name} failed, retrying: {e.reason}")
            raise self.retry(exc=e, countdown=settings.retry_backoff_seconds)
        logger.info(f"TrainJob {namespace}/{name} or its runtime no longer exists, skipping")
        return {"status": "not_found", "train_job": name}
    except HTTPError as e:
        logger.warning(f"Reconcile of {namespace}/{name} failed, retrying: {e}")
        raise self.retry(exc=e, countdown=settings.retry_backoff_seconds)

    try:
        info = build_runtime_info(runtime)
        framework = Framework(client, FieldIndexer(), settings)
        framework.run_enforce_pod_group_policy_plugins(info, train_job)
        objects = framework.run_component_builder_plugins(info, train_job)
    except (ApiException, HTTPError) as e:
        logger.warning(f"Reconcile of {namespace}/{name} failed, retrying: {e}")
        raise self.retry(exc=e, countdown=settings.retry_backoff_seconds)

    created = []
    for obj in objects:
        try:
            client.create_pod_group(obj)
        except ApiException as e:
            if not is_conflict(e):
                logger.warning(f"Failed to create PodGroup for {namespace}/{name}: {e.reason}")
                raise self.retry(exc=e, countdown=settings.retry_backoff_seconds)
            logger.info(f"PodGroup {namespace}/{obj.metadata.name} already exists")
            continue
        except HTTPError as e:
            logger.warning(f"Failed to create PodGroup for {namespace}/{name}: {e}")
            raise self.retry(exc=e, countdown=settings.retry_backoff_seconds)
        created.append(obj.metadata.name)

    # The pod group label only lands on pods through the JobSet built from info,
    # which happens outside this worker; it is reported for that consumer.
    return {"status": "reconciled", "train_job": name, "created": created, "labels": info.labels}


@app.task(name="orchestrator.tasks.requeue_for_runtime_class")
def requeue_for_runtime_class(runtime_class: str):
    """Enqueue reconciles for every TrainJob whose runtime requests ``runtime_class``."""
    client = get_object_client()
    indexer = FieldIndexer()
    coscheduling = PLUGIN_REGISTRY["coscheduling"](client, indexer, settings)
    for runtime in client.list_training_runtimes() + client.list_cluster_training_runtimes():
        indexer.add(runtime)

    runtimes = coscheduling.runtimes_for_runtime_class(runtime_class)
    wanted = {(r.kind, r.metadata.namespace or "", r.metadata.name) for r in runtimes}

    requeued = []
    for train_job in client.list_train_jobs():
        if train_job.spec is None:
            continue
        ref = train_job.spec.runtime_ref
        ns = "" if ref.kind == CLUSTER_TRAINING_RUNTIME_KIND else train_job.metadata.namespace
        if (ref.kind, ns, ref.name) in wanted:
            reconcile_train_job.delay(train_job.metadata.namespace, train_job.metadata.name)
            requeued.append(f"{train_job.metadata.namespace}/{train_job.metadata.name}")

    logger.info(f"RuntimeClass {runtime_class} changed, requeued {len(requeued)} TrainJob(s)")
    return {"runtime_class": runtime_class, "requeued": requeued}
