"""
Pod data service.

Keeps pod records in the repository and the matching Deployment in the
cluster in step. Cluster operations are driven by explicit calls only:
nothing here watches the cluster or retries a failed call, and every
failure aborts the remaining steps of the operation.
"""

from typing import List, Optional
import logging

from .deployment_mapper import build_deployment
from .pod_repository import PodRepository, PodRecordNotFound
from ..errors import (
    ClusterCallFailedError,
    PodAlreadyExistsError,
    PodNotFoundError,
    RepositoryFailedError,
)
from ..models.pods import PodRecord, PodSpec
from ..services.k8s_client import DeploymentClient, DeploymentClientError, DeploymentNotFound

logger = logging.getLogger(__name__)


def _cluster_error(exc: DeploymentClientError, operation: str, spec_name: str, namespace: str) -> ClusterCallFailedError:
    return ClusterCallFailedError(operation, spec_name, namespace, exc.reason, api_status=exc.status)


class PodDataService:
    def __init__(self, pod_repository: PodRepository, deployment_client: Optional[DeploymentClient]):
        # deployment_client is None when the cluster could not be reached at
        # startup; record operations keep working, cluster ones fail.
        self.pod_repository = pod_repository
        self.deployment_client = deployment_client

    # ------------------------------------------------------------------
    # Record passthroughs
    # ------------------------------------------------------------------

    def add_pod(self, spec: PodSpec) -> int:
        try:
            return self.pod_repository.create(spec)
        except Exception as e:
            logger.error(f"Failed to add pod record for {spec.namespace}/{spec.name}: {e}", exc_info=True)
            raise RepositoryFailedError(
                f"Failed to add pod {spec.name} in namespace {spec.namespace}: {e}",
                pod_name=spec.name,
                namespace=spec.namespace,
            ) from e

    def delete_pod(self, pod_id: int) -> None:
        try:
            self.pod_repository.delete(pod_id)
        except PodRecordNotFound as e:
            raise PodNotFoundError(f"Pod record {pod_id} not found") from e
        except Exception as e:
            logger.error(f"Failed to delete pod record {pod_id}: {e}", exc_info=True)
            raise RepositoryFailedError(f"Failed to delete pod record {pod_id}: {e}") from e

    def update_pod(self, pod_id: int, spec: PodSpec) -> PodRecord:
        try:
            return self.pod_repository.update(pod_id, spec)
        except PodRecordNotFound as e:
            raise PodNotFoundError(
                f"Pod record {pod_id} not found", pod_name=spec.name, namespace=spec.namespace
            ) from e
        except Exception as e:
            logger.error(f"Failed to update pod record {pod_id}: {e}", exc_info=True)
            raise RepositoryFailedError(
                f"Failed to update pod record {pod_id} ({spec.namespace}/{spec.name}): {e}",
                pod_name=spec.name,
                namespace=spec.namespace,
            ) from e

    def find_pod_by_id(self, pod_id: int) -> Optional[PodRecord]:
        try:
            return self.pod_repository.find_by_id(pod_id)
        except Exception as e:
            logger.error(f"Failed to look up pod record {pod_id}: {e}", exc_info=True)
            raise RepositoryFailedError(f"Failed to look up pod record {pod_id}: {e}") from e

    def get_pod(self, pod_id: int) -> PodRecord:
        """Like find_pod_by_id, but a missing record raises PodNotFoundError."""
        record = self.find_pod_by_id(pod_id)
        if record is None:
            raise PodNotFoundError(f"Pod record {pod_id} not found")
        return record

    def find_all(self) -> List[PodRecord]:
        try:
            return self.pod_repository.find_all()
        except Exception as e:
            logger.error(f"Failed to list pod records: {e}", exc_info=True)
            raise RepositoryFailedError(f"Failed to list pod records: {e}") from e

    # ------------------------------------------------------------------
    # Cluster operations
    # ------------------------------------------------------------------

    def _require_cluster(self, operation: str, spec_name: str, namespace: str) -> DeploymentClient:
        if self.deployment_client is None:
            logger.error(f"Cannot {operation} deployment {namespace}/{spec_name}: no Kubernetes client")
            raise ClusterCallFailedError(operation, spec_name, namespace, "Kubernetes client not configured")
        return self.deployment_client

    def _exists_in_cluster(self, operation: str, spec: PodSpec) -> bool:
        self._require_cluster(operation, spec.name, spec.namespace)
        try:
            self.deployment_client.get(spec.namespace, spec.name)
            return True
        except DeploymentNotFound:
            return False
        except DeploymentClientError as e:
            raise _cluster_error(e, operation, spec.name, spec.namespace) from e

    def create_to_cluster(self, spec: PodSpec) -> None:
        """
        Create the pod's Deployment in the cluster.

        The pod record is not touched; callers register it with add_pod first.

        Raises:
            PodAlreadyExistsError: A Deployment with the same namespace/name exists
            ClusterCallFailedError: The Kubernetes API call failed
        """
        deployment = build_deployment(spec)
        if self._exists_in_cluster("create", spec):
            logger.error(f"Pod {spec.name} already exists in namespace {spec.namespace}")
            raise PodAlreadyExistsError(spec.name, spec.namespace)

        try:
            self.deployment_client.create(spec.namespace, deployment)
        except DeploymentClientError as e:
            raise _cluster_error(e, "create", spec.name, spec.namespace) from e
        logger.info(f"Pod {spec.name} created in namespace {spec.namespace}")

    def update_in_cluster(self, spec: PodSpec) -> None:
        """
        Replace the pod's Deployment with one built from spec.

        Raises:
            PodNotFoundError: No Deployment with the pod's namespace/name exists
            ClusterCallFailedError: The Kubernetes API call failed
        """
        deployment = build_deployment(spec)
        if not self._exists_in_cluster("update", spec):
            logger.error(f"Pod {spec.name} does not exist in namespace {spec.namespace}")
            raise PodNotFoundError(
                f"Pod {spec.name} does not exist in namespace {spec.namespace}",
                pod_name=spec.name,
                namespace=spec.namespace,
            )

        try:
            self.deployment_client.update(spec.namespace, deployment)
        except DeploymentClientError as e:
            raise _cluster_error(e, "update", spec.name, spec.namespace) from e
        logger.info(f"Pod {spec.name} updated in namespace {spec.namespace}")

    def delete_from_cluster(self, record: PodRecord) -> None:
        """
        Delete the pod's Deployment, then its record.

        The record is only removed once the cluster confirmed the delete. If
        removing the record fails afterwards the Deployment stays deleted and
        RepositoryFailedError is raised.

        Raises:
            PodNotFoundError: The cluster has no Deployment for the pod
            ClusterCallFailedError: The Kubernetes API call failed
            RepositoryFailedError: The Deployment was deleted but the record was not
        """
        deployment_client = self._require_cluster("delete", record.name, record.namespace)
        try:
            deployment_client.delete(record.namespace, record.name)
        except DeploymentNotFound as e:
            raise PodNotFoundError(
                f"Pod {record.name} does not exist in namespace {record.namespace}",
                pod_name=record.name,
                namespace=record.namespace,
            ) from e
        except DeploymentClientError as e:
            raise _cluster_error(e, "delete", record.name, record.namespace) from e

        try:
            self.pod_repository.delete(record.id)
        except Exception as e:
            logger.error(
                f"Deployment {record.namespace}/{record.name} deleted but pod record {record.id} was not: {e}",
                exc_info=True,
            )
            raise RepositoryFailedError(
                f"Pod {record.name} was deleted from namespace {record.namespace} "
                f"but its record {record.id} could not be removed: {e}",
                pod_name=record.name,
                namespace=record.namespace,
            ) from e
        logger.info(f"Pod {record.name} deleted from namespace {record.namespace} (record {record.id})")
