from kubernetes import config, client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class DeploymentClientError(Exception):
    """Raised when a Deployment API call fails for any reason other than 404."""

    def __init__(self, operation: str, namespace: str, name: str, reason: str, status: Optional[int] = None):
        super().__init__(f"{operation} deployment {namespace}/{name} failed: {reason}")
        self.operation = operation
        self.namespace = namespace
        self.name = name
        self.reason = reason
        self.status = status


class DeploymentNotFound(DeploymentClientError):
    """Raised when the Deployment does not exist in the namespace."""

    def __init__(self, operation: str, namespace: str, name: str):
        super().__init__(operation, namespace, name, "not found", status=404)


def load_kubernetes_config(
    in_cluster: bool = False,
    context: Optional[str] = None,
    config_file: Optional[str] = None,
):
    """Load in-cluster or kubeconfig credentials into the kubernetes client."""
    if in_cluster:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes config.")
    else:
        config.load_kube_config(config_file=config_file, context=context)
        logger.info(f"Loaded kubeconfig (context={context or 'current'}).")


def create_apps_v1_api(
    in_cluster: bool = False,
    context: Optional[str] = None,
    config_file: Optional[str] = None,
) -> client.AppsV1Api:
    load_kubernetes_config(in_cluster=in_cluster, context=context, config_file=config_file)
    return client.AppsV1Api()


class DeploymentClient:
    """Namespaced get/create/update/delete for apps/v1 Deployments."""

    def __init__(self, apps_v1_api: client.AppsV1Api):
        self.apps_v1 = apps_v1_api

    def _translate(self, exc: Exception, operation: str, namespace: str, name: str) -> DeploymentClientError:
        if isinstance(exc, ApiException):
            if exc.status == 404:
                logger.info(f"Deployment {name} not found in namespace {namespace}.")
                return DeploymentNotFound(operation, namespace, name)
            logger.error(f"Kubernetes API error during {operation} of deployment {namespace}/{name}: {exc}")
            return DeploymentClientError(operation, namespace, name, exc.reason or str(exc), status=exc.status)
        logger.error(f"Transport error during {operation} of deployment {namespace}/{name}: {exc}")
        return DeploymentClientError(operation, namespace, name, str(exc))

    def get(self, namespace: str, name: str) -> client.V1Deployment:
        try:
            return self.apps_v1.read_namespaced_deployment(name=name, namespace=namespace)
        except (ApiException, HTTPError) as e:
            raise self._translate(e, "get", namespace, name) from e

    def create(self, namespace: str, deployment: client.V1Deployment) -> client.V1Deployment:
        name = deployment.metadata.name
        try:
            return self.apps_v1.create_namespaced_deployment(namespace=namespace, body=deployment)
        except (ApiException, HTTPError) as e:
            raise self._translate(e, "create", namespace, name) from e

    def update(self, namespace: str, deployment: client.V1Deployment) -> client.V1Deployment:
        # Full replace, fields set by other writers are overwritten
        name = deployment.metadata.name
        try:
            return self.apps_v1.replace_namespaced_deployment(name=name, namespace=namespace, body=deployment)
        except (ApiException, HTTPError) as e:
            raise self._translate(e, "update", namespace, name) from e

    def delete(self, namespace: str, name: str) -> None:
        try:
            self.apps_v1.delete_namespaced_deployment(name=name, namespace=namespace)
        except (ApiException, HTTPError) as e:
            raise self._translate(e, "delete", namespace, name) from e
