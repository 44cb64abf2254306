import pytest
from unittest.mock import Mock, patch
from kubernetes.client.rest import ApiException
from urllib3.exceptions import MaxRetryError

from pod_service.core.deployment_mapper import build_deployment
from pod_service.services.k8s_client import (
    DeploymentClient,
    DeploymentClientError,
    DeploymentNotFound,
    create_apps_v1_api,
)


@pytest.fixture
def deployment_client(mock_apps_v1_api):
    return DeploymentClient(mock_apps_v1_api)


def test_get_success(deployment_client, mock_apps_v1_api):
    existing = Mock()
    mock_apps_v1_api.read_namespaced_deployment.return_value = existing

    assert deployment_client.get("default", "web") is existing
    mock_apps_v1_api.read_namespaced_deployment.assert_called_once_with(name="web", namespace="default")


def test_get_not_found(deployment_client, mock_apps_v1_api):
    mock_apps_v1_api.read_namespaced_deployment.side_effect = ApiException(status=404, reason="Not Found")

    with pytest.raises(DeploymentNotFound) as exc_info:
        deployment_client.get("default", "web")

    assert exc_info.value.status == 404
    assert exc_info.value.operation == "get"


def test_get_other_api_error_is_not_not_found(deployment_client, mock_apps_v1_api):
    mock_apps_v1_api.read_namespaced_deployment.side_effect = ApiException(status=403, reason="Forbidden")

    with pytest.raises(DeploymentClientError) as exc_info:
        deployment_client.get("default", "web")

    assert not isinstance(exc_info.value, DeploymentNotFound)
    assert exc_info.value.status == 403
    assert exc_info.value.reason == "Forbidden"


def test_transport_error_is_wrapped(deployment_client, mock_apps_v1_api):
    mock_apps_v1_api.read_namespaced_deployment.side_effect = MaxRetryError(None, "/apis/apps/v1", "refused")

    with pytest.raises(DeploymentClientError) as exc_info:
        deployment_client.get("default", "web")

    assert exc_info.value.status is None


def test_create_sends_manifest(deployment_client, mock_apps_v1_api, sample_pod_spec):
    deployment = build_deployment(sample_pod_spec)

    deployment_client.create("default", deployment)

    mock_apps_v1_api.create_namespaced_deployment.assert_called_once_with(namespace="default", body=deployment)


def test_create_conflict(deployment_client, mock_apps_v1_api, sample_pod_spec):
    mock_apps_v1_api.create_namespaced_deployment.side_effect = ApiException(status=409, reason="Conflict")

    with pytest.raises(DeploymentClientError) as exc_info:
        deployment_client.create("default", build_deployment(sample_pod_spec))

    assert exc_info.value.status == 409
    assert exc_info.value.name == "web"


def test_update_replaces_whole_deployment(deployment_client, mock_apps_v1_api, sample_pod_spec):
    deployment = build_deployment(sample_pod_spec)

    deployment_client.update("default", deployment)

    mock_apps_v1_api.replace_namespaced_deployment.assert_called_once_with(
        name="web", namespace="default", body=deployment
    )
    mock_apps_v1_api.patch_namespaced_deployment.assert_not_called()


def test_delete(deployment_client, mock_apps_v1_api):
    deployment_client.delete("default", "web")

    mock_apps_v1_api.delete_namespaced_deployment.assert_called_once_with(name="web", namespace="default")


def test_delete_not_found(deployment_client, mock_apps_v1_api):
    mock_apps_v1_api.delete_namespaced_deployment.side_effect = ApiException(status=404, reason="Not Found")

    with pytest.raises(DeploymentNotFound):
        deployment_client.delete("default", "web")


def test_create_apps_v1_api_in_cluster():
    with patch("pod_service.services.k8s_client.config") as mock_config, patch(
        "pod_service.services.k8s_client.client"
    ) as mock_client:
        api = create_apps_v1_api(in_cluster=True)

    mock_config.load_incluster_config.assert_called_once_with()
    mock_config.load_kube_config.assert_not_called()
    assert api is mock_client.AppsV1Api.return_value


def test_create_apps_v1_api_from_kubeconfig():
    with patch("pod_service.services.k8s_client.config") as mock_config, patch(
        "pod_service.services.k8s_client.client"
    ):
        create_apps_v1_api(in_cluster=False, context="kind-dev", config_file="/tmp/kubeconfig")

    mock_config.load_kube_config.assert_called_once_with(config_file="/tmp/kubeconfig", context="kind-dev")
    mock_config.load_incluster_config.assert_not_called()
