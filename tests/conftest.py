"""Pytest configuration and shared fixtures for pod service tests."""

import pytest
from unittest.mock import Mock

from pod_service.core.database import create_db_engine, create_session_factory
from pod_service.core.pod_repository import InMemoryPodRepository
from pod_service.core.pod_data_service import PodDataService
from pod_service.models.pods import PodEnv, PodPort, PodRecord, PodSpec
from pod_service.services.k8s_client import DeploymentClient


# ============================================================================
# Core Test Data Fixtures
# ============================================================================


@pytest.fixture
def sample_pod_spec() -> PodSpec:
    """
    Provides the "web" pod used across the service tests.

    Returns:
        PodSpec: One TCP port, two env vars, half a CPU and 256 of memory
    """
    return PodSpec(
        name="web",
        namespace="default",
        image="nginx:1.25",
        replicas=2,
        ports=[PodPort(container_port=8080, protocol="TCP")],
        env=[PodEnv(key="MODE", value="prod"), PodEnv(key="LOG_LEVEL", value="info")],
        cpu_max=0.5,
        memory_max=256,
        pull_policy="IfNotPresent",
    )


@pytest.fixture
def sample_pod_record(sample_pod_spec) -> PodRecord:
    return PodRecord(id=7, **sample_pod_spec.model_dump())


@pytest.fixture
def sample_pod_payload() -> dict:
    """Pod spec as a JSON request body."""
    return {
        "name": "web",
        "namespace": "default",
        "image": "nginx:1.25",
        "replicas": 1,
        "ports": [{"container_port": 8080, "protocol": "TCP"}],
        "env": [{"key": "MODE", "value": "prod"}],
        "cpu_max": 0.5,
        "memory_max": 256,
        "pull_policy": "Always",
    }


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def mock_apps_v1_api() -> Mock:
    """Mock kubernetes AppsV1Api with the four Deployment calls."""
    api = Mock()
    api.read_namespaced_deployment = Mock()
    api.create_namespaced_deployment = Mock()
    api.replace_namespaced_deployment = Mock()
    api.delete_namespaced_deployment = Mock()
    return api


@pytest.fixture
def mock_deployment_client() -> Mock:
    client = Mock(spec=DeploymentClient)
    return client


@pytest.fixture
def mock_pod_repository() -> Mock:
    repo = Mock()
    repo.create = Mock(return_value=1)
    repo.delete = Mock()
    repo.update = Mock()
    repo.find_by_id = Mock(return_value=None)
    repo.find_all = Mock(return_value=[])
    return repo


@pytest.fixture
def in_memory_repository() -> InMemoryPodRepository:
    return InMemoryPodRepository()


@pytest.fixture
def sql_session_factory():
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_db_engine("sqlite://")
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def pod_data_service(mock_pod_repository, mock_deployment_client) -> PodDataService:
    return PodDataService(mock_pod_repository, mock_deployment_client)
