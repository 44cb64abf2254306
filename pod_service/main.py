import logging
from typing import Optional
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI

from pod_service.api.v1 import pods
from pod_service.config import (
    get_database_url,
    get_kubernetes_config,
    get_log_level,
    get_store_kind,
)
from pod_service.core.database import create_db_engine, create_session_factory
from pod_service.core.pod_data_service import PodDataService
from pod_service.core.pod_repository import InMemoryPodRepository
from pod_service.core.sql_pod_repository import SqlPodRepository
from pod_service.services.k8s_client import DeploymentClient, create_apps_v1_api

load_dotenv()


# Define a filter to exclude /health endpoint from logs
class HealthCheckFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return "GET /health" not in record.getMessage()


# Configure logging
logging.basicConfig(
    level=get_log_level(), format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Add the filter to the uvicorn access logger
logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())


def create_pod_repository(store_kind: str):
    if store_kind == "memory":
        logger.info("Using in-memory pod record store")
        return InMemoryPodRepository()
    database_url = get_database_url()
    logger.info(f"Using SQL pod record store at {database_url}")
    engine = create_db_engine(database_url)
    return SqlPodRepository(create_session_factory(engine))


def create_deployment_client() -> Optional[DeploymentClient]:
    """Connect to the cluster, or return None so record operations still work."""
    try:
        apps_v1_api = create_apps_v1_api(**get_kubernetes_config())
    except Exception as e:
        logger.error(f"Failed to initialize Kubernetes client: {e}", exc_info=True)
        return None
    return DeploymentClient(apps_v1_api)


def create_pod_data_service(store_kind: str) -> PodDataService:
    """Build the pod data service from environment configuration."""
    repository = create_pod_repository(store_kind)
    return PodDataService(repository, create_deployment_client())


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store_kind = None
    try:
        app.state.store_kind = get_store_kind()
        app.state.pod_data_service = create_pod_data_service(app.state.store_kind)
        logger.info("Pod data service initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize pod data service: {e}", exc_info=True)
        app.state.pod_data_service = None
    yield


app = FastAPI(title="Pod Service", lifespan=lifespan)
app.include_router(pods.router, prefix="/api/v1")


@app.get("/health")
def read_health():
    """Report which store backs the service and whether the cluster is reachable."""
    service = getattr(app.state, "pod_data_service", None)
    cluster_client = service is not None and service.deployment_client is not None
    return {
        "status": "ok" if cluster_client else "degraded",
        "store": getattr(app.state, "store_kind", None),
        "cluster_client": cluster_client,
    }
