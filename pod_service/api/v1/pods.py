from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import List, NoReturn
import logging

from pod_service.core.pod_data_service import PodDataService
from pod_service.errors import PodServiceError
from pod_service.models.pods import (
    HTTPErrorResponse,
    OperationResponse,
    PodCreatedResponse,
    PodRecord,
    PodSpec,
)

router = APIRouter()
logger = logging.getLogger(__name__)

# Error bodies are {"detail": {"code", "message", "status"}}.
REPOSITORY_ERRORS = {500: {"model": HTTPErrorResponse, "description": "Pod record store failed"}}
RECORD_ERRORS = {
    404: {"model": HTTPErrorResponse, "description": "Pod record not found"},
    **REPOSITORY_ERRORS,
}
CLUSTER_ERRORS = {
    502: {"model": HTTPErrorResponse, "description": "Kubernetes API call failed"},
}


def get_pod_data_service(request: Request) -> PodDataService:
    service = getattr(request.app.state, "pod_data_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Pod service not initialized",
        )
    return service


def _raise_http(error: PodServiceError) -> NoReturn:
    raise HTTPException(status_code=error.http_status, detail=error.to_payload())


@router.post(
    "/pods",
    status_code=status.HTTP_201_CREATED,
    response_model=PodCreatedResponse,
    responses=REPOSITORY_ERRORS,
)
def add_pod(spec: PodSpec, service: PodDataService = Depends(get_pod_data_service)):
    """Register a new pod record. Nothing is created in the cluster."""
    try:
        return PodCreatedResponse(id=service.add_pod(spec))
    except PodServiceError as e:
        _raise_http(e)


@router.get("/pods", response_model=List[PodRecord], responses=REPOSITORY_ERRORS)
def list_pods(service: PodDataService = Depends(get_pod_data_service)):
    try:
        return service.find_all()
    except PodServiceError as e:
        _raise_http(e)


@router.get("/pods/{pod_id}", response_model=PodRecord, responses=RECORD_ERRORS)
def get_pod(pod_id: int, service: PodDataService = Depends(get_pod_data_service)):
    try:
        return service.get_pod(pod_id)
    except PodServiceError as e:
        _raise_http(e)


@router.put("/pods/{pod_id}", response_model=PodRecord, responses=RECORD_ERRORS)
def update_pod(pod_id: int, spec: PodSpec, service: PodDataService = Depends(get_pod_data_service)):
    """Update a pod record. The cluster is left as is; use PUT /deployments for that."""
    try:
        return service.update_pod(pod_id, spec)
    except PodServiceError as e:
        _raise_http(e)


@router.delete("/pods/{pod_id}", response_model=OperationResponse, responses=RECORD_ERRORS)
def delete_pod(pod_id: int, service: PodDataService = Depends(get_pod_data_service)):
    try:
        record = service.get_pod(pod_id)
        service.delete_pod(pod_id)
    except PodServiceError as e:
        _raise_http(e)
    return OperationResponse(pod_name=record.name, namespace=record.namespace, message="pod record deleted")


@router.post(
    "/deployments",
    status_code=status.HTTP_201_CREATED,
    response_model=OperationResponse,
    responses={409: {"model": HTTPErrorResponse, "description": "Deployment already exists"}, **CLUSTER_ERRORS},
)
def create_deployment(spec: PodSpec, service: PodDataService = Depends(get_pod_data_service)):
    """Create the pod's Deployment in the cluster; 409 if it already exists."""
    try:
        service.create_to_cluster(spec)
    except PodServiceError as e:
        _raise_http(e)
    return OperationResponse(pod_name=spec.name, namespace=spec.namespace, message="created in cluster")


@router.put(
    "/deployments",
    response_model=OperationResponse,
    responses={404: {"model": HTTPErrorResponse, "description": "Deployment not found"}, **CLUSTER_ERRORS},
)
def update_deployment(spec: PodSpec, service: PodDataService = Depends(get_pod_data_service)):
    """Replace the pod's Deployment in the cluster; 404 if it does not exist."""
    try:
        service.update_in_cluster(spec)
    except PodServiceError as e:
        _raise_http(e)
    return OperationResponse(pod_name=spec.name, namespace=spec.namespace, message="updated in cluster")


@router.delete(
    "/pods/{pod_id}/deployment",
    response_model=OperationResponse,
    responses={**RECORD_ERRORS, **CLUSTER_ERRORS},
)
def delete_deployment(pod_id: int, service: PodDataService = Depends(get_pod_data_service)):
    """
    Delete the pod's Deployment from the cluster, then its record.

    A failure to remove the record after the Deployment is gone is reported
    as a 500 with the repository error code.
    """
    try:
        record = service.get_pod(pod_id)
        service.delete_from_cluster(record)
    except PodServiceError as e:
        _raise_http(e)
    return OperationResponse(pod_name=record.name, namespace=record.namespace, message="deleted from cluster")
