"""Structured errors returned by the pod service.

Every failure surfaced to a remote caller carries a stable short code, a
human readable message and a numeric status. The code/status pairs for
``ALREADY_EXISTS`` and ``NOT_FOUND`` match the values earlier clients of the
service already understand.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Closed set of failure kinds the service can report."""
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    CLUSTER_CALL_FAILED = "cluster_call_failed"
    REPOSITORY_FAILED = "repository_failed"


# kind -> (code, status, http status)
_ERROR_CODES: Dict[ErrorKind, tuple] = {
    ErrorKind.ALREADY_EXISTS: ("1", 1003, 409),
    ErrorKind.NOT_FOUND: ("2", 1004, 404),
    ErrorKind.CLUSTER_CALL_FAILED: ("3", 1005, 502),
    ErrorKind.REPOSITORY_FAILED: ("4", 1006, 500),
}


class PodServiceError(Exception):
    """Base class for every error the pod service reports to callers."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        pod_name: Optional[str] = None,
        namespace: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.pod_name = pod_name
        self.namespace = namespace

    @property
    def code(self) -> str:
        return _ERROR_CODES[self.kind][0]

    @property
    def status(self) -> int:
        return _ERROR_CODES[self.kind][1]

    @property
    def http_status(self) -> int:
        return _ERROR_CODES[self.kind][2]

    def to_payload(self) -> Dict[str, Any]:
        """Return the code/message/status triple sent over the wire."""
        return {"code": self.code, "message": self.message, "status": self.status}


class PodAlreadyExistsError(PodServiceError):
    """Raised when a Deployment for the pod already exists in the cluster."""
    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, pod_name: str, namespace: str):
        super().__init__(
            f"Pod {pod_name} already exists in namespace {namespace}",
            pod_name=pod_name,
            namespace=namespace,
        )


class PodNotFoundError(PodServiceError):
    """Raised when the pod is absent from the cluster or the repository."""
    kind = ErrorKind.NOT_FOUND


class ClusterCallFailedError(PodServiceError):
    """Raised when a call against the Kubernetes API fails."""
    kind = ErrorKind.CLUSTER_CALL_FAILED

    def __init__(
        self,
        operation: str,
        pod_name: str,
        namespace: str,
        reason: str,
        api_status: Optional[int] = None,
    ):
        super().__init__(
            f"Failed to {operation} deployment {pod_name} in namespace {namespace}: {reason}",
            pod_name=pod_name,
            namespace=namespace,
        )
        self.operation = operation
        self.api_status = api_status


class RepositoryFailedError(PodServiceError):
    """Raised when the pod record store fails."""
    kind = ErrorKind.REPOSITORY_FAILED
