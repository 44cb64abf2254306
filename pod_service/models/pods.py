from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

# DNS-1123 label, the format Kubernetes requires for names and namespaces
DNS_LABEL_PATTERN = r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$"


class PodPort(BaseModel):
    container_port: int = Field(..., ge=1, le=65535)
    protocol: str = "TCP"


class PodEnv(BaseModel):
    key: str = Field(..., min_length=1)
    value: str = ""


class PodSpec(BaseModel):
    """Declarative description of a pod managed as a single Deployment."""
    name: str = Field(..., max_length=63, pattern=DNS_LABEL_PATTERN)
    namespace: str = Field(default="default", max_length=63, pattern=DNS_LABEL_PATTERN)
    image: str = Field(..., min_length=1)
    replicas: int = Field(default=1, ge=0)
    ports: List[PodPort] = Field(default_factory=list)
    env: List[PodEnv] = Field(default_factory=list)
    cpu_max: float = Field(default=0.0, ge=0)
    memory_max: float = Field(default=0.0, ge=0)
    pull_policy: str = "Always"


class PodRecord(PodSpec):
    """A pod spec as persisted by the repository."""
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PodCreatedResponse(BaseModel):
    id: int


class OperationResponse(BaseModel):
    pod_name: str
    namespace: str
    message: str


class ErrorResponse(BaseModel):
    code: str
    message: str
    status: int


class HTTPErrorResponse(BaseModel):
    """HTTP body carrying a structured pod service error."""
    detail: ErrorResponse
