from typing import Dict, List, Optional, Protocol
from datetime import datetime, timezone
import logging
import threading

from ..models.pods import PodRecord, PodSpec

logger = logging.getLogger(__name__)


class PodRecordNotFound(Exception):
    """Raised when a pod record id is unknown to the repository."""

    def __init__(self, pod_id: int):
        super().__init__(f"Pod record {pod_id} not found")
        self.pod_id = pod_id


class PodRepository(Protocol):
    def create(self, spec: PodSpec) -> int: ...

    def delete(self, pod_id: int) -> None: ...

    def update(self, pod_id: int, spec: PodSpec) -> PodRecord: ...

    def find_by_id(self, pod_id: int) -> Optional[PodRecord]: ...

    def find_all(self) -> List[PodRecord]: ...


class InMemoryPodRepository:
    """Pod records held in a process-local dict; ids start at 1."""

    def __init__(self):
        self._pods: Dict[int, PodRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, spec: PodSpec) -> int:
        """
        Store a new pod record.

        Args:
            spec: The pod specification to register

        Returns:
            The id assigned to the record
        """
        now = datetime.now(timezone.utc)
        with self._lock:
            pod_id = self._next_id
            self._next_id += 1
            self._pods[pod_id] = PodRecord(id=pod_id, created_at=now, updated_at=now, **spec.model_dump())

        logger.info(f"Created pod record {pod_id} for {spec.namespace}/{spec.name}")
        return pod_id

    def delete(self, pod_id: int) -> None:
        with self._lock:
            if self._pods.pop(pod_id, None) is None:
                raise PodRecordNotFound(pod_id)
        logger.info(f"Deleted pod record {pod_id}")

    def update(self, pod_id: int, spec: PodSpec) -> PodRecord:
        with self._lock:
            current = self._pods.get(pod_id)
            if current is None:
                raise PodRecordNotFound(pod_id)
            record = PodRecord(
                id=pod_id,
                created_at=current.created_at,
                updated_at=datetime.now(timezone.utc),
                **spec.model_dump(),
            )
            self._pods[pod_id] = record
        logger.info(f"Updated pod record {pod_id}")
        return record

    def find_by_id(self, pod_id: int) -> Optional[PodRecord]:
        """
        Retrieve a pod record by its id.

        Returns:
            The record if found, None otherwise
        """
        record = self._pods.get(pod_id)
        return record.model_copy(deep=True) if record else None

    def find_all(self) -> List[PodRecord]:
        return [self._pods[pod_id].model_copy(deep=True) for pod_id in sorted(self._pods)]
