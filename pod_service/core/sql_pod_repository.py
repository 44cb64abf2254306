from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from .database import PodRow
from .pod_repository import PodRecordNotFound
from ..models.pods import PodRecord, PodSpec

logger = logging.getLogger(__name__)


def _to_record(row: PodRow) -> PodRecord:
    return PodRecord(
        id=row.id,
        name=row.name,
        namespace=row.namespace,
        image=row.image,
        replicas=row.replicas,
        ports=row.ports or [],
        env=row.env or [],
        cpu_max=row.cpu_max,
        memory_max=row.memory_max,
        pull_policy=row.pull_policy,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _apply(row: PodRow, spec: PodSpec) -> None:
    data = spec.model_dump()
    for field, value in data.items():
        setattr(row, field, value)


class SqlPodRepository:
    """Pod records stored in a relational database through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def create(self, spec: PodSpec) -> int:
        with self._session_factory() as session:
            row = PodRow()
            _apply(row, spec)
            session.add(row)
            session.commit()
            logger.info(f"Created pod record {row.id} for {spec.namespace}/{spec.name}")
            return row.id

    def delete(self, pod_id: int) -> None:
        with self._session_factory() as session:
            row = session.get(PodRow, pod_id)
            if row is None:
                raise PodRecordNotFound(pod_id)
            session.delete(row)
            session.commit()
        logger.info(f"Deleted pod record {pod_id}")

    def update(self, pod_id: int, spec: PodSpec) -> PodRecord:
        with self._session_factory() as session:
            row = session.get(PodRow, pod_id)
            if row is None:
                raise PodRecordNotFound(pod_id)
            _apply(row, spec)
            session.commit()
            session.refresh(row)
            logger.info(f"Updated pod record {pod_id}")
            return _to_record(row)

    def find_by_id(self, pod_id: int) -> Optional[PodRecord]:
        with self._session_factory() as session:
            row = session.get(PodRow, pod_id)
            return _to_record(row) if row else None

    def find_all(self) -> List[PodRecord]:
        with self._session_factory() as session:
            rows = session.scalars(select(PodRow).order_by(PodRow.id)).all()
            return [_to_record(row) for row in rows]
