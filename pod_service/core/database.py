from sqlalchemy import create_engine, Column, Integer, String, Float, DateTime, JSON
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func

Base = declarative_base()


class PodRow(Base):
    __tablename__ = "pods"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(63), nullable=False)
    namespace = Column(String(63), nullable=False, default="default")
    image = Column(String(500), nullable=False)
    replicas = Column(Integer, nullable=False, default=1)
    ports = Column(JSON, nullable=False, default=list)  # [{"container_port": 8080, "protocol": "TCP"}]
    env = Column(JSON, nullable=False, default=list)  # [{"key": "...", "value": "..."}]
    cpu_max = Column(Float, nullable=False, default=0.0)
    memory_max = Column(Float, nullable=False, default=0.0)
    pull_policy = Column(String(20), nullable=False, default="Always")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


def create_db_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        # A bare in-memory database must share one connection or each session sees an empty db
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool, future=True)
        return create_engine(database_url, connect_args=connect_args, future=True)
    return create_engine(database_url, pool_pre_ping=True, pool_recycle=3600, future=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False, future=True)
