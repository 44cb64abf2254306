"""Application configuration management."""
import os
from typing import Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}


def get_store_kind() -> str:
    """
    Get the kind of pod record store to use.

    Returns:
        str: "sql" (default) or "memory"
    """
    kind = os.getenv("POD_STORE", "sql").strip().lower()
    if kind not in ("sql", "memory"):
        raise ValueError(f"Unsupported POD_STORE value: {kind!r} (expected 'sql' or 'memory')")
    return kind


def get_database_url() -> str:
    """Get the SQLAlchemy URL of the pod record database."""
    return os.getenv("DATABASE_URL", "sqlite:///./pods.db")


def get_kubernetes_config() -> dict:
    """
    Get Kubernetes connection settings from environment variables.

    Returns:
        dict: in_cluster flag, kubeconfig context and kubeconfig file
    """
    context: Optional[str] = os.getenv("K8S_CONTEXT") or None
    config_file: Optional[str] = os.getenv("KUBECONFIG") or None
    return {
        "in_cluster": os.getenv("K8S_IN_CLUSTER", "false").strip().lower() in _TRUE_VALUES,
        "context": context,
        "config_file": config_file,
    }


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
