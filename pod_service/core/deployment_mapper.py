"""
Translate a PodSpec into a Kubernetes Deployment manifest.

The manifest is rebuilt from scratch on every call and holds no reference
to the spec it came from, so two calls with equal specs yield equal
Deployments and mutating one never leaks into the other.
"""

from kubernetes import client
from typing import Dict, List

from pod_service.models.pods import PodSpec

# Sole label used to correlate the Deployment with its pods
POD_NAME_LABEL = "app-name"
MANAGED_BY_LABEL = "managed-by"
MANAGED_BY_VALUE = "pod-service"

SUPPORTED_PROTOCOLS = ("TCP", "UDP", "SCTP")
DEFAULT_PROTOCOL = "TCP"

SUPPORTED_PULL_POLICIES = ("Always", "Never", "IfNotPresent")
DEFAULT_PULL_POLICY = "Always"


def selector_labels(spec: PodSpec) -> Dict[str, str]:
    return {POD_NAME_LABEL: spec.name}


def map_protocol(protocol: str) -> str:
    """Map a protocol name onto TCP/UDP/SCTP, falling back to TCP."""
    if protocol in SUPPORTED_PROTOCOLS:
        return protocol
    return DEFAULT_PROTOCOL


def map_pull_policy(pull_policy: str) -> str:
    """Map a pull policy onto Always/Never/IfNotPresent, falling back to Always."""
    if pull_policy in SUPPORTED_PULL_POLICIES:
        return pull_policy
    return DEFAULT_PULL_POLICY


def port_name(container_port: int) -> str:
    return f"port-{container_port}"


def format_quantity(value: float) -> str:
    """Render a resource amount as a fixed six-decimal string, e.g. 0.5 -> "0.500000"."""
    return f"{float(value):.6f}"


def build_container_ports(spec: PodSpec) -> List[client.V1ContainerPort]:
    return [
        client.V1ContainerPort(
            name=port_name(port.container_port),
            container_port=port.container_port,
            protocol=map_protocol(port.protocol),
        )
        for port in spec.ports
    ]


def build_env(spec: PodSpec) -> List[client.V1EnvVar]:
    # Values are passed through untouched, no $(VAR) expansion happens here
    return [client.V1EnvVar(name=env.key, value=env.value) for env in spec.env]


def build_resources(spec: PodSpec) -> client.V1ResourceRequirements:
    """
    Build resource requirements for the pod's container.

    Requests are set equal to limits, so every pod gets the Guaranteed QoS
    class and the node never over-commits it.
    """
    def resource_list() -> Dict[str, str]:
        return {
            "cpu": format_quantity(spec.cpu_max),
            "memory": format_quantity(spec.memory_max),
        }

    return client.V1ResourceRequirements(limits=resource_list(), requests=resource_list())


def build_deployment(spec: PodSpec) -> client.V1Deployment:
    """
    Build the Deployment manifest for a pod.

    Args:
        spec: Declarative pod specification

    Returns:
        V1Deployment manifest named after the pod, in the pod's namespace,
        running a single container with the pod's image
    """
    container = client.V1Container(
        name=spec.name,
        image=spec.image,
        ports=build_container_ports(spec),
        env=build_env(spec),
        resources=build_resources(spec),
        image_pull_policy=map_pull_policy(spec.pull_policy),
    )

    return client.V1Deployment(
        api_version="apps/v1",
        kind="Deployment",
        metadata=client.V1ObjectMeta(
            name=spec.name,
            namespace=spec.namespace,
            labels={**selector_labels(spec), MANAGED_BY_LABEL: MANAGED_BY_VALUE},
        ),
        spec=client.V1DeploymentSpec(
            replicas=int(spec.replicas),
            selector=client.V1LabelSelector(match_labels=selector_labels(spec)),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(labels=selector_labels(spec)),
                spec=client.V1PodSpec(containers=[container]),
            ),
        ),
    )
