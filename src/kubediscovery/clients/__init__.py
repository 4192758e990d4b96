from .kubernetes.client_factory import KubernetesClientFactory
from .kubernetes.k8s_client import KubernetesClient

__all__ = ["KubernetesClientFactory", "KubernetesClient"]
