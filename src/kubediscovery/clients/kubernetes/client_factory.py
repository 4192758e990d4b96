# src/kubediscovery/clients/kubernetes/client_factory.py
"""Kubernetes client factory."""

from typing import Dict, Any, Optional
import structlog

from .k8s_client import KubernetesClient

logger = structlog.get_logger(__name__)


class KubernetesClientFactory:
    """Factory for creating Kubernetes clients."""
    
    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.kubeconfig_path = config.get("kubeconfig_path")
        self.context = config.get("context")
        self.namespace = config.get("namespace", "default")
        self.in_cluster = config.get("in_cluster", False)
        
        self.logger = logger.bind(factory="kubernetes")
    
    def create_client(self, kubeconfig_data: Optional[bytes] = None) -> KubernetesClient:
        """Create a Kubernetes client from the configured settings."""
        self.logger.debug("Creating Kubernetes client", 
                          namespace=self.namespace, in_cluster=self.in_cluster)
        return KubernetesClient(
            config_dict=self.config,
            kubeconfig_path=self.kubeconfig_path,
            context=self.context,
            kubeconfig_data=kubeconfig_data,
            in_cluster=self.in_cluster
        )
