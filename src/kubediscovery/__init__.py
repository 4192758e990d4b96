"""Kubernetes service discovery."""

from kubediscovery.discovery import KubernetesDiscoveryClient, CatalogWatch
from kubediscovery.models import ServiceInstance

__version__ = "0.1.0"

__all__ = ["KubernetesDiscoveryClient", "CatalogWatch", "ServiceInstance"]
