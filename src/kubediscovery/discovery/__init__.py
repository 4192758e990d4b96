from .discovery_client import KubernetesDiscoveryClient
from .expander import InstanceExpander
from .catalog_watch import CatalogWatch
from .filters import ServiceFilter
from .security import SecurePortResolver, is_secure
from .ports import select_port
from .metadata import compose_metadata

__all__ = [
    "KubernetesDiscoveryClient",
    "InstanceExpander",
    "CatalogWatch",
    "ServiceFilter",
    "SecurePortResolver",
    "is_secure",
    "select_port",
    "compose_metadata",
]
