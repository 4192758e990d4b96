from .exceptions import *
from .base_client import BaseClient
from .utils import *

__all__ = [
    "BaseClient",
    "KubeDiscoveryException",
    "InvalidArgumentException",
    "IllegalStateException",
    "CollaboratorException",
    "ClientConnectionException",
    "ConfigurationException",
    "retry_with_backoff",
    "setup_logging",
    "to_label_selector",
]
