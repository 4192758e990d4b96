"""Base discovery service interface."""

from abc import ABC, abstractmethod
import structlog

from kubediscovery.config.settings import DiscoverySettings

logger = structlog.get_logger(__name__)


class BaseDiscoveryService(ABC):
    """Abstract base class for services reading from the cluster client."""
    
    def __init__(self, client, settings: DiscoverySettings):
        self.client = client
        self.settings = settings
        self.logger = logger.bind(service=self.__class__.__name__)
    
    @abstractmethod
    def get_discovery_type(self) -> str:
        """Get the type of discovery this service performs."""
        pass
