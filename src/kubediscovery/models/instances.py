"""Models produced and consumed by the discovery engine."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceInstance(BaseModel):
    """One network-reachable instance of a service."""
    
    model_config = ConfigDict(frozen=True)
    
    instance_id: Optional[str] = None
    service_id: str
    namespace: Optional[str] = None
    host: str
    port: int
    metadata: Dict[str, str] = Field(default_factory=dict)
    secure: bool = False
    
    @property
    def scheme(self) -> str:
        return "https" if self.secure else "http"
    
    @property
    def uri(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


class EndpointSubsetGroup(BaseModel):
    """Endpoint subsets found for a service in one namespace."""
    
    namespace: str
    subsets: List[Dict[str, Any]] = Field(default_factory=list)


class HeartbeatEvent(BaseModel):
    """Published by the catalog watch when the set of endpoint pods changes."""
    
    model_config = ConfigDict(frozen=True)
    
    pod_names: List[str] = Field(default_factory=list)
