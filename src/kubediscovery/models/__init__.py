from .instances import *

__all__ = [
    "ServiceInstance",
    "EndpointSubsetGroup",
    "HeartbeatEvent",
]
