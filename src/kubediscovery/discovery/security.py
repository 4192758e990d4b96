"""Decides whether a service port carries encrypted traffic."""

from typing import Iterable, Mapping, Optional
import structlog

logger = structlog.get_logger(__name__)

SECURED_KEY = "secured"
TRUTHY_STRINGS = frozenset({"true", "on", "yes", "1"})
DEFAULT_SECURE_PORTS = frozenset({443, 8443})


class SecurePortResolver:
    """Returns True when one of the following applies, checked in order:

    - the service has a ``secured`` label with a truthy value
    - the service has a ``secured`` annotation with a truthy value
    - the port is one of the known secure ports
    """
    
    def __init__(self, known_secure_ports: Optional[Iterable[int]] = None):
        if known_secure_ports is None:
            known_secure_ports = DEFAULT_SECURE_PORTS
        self.known_secure_ports = frozenset(known_secure_ports)
    
    def resolve(self,
                port: Optional[int],
                service_name: Optional[str],
                labels: Optional[Mapping[str, str]] = None,
                annotations: Optional[Mapping[str, str]] = None) -> bool:
        if (labels or {}).get(SECURED_KEY, "false") in TRUTHY_STRINGS:
            logger.debug("Service port is secure: 'secured' label is true",
                         service=service_name, port=port)
            return True
        
        if (annotations or {}).get(SECURED_KEY, "false") in TRUTHY_STRINGS:
            logger.debug("Service port is secure: 'secured' annotation is true",
                         service=service_name, port=port)
            return True
        
        if port is not None and port in self.known_secure_ports:
            logger.debug("Service port is secure: known https port",
                         service=service_name, port=port)
            return True
        
        return False


def is_secure(port: Optional[int],
              service_name: Optional[str],
              labels: Optional[Mapping[str, str]],
              annotations: Optional[Mapping[str, str]],
              known_secure_ports: Iterable[int] = DEFAULT_SECURE_PORTS) -> bool:
    return SecurePortResolver(known_secure_ports).resolve(port, service_name, labels, annotations)
