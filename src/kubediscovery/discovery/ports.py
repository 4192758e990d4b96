"""Picks the port that represents an endpoint subset."""

from typing import Any, Dict, List, Optional

from kubediscovery.core.exceptions import IllegalStateException


def select_port(ports: List[Dict[str, Any]], primary_port_name: Optional[str] = None) -> Dict[str, Any]:
    """Return the single port instances of a subset are reached on.

    A lone port always wins. With several ports the one named
    ``primary_port_name`` (case-insensitive) is used; without a preference any
    port is acceptable and the first one is returned.
    """
    if len(ports) == 1:
        return ports[0]
    if not ports:
        raise IllegalStateException("Endpoint subset exposes no ports")
    
    if primary_port_name:
        wanted = primary_port_name.lower()
        for port in ports:
            if (port.get('name') or '').lower() == wanted:
                return port
        raise IllegalStateException(
            f"No endpoint port named '{primary_port_name}'",
            {'primary_port_name': primary_port_name,
             'ports': [port.get('name') for port in ports]}
        )
    
    return ports[0]
