"""Expands endpoint subsets of one namespace into service instances."""

from typing import Any, Dict, List, Optional

from kubediscovery.config.settings import DiscoverySettings
from kubediscovery.discovery.base import BaseDiscoveryService
from kubediscovery.discovery.metadata import port_metadata, service_metadata
from kubediscovery.discovery.ports import select_port
from kubediscovery.discovery.security import SecurePortResolver
from kubediscovery.models.instances import ServiceInstance


class InstanceExpander(BaseDiscoveryService):
    """Turns every (subset, address) pair into one ServiceInstance.

    Addresses are not deduplicated: a pod listed in two subsets yields two
    instances, one per port combination.
    """
    
    def __init__(self, client, settings: DiscoverySettings,
                 secure_resolver: Optional[SecurePortResolver] = None):
        super().__init__(client, settings)
        self.secure_resolver = secure_resolver or SecurePortResolver(settings.known_secure_ports)
    
    async def expand(self, namespace: str, service_name: str,
                     subsets: List[Dict[str, Any]]) -> List[ServiceInstance]:
        if not subsets:
            return []
        
        service = await self.client.get_service(service_name, namespace)
        if service is None:
            self.logger.warning("Service not found for endpoints, using empty metadata",
                                service=service_name, namespace=namespace)
            service = {'name': service_name, 'labels': {}, 'annotations': {}}
        
        labels = service.get('labels') or {}
        annotations = service.get('annotations') or {}
        options = self.settings.metadata
        shared_metadata = service_metadata(labels, annotations, options)
        
        instances = []
        for subset in subsets:
            addresses = subset.get('addresses') or []
            if not addresses:
                continue
            ports = subset.get('ports') or []
            endpoint_metadata = dict(shared_metadata)
            endpoint_metadata.update(port_metadata(ports, options))
            
            port = select_port(ports, self.settings.primary_port_name)
            secure = self.secure_resolver.resolve(
                port.get('port'), service.get('name'), labels, annotations
            )
            
            for address in addresses:
                target_ref = address.get('target_ref')
                instances.append(ServiceInstance(
                    instance_id=target_ref.get('uid') if target_ref else None,
                    service_id=service_name,
                    namespace=namespace,
                    host=address['ip'],
                    port=port['port'],
                    metadata=endpoint_metadata,
                    secure=secure,
                ))
        
        self.logger.debug(f"Expanded {len(instances)} instances",
                          service=service_name, namespace=namespace, subsets=len(subsets))
        return instances
    
    def get_discovery_type(self) -> str:
        return "kubernetes_instances"
