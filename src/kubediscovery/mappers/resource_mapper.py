"""Maps Kubernetes API model objects to the plain dicts used by discovery."""

from typing import Any, Dict, List, Optional
import structlog

logger = structlog.get_logger(__name__)


class ResourceDataMapper:
    """Maps endpoints and services from the Kubernetes API to standardized dicts."""
    
    def map_endpoints(self, endpoints) -> Dict[str, Any]:
        """Map a V1Endpoints object."""
        metadata = endpoints.metadata
        subsets = None
        if endpoints.subsets is not None:
            subsets = [self.map_endpoint_subset(subset) for subset in endpoints.subsets]
        
        return {
            'name': metadata.name if metadata else None,
            'namespace': metadata.namespace if metadata else None,
            'subsets': subsets,
        }
    
    def map_endpoint_subset(self, subset) -> Dict[str, Any]:
        """Map a V1EndpointSubset; only ready addresses are kept."""
        return {
            'addresses': [self.map_endpoint_address(address) for address in (subset.addresses or [])],
            'ports': [self.map_port(port) for port in (subset.ports or [])],
        }
    
    def map_endpoint_address(self, address) -> Dict[str, Any]:
        target_ref = address.target_ref
        return {
            'ip': address.ip,
            'hostname': address.hostname,
            'node_name': address.node_name,
            'target_ref': {
                'kind': target_ref.kind,
                'name': target_ref.name,
                'namespace': target_ref.namespace,
                'uid': target_ref.uid,
            } if target_ref else None,
        }
    
    def map_port(self, port) -> Dict[str, Any]:
        """Map an endpoint port or a service port."""
        return {
            'name': port.name,
            'port': port.port,
            'protocol': port.protocol,
        }
    
    def map_service(self, service) -> Dict[str, Any]:
        """Map a V1Service object."""
        metadata = service.metadata
        spec = service.spec
        return {
            'name': metadata.name,
            'namespace': metadata.namespace,
            'labels': metadata.labels or {},
            'annotations': metadata.annotations or {},
            'type': spec.type if spec else None,
            'cluster_ip': spec.cluster_ip if spec else None,
            'ports': [self.map_port(p) for p in (spec.ports or [])] if spec else [],
            'uid': metadata.uid,
        }
    
    def map_pod(self, pod) -> Optional[Dict[str, Any]]:
        """Map a V1Pod object to the fields needed to identify the current pod."""
        if pod is None:
            return None
        return {
            'name': pod.metadata.name,
            'namespace': pod.metadata.namespace,
            'labels': pod.metadata.labels or {},
            'ip': pod.status.pod_ip if pod.status else None,
            'uid': pod.metadata.uid,
        }
    
    def endpoint_pod_names(self, endpoints_list: List[Dict[str, Any]]) -> List[str]:
        """Names of the pods referenced by endpoint addresses, in discovery order."""
        names = []
        for endpoints in endpoints_list:
            for subset in endpoints.get('subsets') or []:
                for address in subset.get('addresses') or []:
                    target_ref = address.get('target_ref')
                    if target_ref and target_ref.get('name'):
                        names.append(target_ref['name'])
        return names
