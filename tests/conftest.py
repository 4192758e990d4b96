"""Shared fixtures: an in-memory stand-in for the Kubernetes client."""

from typing import Any, Dict, List, Optional

import pytest

from kubediscovery.config.settings import DiscoverySettings, MetadataSettings


def make_subset(ips: List[str], ports: List[Dict[str, Any]], uids: Optional[List[str]] = None,
                pod_names: Optional[List[str]] = None) -> Dict[str, Any]:
    addresses = []
    for index, ip in enumerate(ips):
        target_ref = None
        if uids or pod_names:
            target_ref = {
                'kind': 'Pod',
                'name': pod_names[index] if pod_names else None,
                'namespace': None,
                'uid': uids[index] if uids else None,
            }
        addresses.append({'ip': ip, 'hostname': None, 'node_name': None, 'target_ref': target_ref})
    return {'addresses': addresses, 'ports': ports}


def make_endpoints(name: str, namespace: str, subsets: Optional[List[Dict[str, Any]]]) -> Dict[str, Any]:
    return {'name': name, 'namespace': namespace, 'subsets': subsets}


def make_service(name: str, namespace: str, labels: Optional[Dict[str, str]] = None,
                 annotations: Optional[Dict[str, str]] = None,
                 ports: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {
        'name': name,
        'namespace': namespace,
        'labels': labels or {},
        'annotations': annotations or {},
        'type': 'ClusterIP',
        'cluster_ip': '10.96.0.10',
        'ports': ports or [],
        'uid': f"svc-{namespace}-{name}",
    }


class FakeKubernetesClient:
    """Serves endpoints and services from memory and records every read."""

    def __init__(self, namespace: str = "default"):
        self.namespace = namespace
        self.endpoints: Dict[tuple, Dict[str, Any]] = {}
        self.services: Dict[tuple, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None

    def add_endpoints(self, endpoints: Dict[str, Any]) -> None:
        self.endpoints[(endpoints['namespace'], endpoints['name'])] = endpoints

    def add_service(self, service: Dict[str, Any]) -> None:
        self.services[(service['namespace'], service['name'])] = service

    def _record(self, *call) -> None:
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def get_endpoints(self, name, namespace=None):
        self._record('get_endpoints', name, namespace)
        return self.endpoints.get((namespace or self.namespace, name))

    async def list_endpoints(self, namespace=None):
        self._record('list_endpoints', namespace)
        namespace = namespace or self.namespace
        return [e for (ns, _), e in self.endpoints.items() if ns == namespace]

    async def list_endpoints_for_all_namespaces(self, name=None):
        self._record('list_endpoints_for_all_namespaces', name)
        return [e for (_, n), e in self.endpoints.items() if name is None or n == name]

    async def get_service(self, name, namespace=None):
        self._record('get_service', name, namespace)
        return self.services.get((namespace or self.namespace, name))

    async def list_services(self, namespace=None, all_namespaces=False, labels=None):
        self._record('list_services', namespace, all_namespaces, labels)
        namespace = namespace or self.namespace
        found = []
        for (ns, _), service in self.services.items():
            if not all_namespaces and ns != namespace:
                continue
            if labels and any(service['labels'].get(k) != v for k, v in labels.items()):
                continue
            found.append(service)
        return found


@pytest.fixture
def k8s_client():
    """Fake client bound to namespace ns1."""
    return FakeKubernetesClient(namespace="ns1")


@pytest.fixture
def discovery_settings():
    """Discovery settings independent of the process environment."""
    return DiscoverySettings(
        all_namespaces=False,
        service_labels={},
        primary_port_name=None,
        known_secure_ports={443, 8443},
        filter=None,
        metadata=MetadataSettings(
            add_labels=True,
            labels_prefix=None,
            add_annotations=True,
            annotations_prefix=None,
            add_ports=True,
            ports_prefix="port.",
        ),
    )
