# src/kubediscovery/discovery/discovery_client.py
"""Kubernetes implementation of service discovery."""

from typing import Any, Callable, Dict, List, Optional, Union

from kubediscovery.config.settings import DiscoverySettings
from kubediscovery.core.exceptions import InvalidArgumentException
from kubediscovery.discovery.base import BaseDiscoveryService
from kubediscovery.discovery.expander import InstanceExpander
from kubediscovery.discovery.filters import ServiceFilter
from kubediscovery.discovery.security import SecurePortResolver
from kubediscovery.models.instances import EndpointSubsetGroup, ServiceInstance

ServicePredicate = Callable[[Dict[str, Any]], bool]


class KubernetesDiscoveryClient(BaseDiscoveryService):
    """Resolves service names to instances from endpoints and services.

    Every call reads the cluster afresh; nothing is cached between calls.
    Errors raised by the cluster client are not caught here, so a failed
    lookup is never reported as a service without instances.
    """

    def __init__(self, client, settings: Optional[DiscoverySettings] = None,
                 secure_resolver: Optional[SecurePortResolver] = None):
        settings = settings or DiscoverySettings()
        super().__init__(client, settings)
        self.secure_resolver = secure_resolver or SecurePortResolver(settings.known_secure_ports)
        self.expander = InstanceExpander(client, settings, self.secure_resolver)
        self.service_filter = ServiceFilter(settings.filter)

    def description(self) -> str:
        return "Kubernetes Discovery Client"

    async def get_instances(self, service_id: str) -> List[ServiceInstance]:
        """All instances of ``service_id``, in namespace, subset and address order."""
        if not service_id:
            raise InvalidArgumentException("service_id", "must not be empty")
        if not self.settings.enabled:
            return []

        default_namespace = self.client.namespace
        if self.settings.all_namespaces:
            endpoints_list = await self.client.list_endpoints_for_all_namespaces(name=service_id)
        else:
            endpoints_list = [await self.client.get_endpoints(service_id, default_namespace)]

        groups = [self._subset_group(endpoints, default_namespace) for endpoints in endpoints_list]

        instances = []
        for group in groups:
            instances.extend(await self.expander.expand(group.namespace, service_id, group.subsets))

        self.logger.info(f"Resolved {len(instances)} instances",
                         service=service_id, namespaces=len(groups))
        return instances

    async def get_services(self, predicate: Union[ServicePredicate, str, None] = None) -> List[str]:
        """Names of the services visible to this client that match ``predicate``.

        ``predicate`` may be a callable over the service dict or a filter
        expression. Without one, or with a blank expression, the configured
        filter applies, which matches every service when none is configured.
        """
        if not self.settings.enabled:
            return []

        if isinstance(predicate, str) and not predicate.strip():
            predicate = None

        if predicate is None:
            predicate = self.service_filter
        elif isinstance(predicate, str):
            predicate = ServiceFilter(predicate)

        services = await self.client.list_services(
            all_namespaces=self.settings.all_namespaces,
            labels=self.settings.service_labels,
        )
        names = [service['name'] for service in services if predicate(service)]
        self.logger.debug(f"Listed {len(names)} of {len(services)} services")
        return names

    def _subset_group(self, endpoints: Optional[Dict[str, Any]], default_namespace: str) -> EndpointSubsetGroup:
        if endpoints is None or endpoints.get('subsets') is None:
            return EndpointSubsetGroup(namespace=default_namespace)
        return EndpointSubsetGroup(
            namespace=endpoints.get('namespace') or default_namespace,
            subsets=endpoints['subsets'],
        )

    def get_discovery_type(self) -> str:
        return "kubernetes_services"
