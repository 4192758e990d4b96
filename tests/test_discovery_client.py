"""Tests for resolving services to instances and listing services."""

import pytest

from kubediscovery.core.exceptions import CollaboratorException, ConfigurationException, InvalidArgumentException
from kubediscovery.discovery.discovery_client import KubernetesDiscoveryClient
from tests.conftest import make_endpoints, make_service, make_subset

HTTP = {'name': 'http', 'port': 8080, 'protocol': 'TCP'}


@pytest.fixture
def discovery(k8s_client, discovery_settings):
    return KubernetesDiscoveryClient(k8s_client, discovery_settings)


class TestGetInstances:
    """Test cases for KubernetesDiscoveryClient.get_instances."""

    @pytest.mark.asyncio
    async def test_two_addresses_on_plain_port(self, discovery, k8s_client):
        k8s_client.add_service(make_service("orders", "ns1"))
        k8s_client.add_endpoints(make_endpoints("orders", "ns1", [
            make_subset(["10.0.0.1", "10.0.0.2"], [HTTP]),
        ]))

        instances = await discovery.get_instances("orders")

        assert len(instances) == 2
        assert [i.host for i in instances] == ["10.0.0.1", "10.0.0.2"]
        assert all(i.port == 8080 and i.secure is False for i in instances)

    @pytest.mark.asyncio
    async def test_known_secure_port(self, discovery, k8s_client):
        k8s_client.add_service(make_service("orders", "ns1"))
        k8s_client.add_endpoints(make_endpoints("orders", "ns1", [
            make_subset(["10.0.0.1", "10.0.0.2"], [{'name': 'https', 'port': 443, 'protocol': 'TCP'}]),
        ]))

        instances = await discovery.get_instances("orders")

        assert len(instances) == 2
        assert all(i.port == 443 and i.secure is True for i in instances)

    @pytest.mark.asyncio
    async def test_single_namespace_reads(self, discovery, k8s_client):
        k8s_client.add_service(make_service("orders", "ns1"))
        k8s_client.add_endpoints(make_endpoints("orders", "ns1", [make_subset(["10.0.0.1"], [HTTP])]))

        await discovery.get_instances("orders")

        assert k8s_client.calls == [
            ('get_endpoints', 'orders', 'ns1'),
            ('get_service', 'orders', 'ns1'),
        ]

    @pytest.mark.asyncio
    async def test_all_namespaces(self, discovery, k8s_client, discovery_settings):
        discovery_settings.all_namespaces = True
        k8s_client.add_service(make_service("cache", "ns1", labels={'zone': 'a'}))
        k8s_client.add_service(make_service("cache", "ns2", labels={'zone': 'b'}))
        k8s_client.add_endpoints(make_endpoints("cache", "ns1", [make_subset(["10.0.1.1"], [HTTP])]))
        k8s_client.add_endpoints(make_endpoints("cache", "ns2", [make_subset(["10.0.2.1", "10.0.2.2"], [HTTP])]))
        k8s_client.add_endpoints(make_endpoints("other", "ns2", [make_subset(["10.0.2.9"], [HTTP])]))

        instances = await discovery.get_instances("cache")

        assert [(i.namespace, i.host) for i in instances] == [
            ("ns1", "10.0.1.1"),
            ("ns2", "10.0.2.1"),
            ("ns2", "10.0.2.2"),
        ]
        assert [i.metadata['zone'] for i in instances] == ['a', 'b', 'b']
        assert ('list_endpoints_for_all_namespaces', 'cache') in k8s_client.calls

    @pytest.mark.asyncio
    async def test_missing_endpoints_is_empty(self, discovery, k8s_client):
        assert await discovery.get_instances("orders") == []
        assert k8s_client.calls == [('get_endpoints', 'orders', 'ns1')]

    @pytest.mark.asyncio
    async def test_endpoints_without_subsets_is_empty(self, discovery, k8s_client):
        k8s_client.add_endpoints(make_endpoints("orders", "ns1", None))

        assert await discovery.get_instances("orders") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("service_id", [None, ""])
    async def test_empty_service_id_rejected(self, discovery, service_id):
        with pytest.raises(InvalidArgumentException):
            await discovery.get_instances(service_id)

    @pytest.mark.asyncio
    async def test_collaborator_errors_propagate(self, discovery, k8s_client):
        error = CollaboratorException("endpoints", "forbidden", status=403)
        k8s_client.error = error

        with pytest.raises(CollaboratorException) as exc_info:
            await discovery.get_instances("orders")

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_disabled_discovery_reads_nothing(self, discovery, k8s_client, discovery_settings):
        discovery_settings.enabled = False

        assert await discovery.get_instances("orders") == []
        assert k8s_client.calls == []

    @pytest.mark.asyncio
    async def test_results_are_not_cached(self, discovery, k8s_client):
        k8s_client.add_service(make_service("orders", "ns1"))
        k8s_client.add_endpoints(make_endpoints("orders", "ns1", [make_subset(["10.0.0.1"], [HTTP])]))
        assert len(await discovery.get_instances("orders")) == 1

        k8s_client.add_endpoints(make_endpoints("orders", "ns1", [make_subset(["10.0.0.1", "10.0.0.2"], [HTTP])]))

        assert len(await discovery.get_instances("orders")) == 2


class TestGetServices:
    """Test cases for KubernetesDiscoveryClient.get_services."""

    @pytest.fixture(autouse=True)
    def services(self, k8s_client):
        k8s_client.add_service(make_service("orders", "ns1", labels={'tier': 'backend'}))
        k8s_client.add_service(make_service("web", "ns1", labels={'tier': 'frontend'},
                                            annotations={'discovery': 'on'}))
        k8s_client.add_service(make_service("billing", "ns2", labels={'tier': 'backend'}))

    @pytest.mark.asyncio
    async def test_lists_own_namespace(self, discovery):
        assert await discovery.get_services() == ["orders", "web"]

    @pytest.mark.asyncio
    async def test_lists_all_namespaces(self, discovery, discovery_settings):
        discovery_settings.all_namespaces = True

        assert await discovery.get_services() == ["orders", "web", "billing"]

    @pytest.mark.asyncio
    async def test_service_labels_passed_as_selector(self, discovery, k8s_client, discovery_settings):
        discovery_settings.all_namespaces = True
        discovery_settings.service_labels = {'tier': 'backend'}

        assert await discovery.get_services() == ["orders", "billing"]
        assert k8s_client.calls[-1] == ('list_services', None, True, {'tier': 'backend'})

    @pytest.mark.asyncio
    async def test_callable_predicate(self, discovery):
        assert await discovery.get_services(lambda service: service['name'].startswith('w')) == ["web"]

    @pytest.mark.asyncio
    async def test_expression_predicate(self, discovery):
        assert await discovery.get_services("annotations.get('discovery') == 'on'") == ["web"]

    @pytest.mark.asyncio
    async def test_configured_filter(self, k8s_client, discovery_settings):
        discovery_settings.filter = "metadata.labels['tier'] == 'backend'"
        discovery = KubernetesDiscoveryClient(k8s_client, discovery_settings)

        assert await discovery.get_services() == ["orders"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expression", ["", "   "])
    async def test_blank_expression_keeps_configured_filter(self, k8s_client, discovery_settings, expression):
        discovery_settings.filter = "labels.tier == 'backend'"
        discovery = KubernetesDiscoveryClient(k8s_client, discovery_settings)

        assert await discovery.get_services(expression) == ["orders"]

    def test_invalid_configured_filter_fails_at_construction(self, k8s_client, discovery_settings):
        discovery_settings.filter = "labels.tier =="

        with pytest.raises(ConfigurationException):
            KubernetesDiscoveryClient(k8s_client, discovery_settings)

    def test_description(self, discovery):
        assert discovery.description() == "Kubernetes Discovery Client"
