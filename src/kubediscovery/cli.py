# src/kubediscovery/cli.py
"""Service discovery CLI."""

import asyncio
import json
import sys

import click
import structlog

from kubediscovery.clients.kubernetes.client_factory import KubernetesClientFactory
from kubediscovery.config.settings import Settings
from kubediscovery.core.exceptions import KubeDiscoveryException
from kubediscovery.core.utils import setup_logging
from kubediscovery.discovery.catalog_watch import CatalogWatch
from kubediscovery.discovery.discovery_client import KubernetesDiscoveryClient

logger = structlog.get_logger(__name__)


@click.group()
@click.option('--namespace', '-n', help='Namespace to discover in (defaults to K8S_NAMESPACE)')
@click.option('--all-namespaces', '-A', is_flag=True, help='Discover across all namespaces')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, namespace, all_namespaces, debug):
    """Kubernetes service discovery."""
    ctx.ensure_object(dict)

    settings = Settings.create_from_env()
    if namespace:
        settings.kubernetes.namespace = namespace
    if all_namespaces:
        settings.discovery.all_namespaces = True

    setup_logging(log_level="DEBUG" if debug else settings.log_level.value)

    ctx.obj['settings'] = settings
    ctx.obj['debug'] = debug


def _run(ctx, coro_factory) -> None:
    settings = ctx.obj['settings']

    async def run():
        factory = KubernetesClientFactory(settings.kubernetes.model_dump())
        async with factory.create_client() as k8s_client:
            return await coro_factory(k8s_client, settings)

    try:
        asyncio.run(run())
    except KubeDiscoveryException as e:
        click.echo(f"❌ {e.message}", err=True)
        if ctx.obj['debug']:
            import traceback
            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)


@cli.command()
@click.argument('service')
@click.option('--primary-port-name', '-p', help='Port name to use when endpoints expose several ports')
@click.option('--format', '-f', 'output_format', type=click.Choice(['table', 'json']), default='table',
              help='Output format')
@click.pass_context
def instances(ctx, service, primary_port_name, output_format):
    """Resolve the instances of SERVICE."""
    if primary_port_name:
        ctx.obj['settings'].discovery.primary_port_name = primary_port_name

    async def resolve(k8s_client, settings):
        discovery = KubernetesDiscoveryClient(k8s_client, settings.discovery)
        found = await discovery.get_instances(service)

        if output_format == 'json':
            click.echo(json.dumps([instance.model_dump() for instance in found], indent=2))
            return

        if not found:
            click.echo(f"No instances found for {service}")
            return

        click.echo(f"{'NAMESPACE':<20} {'URI':<32} {'SECURE':<7} INSTANCE ID")
        for instance in found:
            click.echo(f"{instance.namespace or '':<20} {instance.uri:<32} "
                       f"{str(instance.secure).lower():<7} {instance.instance_id or '-'}")

    _run(ctx, resolve)


@cli.command()
@click.option('--filter', '-f', 'expression', help="Filter expression, e.g. \"labels.get('tier') == 'web'\"")
@click.pass_context
def services(ctx, expression):
    """List the names of discoverable services."""

    async def list_names(k8s_client, settings):
        discovery = KubernetesDiscoveryClient(k8s_client, settings.discovery)
        for name in await discovery.get_services(expression):
            click.echo(name)

    _run(ctx, list_names)


@cli.command()
@click.option('--delay', type=float, help='Seconds between polls (defaults to DISCOVERY_CATALOG_SERVICES_WATCH_DELAY)')
@click.pass_context
def watch(ctx, delay):
    """Poll endpoints and report when the pods behind services change."""
    if not ctx.obj['settings'].discovery.enabled:
        click.echo("Service discovery disabled, nothing to watch")
        return
    if delay is not None:
        ctx.obj['settings'].discovery.catalog_services_watch_delay = delay

    def on_heartbeat(event):
        logger.info("Catalog changed", pods=len(event.pod_names))
        click.echo(f"🔄 {len(event.pod_names)} endpoint pods: {', '.join(event.pod_names)}")

    async def watch_catalog(k8s_client, settings):
        catalog_watch = CatalogWatch(k8s_client, settings.discovery, listener=on_heartbeat)
        await catalog_watch.run()

    try:
        _run(ctx, watch_catalog)
    except KeyboardInterrupt:
        click.echo("Stopped")


if __name__ == '__main__':
    cli()
