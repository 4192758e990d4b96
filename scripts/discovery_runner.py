"""Catalog watch runner for long-running deployments."""

import asyncio
import signal
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from kubediscovery.config.settings import Settings
from kubediscovery.core.utils import setup_logging
from kubediscovery.clients.kubernetes.client_factory import KubernetesClientFactory
from kubediscovery.discovery.catalog_watch import CatalogWatch
import structlog

logger = structlog.get_logger(__name__)


async def main():
    """Run the catalog watch until interrupted."""
    settings = Settings.create_from_env()
    setup_logging(log_level=settings.log_level.value)
    
    if not settings.discovery.enabled:
        logger.info("Service discovery disabled, nothing to watch")
        return
    
    def on_heartbeat(event):
        logger.info("Endpoint pods changed", pods=event.pod_names)
    
    k8s_factory = KubernetesClientFactory(settings.kubernetes.model_dump())
    try:
        async with k8s_factory.create_client() as k8s_client:
            watch = CatalogWatch(k8s_client, settings.discovery, listener=on_heartbeat)
            
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, watch.stop)
            
            await watch.run()
    except Exception as e:
        logger.error("Catalog watch failed", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
