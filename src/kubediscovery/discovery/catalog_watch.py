"""Polls endpoints and publishes a heartbeat when backing pods change."""

import asyncio
from typing import Callable, List, Optional

from kubediscovery.config.settings import DiscoverySettings
from kubediscovery.discovery.base import BaseDiscoveryService
from kubediscovery.mappers.resource_mapper import ResourceDataMapper
from kubediscovery.models.instances import HeartbeatEvent

HeartbeatListener = Callable[[HeartbeatEvent], None]


class CatalogWatch(BaseDiscoveryService):
    """Watches the pods that back endpoints in the client's namespace.

    Only pods referenced by endpoint addresses take part; pods without
    endpoints are not discovered. Pod names are kept as listed, so a pod
    appearing in several subsets is counted once per subset.
    """

    def __init__(self, client, settings: DiscoverySettings,
                 listener: Optional[HeartbeatListener] = None):
        super().__init__(client, settings)
        self.listener = listener
        self.mapper = ResourceDataMapper()
        self._state: Optional[List[str]] = None
        self._stopped = asyncio.Event()

    @property
    def state(self) -> Optional[List[str]]:
        return self._state

    async def catalog_services_watch(self) -> Optional[HeartbeatEvent]:
        """Poll once; returns the published event, if any."""
        try:
            previous_state = self._state
            endpoints = await self.client.list_endpoints()
            pod_names = sorted(self.mapper.endpoint_pod_names(endpoints))
            self._state = pod_names

            if pod_names != previous_state:
                self.logger.debug("Received endpoints update", pod_names=pod_names)
                event = HeartbeatEvent(pod_names=pod_names)
                if self.listener:
                    self.listener(event)
                return event
        except Exception as e:
            self.logger.error("Error watching Kubernetes services", error=str(e), exc_info=True)
        return None

    async def run(self) -> None:
        """Poll until stop() is called."""
        self._stopped.clear()
        self.logger.info("Starting catalog watch", delay=self.settings.catalog_services_watch_delay)
        while not self._stopped.is_set():
            await self.catalog_services_watch()
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.settings.catalog_services_watch_delay)
            except asyncio.TimeoutError:
                pass
        self.logger.info("Catalog watch stopped")

    def stop(self) -> None:
        self._stopped.set()

    def get_discovery_type(self) -> str:
        return "kubernetes_catalog"
