from .settings import Settings, KubernetesSettings, DiscoverySettings, MetadataSettings

__all__ = ["Settings", "KubernetesSettings", "DiscoverySettings", "MetadataSettings"]
