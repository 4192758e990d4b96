"""Builds the flat metadata mapping attached to service instances."""

from typing import Any, Dict, Iterable, Mapping, Optional
import structlog

from kubediscovery.config.settings import MetadataSettings

logger = structlog.get_logger(__name__)


def with_prefixed_keys(mapping: Optional[Mapping[str, str]], prefix: Optional[str]) -> Dict[str, str]:
    """Copy of ``mapping`` with every key prefixed; keys unchanged for an empty prefix."""
    if not mapping:
        return {}
    if not prefix:
        return dict(mapping)
    return {f"{prefix}{key}": value for key, value in mapping.items()}


def named_ports(ports: Optional[Iterable[Mapping[str, Any]]]) -> Dict[str, str]:
    # unnamed ports have no key to live under
    return {
        port['name']: str(port['port'])
        for port in (ports or [])
        if port.get('name')
    }


def service_metadata(labels: Optional[Mapping[str, str]],
                     annotations: Optional[Mapping[str, str]],
                     options: MetadataSettings) -> Dict[str, str]:
    """Labels then annotations, as enabled by ``options``."""
    metadata = {}
    if options.add_labels:
        label_metadata = with_prefixed_keys(labels, options.labels_prefix)
        logger.debug("Adding label metadata", metadata=label_metadata)
        metadata.update(label_metadata)
    if options.add_annotations:
        annotation_metadata = with_prefixed_keys(annotations, options.annotations_prefix)
        logger.debug("Adding annotation metadata", metadata=annotation_metadata)
        metadata.update(annotation_metadata)
    return metadata


def port_metadata(ports: Optional[Iterable[Mapping[str, Any]]], options: MetadataSettings) -> Dict[str, str]:
    if not options.add_ports:
        return {}
    metadata = with_prefixed_keys(named_ports(ports), options.ports_prefix)
    logger.debug("Adding port metadata", metadata=metadata)
    return metadata


def compose_metadata(labels: Optional[Mapping[str, str]] = None,
                     annotations: Optional[Mapping[str, str]] = None,
                     ports: Optional[Iterable[Mapping[str, Any]]] = None,
                     options: Optional[MetadataSettings] = None) -> Dict[str, str]:
    """Merge labels, annotations and ports; later sources win on key collisions."""
    options = options or MetadataSettings()
    metadata = service_metadata(labels, annotations, options)
    metadata.update(port_metadata(ports, options))
    return metadata
