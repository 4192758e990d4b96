# src/kubediscovery/clients/kubernetes/k8s_client.py
"""Read-only Kubernetes client for endpoints and services."""

import os
from pathlib import Path
from typing import Dict, Any, List, Optional
import yaml
import structlog
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from kubediscovery.core.base_client import BaseClient
from kubediscovery.core.exceptions import ClientConnectionException, CollaboratorException
from kubediscovery.core.utils import retry_with_backoff, to_label_selector
from kubediscovery.mappers.resource_mapper import ResourceDataMapper

logger = structlog.get_logger(__name__)

SERVICE_ACCOUNT_PATH = Path("/var/run/secrets/kubernetes.io/serviceaccount")
SERVICE_ACCOUNT_TOKEN_PATH = SERVICE_ACCOUNT_PATH / "token"
SERVICE_ACCOUNT_CA_CRT_PATH = SERVICE_ACCOUNT_PATH / "ca.crt"
SERVICE_ACCOUNT_NAMESPACE_PATH = SERVICE_ACCOUNT_PATH / "namespace"
HOSTNAME = "HOSTNAME"


class KubernetesClient(BaseClient):
    """Kubernetes client exposing the reads service discovery needs."""
    
    def __init__(self, 
                 config_dict: Dict[str, Any],
                 kubeconfig_path: Optional[str] = None,
                 context: Optional[str] = None,
                 kubeconfig_data: Optional[bytes] = None,
                 in_cluster: bool = False):
        super().__init__(config_dict, "KubernetesClient")
        self.kubeconfig_path = kubeconfig_path
        self.context = context
        self.kubeconfig_data = kubeconfig_data
        self.in_cluster = in_cluster
        self.namespace = config_dict.get("namespace") or "default"
        self.mapper = ResourceDataMapper()
        self.hostname = os.environ.get(HOSTNAME)
        
        self.v1 = None
    
    async def connect(self) -> None:
        """Connect to Kubernetes cluster."""
        try:
            if self.in_cluster:
                config.load_incluster_config()
                if SERVICE_ACCOUNT_NAMESPACE_PATH.exists():
                    self.namespace = SERVICE_ACCOUNT_NAMESPACE_PATH.read_text().strip() or self.namespace
                self.logger.info("Loaded in-cluster configuration")
            elif self.kubeconfig_data:
                kubeconfig_dict = yaml.safe_load(self.kubeconfig_data.decode('utf-8'))
                config.load_kube_config_from_dict(kubeconfig_dict, context=self.context)
                self.logger.info("Loaded kubeconfig from provided data")
            elif self.kubeconfig_path:
                config.load_kube_config(config_file=self.kubeconfig_path, context=self.context)
                self.logger.info(f"Loaded kubeconfig from {self.kubeconfig_path}")
            else:
                config.load_kube_config(context=self.context)
                self.logger.info("Loaded default kubeconfig")
            
            self.v1 = client.CoreV1Api()
            
            self._connected = True
            self.logger.info("Kubernetes client connected", namespace=self.namespace)
            
        except Exception as e:
            raise ClientConnectionException("Kubernetes", f"Connection failed: {e}")
    
    async def disconnect(self) -> None:
        """Disconnect from Kubernetes cluster."""
        self._connected = False
        self.logger.info("Kubernetes client disconnected")
    
    async def health_check(self) -> bool:
        """Check Kubernetes client health."""
        try:
            if not self._connected or not self.v1:
                return False
            self.v1.get_api_resources()
            return True
        except Exception as e:
            self.logger.warning("Kubernetes health check failed", error=str(e))
            return False
    
    @retry_with_backoff(max_retries=3)
    async def get_endpoints(self, name: str, namespace: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Get one endpoints object by name; None when it does not exist."""
        namespace = namespace or self.namespace
        try:
            endpoints = self.v1.read_namespaced_endpoints(name, namespace)
        except ApiException as e:
            if e.status == 404:
                self.logger.debug("Endpoints not found", name=name, namespace=namespace)
                return None
            raise CollaboratorException("endpoints", f"{namespace}/{name}: {e.reason}", status=e.status)
        return self.mapper.map_endpoints(endpoints)
    
    @retry_with_backoff(max_retries=3)
    async def list_endpoints(self, namespace: Optional[str] = None) -> List[Dict[str, Any]]:
        """List endpoints in a namespace (the client's own by default)."""
        namespace = namespace or self.namespace
        try:
            endpoints_list = self.v1.list_namespaced_endpoints(namespace)
        except ApiException as e:
            raise CollaboratorException("endpoints", f"namespace {namespace}: {e.reason}", status=e.status)
        
        endpoints = [self.mapper.map_endpoints(item) for item in endpoints_list.items]
        self.logger.debug(f"Listed {len(endpoints)} endpoints", namespace=namespace)
        return endpoints
    
    @retry_with_backoff(max_retries=3)
    async def list_endpoints_for_all_namespaces(self, name: Optional[str] = None) -> List[Dict[str, Any]]:
        """List endpoints in every namespace, optionally only those with the given name."""
        field_selector = f"metadata.name={name}" if name else None
        try:
            if field_selector:
                endpoints_list = self.v1.list_endpoints_for_all_namespaces(field_selector=field_selector)
            else:
                endpoints_list = self.v1.list_endpoints_for_all_namespaces()
        except ApiException as e:
            raise CollaboratorException("endpoints", f"all namespaces: {e.reason}", status=e.status)
        
        endpoints = [self.mapper.map_endpoints(item) for item in endpoints_list.items]
        self.logger.debug(f"Listed {len(endpoints)} endpoints across namespaces", name=name)
        return endpoints
    
    @retry_with_backoff(max_retries=3)
    async def get_service(self, name: str, namespace: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Get one service by name; None when it does not exist."""
        namespace = namespace or self.namespace
        try:
            service = self.v1.read_namespaced_service(name, namespace)
        except ApiException as e:
            if e.status == 404:
                self.logger.debug("Service not found", name=name, namespace=namespace)
                return None
            raise CollaboratorException("service", f"{namespace}/{name}: {e.reason}", status=e.status)
        return self.mapper.map_service(service)
    
    @retry_with_backoff(max_retries=3)
    async def list_services(self, 
                            namespace: Optional[str] = None,
                            all_namespaces: bool = False,
                            labels: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        """List services in one namespace or in all of them, optionally filtered by labels."""
        label_selector = to_label_selector(labels)
        kwargs = {'label_selector': label_selector} if label_selector else {}
        try:
            if all_namespaces:
                service_list = self.v1.list_service_for_all_namespaces(**kwargs)
            else:
                service_list = self.v1.list_namespaced_service(namespace or self.namespace, **kwargs)
        except ApiException as e:
            raise CollaboratorException("services", e.reason, status=e.status)
        
        services = [self.mapper.map_service(item) for item in service_list.items]
        self.logger.debug(f"Listed {len(services)} services", 
                          all_namespaces=all_namespaces, label_selector=label_selector)
        return services
    
    async def current_pod(self) -> Optional[Dict[str, Any]]:
        """The pod this process runs in, looked up by HOSTNAME."""
        if not (self._is_service_account_found() and self.hostname):
            return None
        try:
            pod = self.v1.read_namespaced_pod(self.hostname, self.namespace)
        except Exception as e:
            self.logger.warning(
                f"Failed to get pod with name {self.hostname}; "
                "are service account permissions missing?",
                error=str(e)
            )
            return None
        return self.mapper.map_pod(pod)
    
    async def is_inside_kubernetes(self) -> bool:
        return await self.current_pod() is not None
    
    def _is_service_account_found(self) -> bool:
        return SERVICE_ACCOUNT_TOKEN_PATH.exists() and SERVICE_ACCOUNT_CA_CRT_PATH.exists()
