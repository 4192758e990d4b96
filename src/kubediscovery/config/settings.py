# config/settings.py
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, Optional, Set
from enum import Enum
from dotenv import load_dotenv

# Load .env file explicitly
load_dotenv()

class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class KubernetesSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="K8S_")
    
    kubeconfig_path: Optional[str] = Field(None, description="Path to kubeconfig file")
    namespace: str = Field("default", description="Default Kubernetes namespace")
    context: Optional[str] = Field(None, description="Kubernetes context to use")
    in_cluster: bool = Field(False, description="Use the pod service account instead of a kubeconfig")


class MetadataSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DISCOVERY_METADATA_")
    
    add_labels: bool = Field(True, description="Add service labels to instance metadata")
    labels_prefix: Optional[str] = Field(None, description="Prefix for label keys")
    add_annotations: bool = Field(True, description="Add service annotations to instance metadata")
    annotations_prefix: Optional[str] = Field(None, description="Prefix for annotation keys")
    add_ports: bool = Field(True, description="Add named endpoint ports to instance metadata")
    ports_prefix: Optional[str] = Field("port.", description="Prefix for port keys")


class DiscoverySettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DISCOVERY_")
    
    enabled: bool = Field(True, description="Enable service discovery")
    all_namespaces: bool = Field(False, description="Discover services across all namespaces")
    service_labels: Dict[str, str] = Field(default_factory=dict, description="Label selector for service listing")
    primary_port_name: Optional[str] = Field(None, description="Port name to pick when an endpoint exposes several")
    known_secure_ports: Set[int] = Field(default_factory=lambda: {443, 8443}, description="Ports considered secure")
    filter: Optional[str] = Field(None, description="Expression selecting which services are listed")
    catalog_services_watch_delay: float = Field(30.0, description="Seconds between catalog watch polls")
    
    metadata: MetadataSettings = Field(default_factory=lambda: MetadataSettings())

    @field_validator('primary_port_name', 'filter', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    log_level: LogLevel = Field(LogLevel.INFO, description="Log level")
    
    kubernetes: KubernetesSettings = Field(default_factory=lambda: KubernetesSettings())
    discovery: DiscoverySettings = Field(default_factory=lambda: DiscoverySettings())

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @classmethod
    def create_from_env(cls) -> "Settings":
        """Create settings instance from environment variables."""
        return cls()
