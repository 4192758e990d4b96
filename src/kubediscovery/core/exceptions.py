"""Custom exceptions for Kubernetes service discovery."""

from typing import Optional, Dict, Any


class KubeDiscoveryException(Exception):
    """Base exception for service discovery."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidArgumentException(KubeDiscoveryException, ValueError):
    """Raised when a required argument is missing or empty."""
    
    def __init__(self, argument: str, message: str):
        self.argument = argument
        super().__init__(f"Invalid argument {argument}: {message}", {"argument": argument})


class IllegalStateException(KubeDiscoveryException, RuntimeError):
    """Raised when configuration cannot resolve an ambiguous choice."""
    pass


class CollaboratorException(KubeDiscoveryException):
    """Raised when the cluster resource client cannot complete a read."""
    
    def __init__(self, resource: str, message: str, status: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.resource = resource
        self.status = status
        super().__init__(f"Failed to read {resource}: {message}", details)


class ClientConnectionException(KubeDiscoveryException):
    """Raised when client connections fail."""
    
    def __init__(self, client_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.client_type = client_type
        super().__init__(f"{client_type} connection failed: {message}", details)


class ConfigurationException(KubeDiscoveryException):
    """Raised when configuration is invalid."""
    pass
