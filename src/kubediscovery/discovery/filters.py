"""Filter expressions selecting which services are listed.

An expression is a single Jinja expression evaluated against one service,
for example::

    labels.tier == 'backend' and not name.startswith('legacy-')
    metadata.annotations.get('discovery') in ('on', 'true')

Expressions run in a sandboxed environment. The expression is compiled once,
when the filter is created; evaluating it afterwards never re-parses it.
"""

from typing import Any, Dict, Mapping, Optional
import structlog
from jinja2 import TemplateError, TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment

from kubediscovery.core.exceptions import ConfigurationException

logger = structlog.get_logger(__name__)

_environment = SandboxedEnvironment()


def compile_filter(expression: str):
    """Compile a filter expression into a callable taking the service scope."""
    try:
        return _environment.compile_expression(expression.strip())
    except TemplateSyntaxError as e:
        raise ConfigurationException(f"Invalid filter expression {expression!r}: {e.message}",
                                     {"expression": expression})


def service_scope(service: Mapping[str, Any]) -> Dict[str, Any]:
    """Names visible to a filter expression for one service."""
    labels = service.get("labels") or {}
    annotations = service.get("annotations") or {}
    return {
        "name": service.get("name"),
        "namespace": service.get("namespace"),
        "labels": labels,
        "annotations": annotations,
        "ports": service.get("ports") or [],
        "type": service.get("type"),
        "metadata": {
            "name": service.get("name"),
            "namespace": service.get("namespace"),
            "labels": labels,
            "annotations": annotations,
        },
    }


class ServiceFilter:
    """Predicate over a service, compiled from an optional expression.

    Without an expression every service matches.
    """

    def __init__(self, expression: Optional[str] = None):
        self.expression = expression if expression and expression.strip() else None
        self._expression = compile_filter(self.expression) if self.expression else None

    def __call__(self, service: Mapping[str, Any]) -> bool:
        if self._expression is None:
            return True
        try:
            result = self._expression(**service_scope(service))
        except (TemplateError, AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.debug("Filter expression failed for service",
                         service=service.get("name"), expression=self.expression, error=str(e))
            return False
        if result is None:
            return False
        return bool(result)

    def __repr__(self) -> str:
        return f"ServiceFilter({self.expression!r})"
