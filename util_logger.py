"""
Unified Logger System.

JSON-only structured logging for the seeding host and its routines.

Design Principles:
    - Strong typing with dataclasses (stdlib only)
    - Enum safety for categories
    - Component-specific loggers
    - Clean factory pattern

Exports:
    ComponentType: Enum for component types
    LogLevel: Enum for log levels
    LogContext: Logging context dataclass
    LoggerFactory: Factory for creating loggers
    JSONFormatter: One JSON object per log line
    log_exceptions: Exception logging decorator (sync and async)

Dependencies:
    Standard library only (logging, enum, dataclasses, json)
"""

from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass
import asyncio
import logging
import sys
import os
import json
import traceback
from functools import wraps


# ============================================================================
# COMPONENT TYPES - Aligned with seeding pipeline layers
# ============================================================================

class ComponentType(Enum):
    """
    Component types aligned with the seeding pipeline layers.

    Each layer has specific logging needs and levels.
    """
    TRIGGER = "trigger"        # Readiness signals, dispatcher, probes
    SERVICE = "service"        # Resolver, ensurer, importer, generator
    REPOSITORY = "repository"  # Azure SDK backends (cosmos, blob, queue)
    FACTORY = "factory"        # Topology builder
    VALIDATOR = "validator"    # Configuration validation


# ============================================================================
# LOG LEVELS - Standard Python levels with enum safety
# ============================================================================

class LogLevel(Enum):
    """
    Standard Python log levels as enum for type safety.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Create from string, case-insensitive."""
        return cls[level.upper()]


# ============================================================================
# LOG CONTEXT - Correlation and tracking
# ============================================================================

@dataclass
class LogContext:
    """
    Context for log correlation across one seeding routine.

    Every line written while importing into a resource carries the
    resource name and the phase, so a failed batch can be traced back
    to the step that broke it.
    """
    resource_name: Optional[str] = None
    resource_kind: Optional[str] = None
    phase: Optional[str] = None  # connect, ensure, import
    record_id: Optional[str] = None
    correlation_id: Optional[str] = None
    environment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            k: v for k, v in {
                'resource_name': self.resource_name,
                'resource_kind': self.resource_kind,
                'phase': self.phase,
                'record_id': self.record_id,
                'correlation_id': self.correlation_id,
                'environment': self.environment,
            }.items() if v is not None
        }


# ============================================================================
# COMPONENT CONFIGURATION - Per-component settings
# ============================================================================

@dataclass
class ComponentConfig:
    """
    Configuration for component-specific logging.
    """
    component_type: ComponentType
    log_level: LogLevel = LogLevel.INFO
    max_message_length: int = 1000


# ============================================================================
# JSON FORMATTER - Structured logging
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs one JSON object per record so log shippers (and tests)
    can parse lines without regexes.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# LOGGER FACTORY - Creates component-specific loggers
# ============================================================================

def _default_level() -> LogLevel:
    """Resolve the default level from DEBUG_LOGGING / LOG_LEVEL."""
    if os.getenv('DEBUG_LOGGING', '').lower() == 'true':
        return LogLevel.DEBUG
    try:
        return LogLevel.from_string(os.getenv('LOG_LEVEL', 'INFO'))
    except KeyError:
        return LogLevel.INFO


class LoggerFactory:
    """
    Factory for creating component-specific loggers.

    Example:
        logger = LoggerFactory.create_logger(
            ComponentType.SERVICE,
            "ImportExecutor"
        )
        logger.info("Importing batch")
    """

    @classmethod
    def default_config(cls, component_type: ComponentType) -> ComponentConfig:
        """Default configuration for a component type."""
        return ComponentConfig(component_type=component_type, log_level=_default_level())

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        context: Optional[LogContext] = None,
        config: Optional[ComponentConfig] = None
    ) -> logging.Logger:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Component name (e.g., "ConnectionResolver")
            context: Optional log context for correlation
            config: Optional custom configuration

        Returns:
            Configured Python logger
        """
        if config is None:
            config = cls.default_config(component_type)

        # Context-bound loggers get their own name so the wrapper below
        # does not leak one routine's context into another's lines.
        logger_name = f"{component_type.value}.{name}"
        if context and context.resource_name:
            logger_name = f"{logger_name}.{context.resource_name}"
        logger = logging.getLogger(logger_name)

        log_level = config.log_level.to_python_level()
        logger.setLevel(log_level)

        has_json_handler = any(
            isinstance(h.formatter, JSONFormatter) for h in logger.handlers
        )
        if not has_json_handler:
            handler = logging.StreamHandler(sys.stdout)
            handler.setLevel(log_level)
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)

        # Propagation stays on so pytest's caplog sees every record
        logger.propagate = True

        if not hasattr(logger, '_context_wrapped'):
            original_log = logger._log

            def log_with_context(level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1):
                """Wrapper to inject context as custom dimensions."""
                if extra is None:
                    extra = {}

                custom_dims = context.to_dict() if context else {}
                custom_dims['component_type'] = component_type.value
                custom_dims['component_name'] = name

                if 'custom_dimensions' in extra:
                    custom_dims.update(extra['custom_dimensions'])

                extra['custom_dimensions'] = custom_dims

                original_log(level, msg, args, exc_info=exc_info, extra=extra,
                             stack_info=stack_info, stacklevel=stacklevel + 1)

            logger._log = log_with_context
            logger._context_wrapped = True

        return logger

    @classmethod
    def create_with_context(
        cls,
        component_type: ComponentType,
        name: str,
        resource_name: Optional[str] = None,
        resource_kind: Optional[str] = None,
        environment: Optional[str] = None
    ) -> logging.Logger:
        """
        Create logger bound to one resource.

        Args:
            component_type: Type of component
            name: Component name
            resource_name: Optional resource the logger reports on
            resource_kind: Optional resource kind value
            environment: Optional environment name

        Returns:
            Configured Python logger with context
        """
        context = LogContext(
            resource_name=resource_name,
            resource_kind=resource_kind,
            environment=environment
        ) if any([resource_name, resource_kind, environment]) else None

        return cls.create_logger(
            component_type=component_type,
            name=name,
            context=context
        )


# ============================================================================
# EXCEPTION DECORATOR - Automatic exception logging with context
# ============================================================================

def log_exceptions(component_type: Optional[ComponentType] = None,
                   component_name: Optional[str] = None,
                   logger: Optional[logging.Logger] = None):
    """
    Decorator to automatically log exceptions with full context.

    Works for plain functions and coroutine functions. The exception is
    always re-raised.

    Example:
        @log_exceptions(ComponentType.SERVICE, "SchemaEnsurer")
        async def ensure(...):
            ...
    """
    def decorator(func):
        def _resolve_logger() -> logging.Logger:
            if logger:
                return logger
            if component_type and component_name:
                return LoggerFactory.create_logger(component_type, component_name)
            return LoggerFactory.create_logger(
                ComponentType.SERVICE,
                func.__module__ or "unknown"
            )

        def _log(e: Exception, args, kwargs) -> None:
            _resolve_logger().error(
                f"Exception in {func.__name__}",
                exc_info=True,
                extra={
                    'custom_dimensions': {
                        'function_name': func.__name__,
                        'function_module': func.__module__,
                        'exception_type': type(e).__name__,
                        'exception_message': str(e),
                        'function_args': str(args)[:500],
                        'function_kwargs': str(kwargs)[:500],
                        'traceback': traceback.format_exc()
                    }
                }
            )

        if asyncio.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    _log(e, args, kwargs)
                    raise
            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _log(e, args, kwargs)
                raise
        return wrapper
    return decorator
