"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    log_filter: str = "info"
    suppress_probe_logs: bool = True


@dataclass(frozen=True)
class ControllerConfig:
    """Controller configuration."""
    requeue_delay: float = 1.0
    max_workers: int = 4
    namespaces: Tuple[str, ...] = ()
    liveness_endpoint: Optional[str] = None
    in_cluster: Optional[bool] = None  # None = detect

    @property
    def clusterwide(self) -> bool:
        """Watch every namespace when none are listed."""
        return not self.namespaces


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        ...

    def get_controller_config(self) -> ControllerConfig:
        """Get controller configuration."""
        ...


def _parse_tristate(value: str) -> Optional[bool]:
    value = value.strip().lower()
    if value in ("", "auto"):
        return None
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    raise ValueError(f"Expected true, false or auto, got {value!r}")


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, environ=None):
        self.environ = os.environ if environ is None else environ

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration from environment variables."""
        return LoggingConfig(
            log_filter=self.environ.get("KUBEPLAN_LOG", "info"),
            suppress_probe_logs=self.environ.get("KUBEPLAN_LOG_PROBES", "false").lower() != "true",
        )

    def get_controller_config(self) -> ControllerConfig:
        """Get controller configuration from environment variables."""
        requeue_delay = float(self.environ.get("KUBEPLAN_REQUEUE_SECONDS", "1"))
        if requeue_delay <= 0:
            raise ValueError("KUBEPLAN_REQUEUE_SECONDS must be positive")

        max_workers = int(self.environ.get("KUBEPLAN_MAX_WORKERS", "4"))
        if max_workers < 1:
            raise ValueError("KUBEPLAN_MAX_WORKERS must be at least 1")

        namespaces = self.environ.get("KUBEPLAN_NAMESPACES", "").split(",")

        return ControllerConfig(
            requeue_delay=requeue_delay,
            max_workers=max_workers,
            namespaces=tuple(ns.strip() for ns in namespaces if ns.strip()),
            liveness_endpoint=self.environ.get("KUBEPLAN_LIVENESS") or None,
            in_cluster=_parse_tristate(self.environ.get("KUBEPLAN_IN_CLUSTER", "auto")),
        )
