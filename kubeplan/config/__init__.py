from .provider import ConfigProvider, ControllerConfig, EnvConfigProvider, LoggingConfig

__all__ = ["ConfigProvider", "ControllerConfig", "EnvConfigProvider", "LoggingConfig"]
