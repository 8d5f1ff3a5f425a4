"""Configuration models for flinkop.

Pydantic models for loading and validating YAML client configuration.
"""

from flinkop.core.config.client import ClientConfig
from flinkop.core.config.observability import LogConfig
from flinkop.core.config.retry import RetryPolicyConfig

__all__ = [
    "ClientConfig",
    "LogConfig",
    "RetryPolicyConfig",
]
