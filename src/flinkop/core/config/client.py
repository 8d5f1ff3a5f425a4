"""Top-level client configuration and YAML loading."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from flinkop.core.constants import DEFAULT_RETRIES

from .observability import LogConfig
from .retry import RetryPolicyConfig


class ClientConfig(BaseModel):
    """Configuration for a control-plane client process.

    Example YAML:
        default_max_retries: 20
        retry:
          base_backoff: 0.1
          max_backoff: 10
          max_error_wait: 300
        logging:
          level: DEBUG
          format: json
    """

    default_max_retries: int = Field(
        default=DEFAULT_RETRIES,
        ge=0,
        description="Retry budget attached to retryable failures",
    )
    retry: RetryPolicyConfig = Field(default_factory=RetryPolicyConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> ClientConfig:
        """Load client configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> ClientConfig:
        """Load client configuration from a YAML string."""
        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data or {})
