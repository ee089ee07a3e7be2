"""
Configuration management for the Cloud Files adapter.

Settings come from a YAML file, keyword overrides and, for credentials only,
the environment.
"""

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .endpoints import DEFAULT_SERVICE_NAME
from .identity import UK_IDENTITY_ENDPOINT, US_IDENTITY_ENDPOINT

IDENTITY_ENDPOINTS = {
    "us": US_IDENTITY_ENDPOINT,
    "uk": UK_IDENTITY_ENDPOINT,
}

USERNAME_ENV_VAR = "RACKSPACE_USERNAME"
API_KEY_ENV_VAR = "RACKSPACE_API_KEY"


@dataclass
class CloudFilesConfig:
    """Configuration for CloudFilesAdapter."""

    # Credentials
    username: Optional[str] = None
    api_key: Optional[str] = None

    # Identity service: full URL or one of the aliases "us" / "uk"
    identity_endpoint: str = "us"

    # Endpoint resolution
    service_name: str = DEFAULT_SERVICE_NAME
    region: str = "DFW"

    # Storage
    container: Optional[str] = None

    # Network
    timeout: float = 30

    # Console level for setup_logging()
    log_level: str = "INFO"

    def __post_init__(self):
        self.region = (self.region or "DFW").upper()
        self.log_level = (self.log_level or "INFO").upper()

    @property
    def identity_url(self) -> str:
        """Identity endpoint with aliases expanded."""
        return IDENTITY_ENDPOINTS.get(self.identity_endpoint.lower(), self.identity_endpoint)

    def validate(self) -> List[str]:
        """Return the names of required fields that are not set."""
        missing = []
        if not self.username:
            missing.append("username")
        if not self.api_key:
            missing.append("api_key")
        if not self.container:
            missing.append("container")
        return missing

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    def save(self, path: Union[str, Path]):
        """
        Save configuration to YAML file.

        Args:
            path: Path to save to (should end in .yaml or .yml)
        """
        path = Path(path)
        if path.suffix not in ['.yaml', '.yml']:
            raise ValueError(f"Config file must be .yaml or .yml, got: {path.suffix}")

        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'CloudFilesConfig':
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML config file (.yaml or .yml)

        Returns:
            CloudFilesConfig instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        if path.suffix not in ['.yaml', '.yml']:
            raise ValueError(f"Config file must be .yaml or .yml, got: {path.suffix}")

        with open(path) as f:
            config_dict = yaml.safe_load(f) or {}

        return cls.from_dict(config_dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'CloudFilesConfig':
        """Create from dictionary."""
        return cls(**config_dict)


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    **kwargs
) -> CloudFilesConfig:
    """
    Load configuration with priority: kwargs > config_file > defaults.

    Credentials still missing afterwards are read from RACKSPACE_USERNAME
    and RACKSPACE_API_KEY.

    Args:
        config_file: Optional path to YAML config file
        **kwargs: Override parameters

    Returns:
        CloudFilesConfig instance

    Examples:
        # From file
        config = load_config("cloudfiles.yaml")

        # From file with overrides
        config = load_config("cloudfiles.yaml", container="backups")

        # From parameters only
        config = load_config(username="jdoe", api_key="...", region="ORD")
    """
    if config_file:
        config = CloudFilesConfig.from_file(config_file)
        for key, value in kwargs.items():
            if hasattr(config, key) and value is not None:
                setattr(config, key, value)
    else:
        config = CloudFilesConfig(**{k: v for k, v in kwargs.items() if v is not None})

    if not config.username:
        config.username = os.environ.get(USERNAME_ENV_VAR)
    if not config.api_key:
        config.api_key = os.environ.get(API_KEY_ENV_VAR)

    return config


EXAMPLE_CONFIG_YAML = """# Cloud Files adapter configuration
# Save as: cloudfiles.yaml

# Credentials (or set RACKSPACE_USERNAME / RACKSPACE_API_KEY)
username: jdoe
api_key: 0123456789abcdef

# Identity service: us, uk, or a full URL
identity_endpoint: us

# Object store service name and region in the service catalog
service_name: cloudFiles
region: DFW

# Container every path is stored under
container: assets

# Request timeout (seconds)
timeout: 30

# Console logging level (DEBUG, INFO, WARNING, ERROR)
log_level: INFO

"""
