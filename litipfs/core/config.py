"""Configuration management for lit-ipfs.

Settings are read from INI files the way lit reads its own configuration:
the repository's .lit/config, then the global ~/.litipfsconfig, with
environment variables overriding both.
"""

import os
import configparser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_API_URL = 'http://127.0.0.1:5001'
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class IpfsSettings:
    """How to reach the IPFS node and which key to publish names under."""

    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    key: str = 'self'


class Config:
    """
    Manages lit-ipfs configuration files.

    Priority order (highest to lowest):
    1. Environment variables (LITIPFS_<SECTION>_<KEY>)
    2. Repository config
    3. Global config
    4. Fallback value
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.litipfsconfig'

    def __init__(self, repo_config_path: Optional[Path] = None,
                 global_config_path: Optional[Path] = None):
        self.repo_config_path = repo_config_path
        if global_config_path is not None:
            self.GLOBAL_CONFIG_PATH = global_config_path
        self._global_config = None
        self._repo_config = None

    @staticmethod
    def _load(path: Optional[Path]) -> configparser.ConfigParser:
        config = configparser.ConfigParser()
        if path and path.exists():
            config.read(path)
        return config

    @property
    def global_config(self) -> configparser.ConfigParser:
        if self._global_config is None:
            self._global_config = self._load(self.GLOBAL_CONFIG_PATH)
        return self._global_config

    @property
    def repo_config(self) -> Optional[configparser.ConfigParser]:
        if self._repo_config is None and self.repo_config_path:
            self._repo_config = self._load(self.repo_config_path)
        return self._repo_config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value.

        Args:
            section: Config section (e.g., 'ipfs')
            key: Config key (e.g., 'api')
            fallback: Default value if not found
        """
        env_value = os.environ.get(f"LITIPFS_{section.upper()}_{key.upper()}")
        if env_value is not None:
            return env_value

        if self.repo_config and self.repo_config.has_option(section, key):
            return self.repo_config.get(section, key)

        if self.global_config.has_option(section, key):
            return self.global_config.get(section, key)

        return fallback

    def set(self, section: str, key: str, value: str, global_config: bool = False) -> None:
        """Set a value in the repository config, or the global one."""
        if global_config:
            config = self.global_config
            config_path = self.GLOBAL_CONFIG_PATH
        else:
            if not self.repo_config_path:
                raise ValueError("No repository config path available")
            config = self.repo_config
            config_path = self.repo_config_path

        if not config.has_section(section):
            config.add_section(section)
        config.set(section, key, value)

        with open(config_path, 'w') as f:
            config.write(f)

    def ipfs_settings(self) -> IpfsSettings:
        """
        Collect the [ipfs] section.

        Raises:
            ValueError: If ipfs.timeout is not a number
        """
        timeout = self.get('ipfs', 'timeout')
        try:
            timeout_value = float(timeout) if timeout is not None else DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(f"ipfs.timeout must be a number of seconds, got {timeout!r}")

        return IpfsSettings(
            api_url=self.get('ipfs', 'api', DEFAULT_API_URL),
            timeout=timeout_value,
            key=self.get('ipfs', 'key', 'self'),
        )


def get_config(repo=None) -> Config:
    """Get a Config instance, repository-aware when `repo` is given."""
    if repo:
        return Config(repo.config_file)
    return Config()
