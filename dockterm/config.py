# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Host configuration for Dockterm."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from dockterm.models.config import DocktermConfigModel
from dockterm.paths import HostPaths
from dockterm.utils.exceptions import ConfigLoadError
from dockterm.utils.logging import get_logger

logger = get_logger(__name__)


class HostConfig:
    """Loads ~/.config/dockterm/config.yml into a validated model."""

    SUPPORTED_VERSION = "1.0"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or HostPaths.config_file()
        self.model = self._load()

    def exists(self) -> bool:
        return self.config_path.exists()

    def _load(self) -> DocktermConfigModel:
        if not self.exists():
            logger.debug(f"Config file not found: {self.config_path}, using defaults")
            return DocktermConfigModel()

        try:
            with open(self.config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Invalid YAML in {self.config_path}: {e}") from e
        except OSError as e:
            raise ConfigLoadError(f"Failed to load {self.config_path}: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigLoadError(f"{self.config_path} must contain a mapping")

        try:
            model = DocktermConfigModel.model_validate(raw_config)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ConfigLoadError(f"Invalid config in {self.config_path}: {problems}") from e

        if model.version != self.SUPPORTED_VERSION:
            logger.warning(
                f"Unsupported config version {model.version}, expected {self.SUPPORTED_VERSION}"
            )

        logger.debug(f"Loaded config from {self.config_path}")
        return model

    def socket_path(self, override: Optional[str] = None) -> Path:
        """Engine socket, with a CLI override taking precedence over everything."""
        if override:
            return Path(override)
        return HostPaths.docker_socket(self.model.attach.socket_path)


_config: Optional[HostConfig] = None


def get_config() -> HostConfig:
    """Get the process-wide host config, loading it on first use."""
    global _config
    if _config is None:
        _config = HostConfig()
    return _config
