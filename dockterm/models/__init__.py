# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Pydantic models for Dockterm configuration."""

from dockterm.models.config import (
    STATUS_COLORS,
    AttachConfig,
    DocktermConfigModel,
    FooterConfig,
    LoggingConfig,
)

__all__ = [
    "STATUS_COLORS",
    "AttachConfig",
    "DocktermConfigModel",
    "FooterConfig",
    "LoggingConfig",
]
