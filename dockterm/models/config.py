# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Pydantic models for host configuration (~/.config/dockterm/config.yml)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Background colours for the status line, as SGR codes
STATUS_COLORS = {
    "black": 40,
    "red": 41,
    "green": 42,
    "yellow": 43,
    "blue": 44,
    "magenta": 45,
    "cyan": 46,
    "white": 47,
}


class AttachConfig(BaseModel):
    """Attach connection settings."""

    socket_path: Optional[str] = None  # None = DOCKTERM_SOCKET / DOCKER_HOST / default
    read_size: int = Field(default=8192, gt=0)
    input_read_size: int = Field(default=128, gt=0)
    max_header_bytes: int = Field(default=16384, gt=4)
    check_running: bool = True


class FooterConfig(BaseModel):
    """Status and input footer appearance."""

    prompt: str = "> "
    status_color: str = "blue"
    detach_hint: str = "Ctrl+C to detach"

    @field_validator("status_color")
    @classmethod
    def _known_color(cls, value: str) -> str:
        value = value.lower()
        if value not in STATUS_COLORS:
            raise ValueError(f"unknown colour {value!r}, expected one of: {', '.join(STATUS_COLORS)}")
        return value

    @property
    def status_sgr(self) -> int:
        return STATUS_COLORS[self.status_color]


class LoggingConfig(BaseModel):
    """Log file settings."""

    level: str = "info"
    file: Optional[str] = None


class DocktermConfigModel(BaseModel):
    """Main host configuration model."""

    version: str = "1.0"
    attach: AttachConfig = Field(default_factory=AttachConfig)
    footer: FooterConfig = Field(default_factory=FooterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="allow")  # Allow extra fields for forward compatibility
