"""Configuration models describing medialens settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MediaLensBaseModel(BaseModel):
    """Shared configuration for medialens settings models."""

    model_config = ConfigDict(extra="forbid")


class ScanSettings(MediaLensBaseModel):
    """Options governing directory scans.

    Attributes:
        follow_symlinks: Whether symbolic links to directories are traversed.
    """

    follow_symlinks: bool = False


class GroupingSettings(MediaLensBaseModel):
    """Folder-group detection policy for this installation.

    Attributes:
        policy: Token extraction rule; one per deployment.
    """

    policy: Literal["numeric_prefix", "batch_code"] = "numeric_prefix"


class PreviewSettings(MediaLensBaseModel):
    """Image preview conversion options.

    Attributes:
        jpeg_quality: JPEG quality used when transcoding previews.
        background: Colour used to flatten transparent images.
    """

    jpeg_quality: int = Field(default=90, ge=1, le=100)
    background: str = "white"


class LoggingSettings(MediaLensBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class CLIOptions(MediaLensBaseModel):
    """CLI presentation defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class MediaLensConfig(MediaLensBaseModel):
    """Top-level configuration for medialens."""

    scan: ScanSettings = Field(default_factory=ScanSettings)
    grouping: GroupingSettings = Field(default_factory=GroupingSettings)
    preview: PreviewSettings = Field(default_factory=PreviewSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "MediaLensBaseModel",
    "ScanSettings",
    "GroupingSettings",
    "PreviewSettings",
    "LoggingSettings",
    "CLIOptions",
    "MediaLensConfig",
]
