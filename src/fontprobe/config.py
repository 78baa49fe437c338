"""Configuration models for observers and the Pillow measurer.

ObserverConfig

`timeout_ms` (`int`)
: Deadline in milliseconds after which an observer gives up and rejects with
  `ObservationTimeout`.

`poll_interval_ms` (`int`)
: Delay between two polling ticks.

`test_string_length` (`int`)
: Maximum number of code points drawn from a `unicode-range` to build the probe
  string.

MeasurementConfig

`font_size` (`int`)
: Pixel size used when rasterising probe strings. Larger sizes amplify width
  differences between families.

`generic_fonts` (`dict[str, Path]`)
: Font files standing in for the `sans-serif`, `serif` and `monospace` generic
  families. Missing entries fall back to Pillow's built-in font.

ProbeConfig

`observer` (`ObserverConfig`) and `measurement` (`MeasurementConfig`), as read
from a YAML document by `load_config`.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
import yaml


CONFIG_ENV = "FONTPROBE_CONFIG"
GENERIC_FAMILIES = ("sans-serif", "serif", "monospace")


class ObserverConfig(BaseModel):
    """Timing knobs of a load observer."""

    model_config = ConfigDict(extra="forbid")

    timeout_ms: int = Field(default=3000, gt=0)
    poll_interval_ms: int = Field(default=25, gt=0)
    test_string_length: int = Field(default=7, gt=0)


class MeasurementConfig(BaseModel):
    """Settings of the Pillow backed text measurer."""

    model_config = ConfigDict(extra="forbid")

    font_size: int = Field(default=48, gt=0)
    generic_fonts: dict[str, Path] = Field(default_factory=dict)

    @field_validator("generic_fonts")
    @classmethod
    def check_generic_names(cls, value: dict[str, Path]) -> dict[str, Path]:
        """Only the three generic families may be configured."""
        unknown = sorted(set(value) - set(GENERIC_FAMILIES))
        if unknown:
            raise ValueError(f"Unknown generic families: {', '.join(unknown)}")
        return value


class ProbeConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(extra="forbid")

    observer: ObserverConfig = Field(default_factory=ObserverConfig)
    measurement: MeasurementConfig = Field(default_factory=MeasurementConfig)


def load_config(path: str | Path | None = None) -> ProbeConfig:
    """Load a configuration file, honouring ``FONTPROBE_CONFIG`` when no path is given."""
    if path is None:
        env_path = os.environ.get(CONFIG_ENV)
        if not env_path:
            return ProbeConfig()
        path = env_path
    source = Path(path).expanduser()
    payload = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Configuration file {source} must contain a mapping.")
    config = ProbeConfig.model_validate(payload)
    base = source.parent
    # Font paths are relative to the configuration file.
    config.measurement.generic_fonts = {
        name: font if font.is_absolute() else base / font
        for name, font in config.measurement.generic_fonts.items()
    }
    return config


__all__ = [
    "CONFIG_ENV",
    "GENERIC_FAMILIES",
    "MeasurementConfig",
    "ObserverConfig",
    "ProbeConfig",
    "load_config",
]
