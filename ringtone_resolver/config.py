from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .audio import VolumeShaperConfig
from .models import SoundKind

DEFAULT_PACKAGE_NAME = "org.ringtone.resolver"


class ResolverSettings(BaseModel):
    package_name: str = DEFAULT_PACKAGE_NAME
    vibration_sound_path: str = ""
    enforce_thread_check: bool = True

    @field_validator("vibration_sound_path")
    @classmethod
    def _expand_vibration(cls, value: str) -> str:
        if not value:
            return value
        return str(Path(value).expanduser())


class UserSettings(BaseModel):
    id: int
    unlocked: bool = True
    managed: bool = False
    enabled: bool = True
    parent: Optional[int] = None
    packages: Optional[List[str]] = None
    sounds: Dict[str, str] = Field(default_factory=dict)

    @field_validator("sounds")
    @classmethod
    def _known_sound_keys(cls, value: Dict[str, str]) -> Dict[str, str]:
        known = {kind.setting_key for kind in SoundKind}
        unknown = sorted(set(value) - known)
        if unknown:
            raise ValueError(f"unknown sound setting(s): {', '.join(unknown)}")
        return value


class DeviceSettings(BaseModel):
    current_user: int = 0
    ringtone_cache: Optional[Path] = None
    media: Dict[str, Path] = Field(default_factory=dict)
    users: List[UserSettings] = Field(default_factory=lambda: [UserSettings(id=0)])

    @field_validator("ringtone_cache", mode="before")
    @classmethod
    def _expand_cache(cls, value: Optional[str | Path]) -> Optional[Path]:
        if value is None:
            return None
        return Path(value).expanduser()

    @field_validator("media", mode="before")
    @classmethod
    def _expand_media(cls, values: Dict[str, str | Path]) -> Dict[str, Path]:
        return {uri: Path(path).expanduser() for uri, path in (values or {}).items()}

    @model_validator(mode="after")
    def _check_users(self) -> "DeviceSettings":
        ids = [user.id for user in self.users]
        if len(ids) != len(set(ids)):
            raise ValueError("user ids must be unique")
        if self.current_user not in ids:
            raise ValueError(f"current_user {self.current_user} is not a configured user")
        for user in self.users:
            if user.parent is not None and user.parent not in ids:
                raise ValueError(f"user {user.id} names unknown parent {user.parent}")
            if user.parent == user.id:
                raise ValueError(f"user {user.id} cannot be its own parent")
        return self


class PlaybackSettings(BaseModel):
    ramp_ms: Optional[int] = None

    @field_validator("ramp_ms")
    @classmethod
    def _positive_ramp(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("ramp_ms must be positive")
        return value

    def volume_shaper(self) -> Optional[VolumeShaperConfig]:
        if self.ramp_ms is None:
            return None
        return VolumeShaperConfig.ramp(self.ramp_ms)


class Settings(BaseModel):
    resolver: ResolverSettings = ResolverSettings()
    device: DeviceSettings = DeviceSettings()
    playback: PlaybackSettings = PlaybackSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Path:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    raise FileNotFoundError("Could not find config.yaml - pass --config explicitly.")
