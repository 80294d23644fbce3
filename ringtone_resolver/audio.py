from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class AudioUsage(Enum):
    MEDIA = "media"
    ALARM = "alarm"
    NOTIFICATION = "notification"
    NOTIFICATION_RINGTONE = "notification_ringtone"


class ContentType(Enum):
    MUSIC = "music"
    SPEECH = "speech"
    SONIFICATION = "sonification"


@dataclass(frozen=True, slots=True)
class AudioAttributes:
    usage: AudioUsage
    content_type: ContentType
    haptic_channels_muted: bool = True


def default_ringtone_attributes(haptic_channels_muted: bool) -> AudioAttributes:
    return AudioAttributes(
        usage=AudioUsage.NOTIFICATION_RINGTONE,
        content_type=ContentType.SONIFICATION,
        haptic_channels_muted=haptic_channels_muted,
    )


@dataclass(frozen=True, slots=True)
class VolumeShaperConfig:
    """Volume curve applied by the playback engine while a ringtone starts.

    ``times`` are normalized to the duration and must run from 0.0 to 1.0;
    ``volumes`` are the gain at each point, joined linearly.
    """

    duration_ms: int
    times: Tuple[float, ...]
    volumes: Tuple[float, ...]

    def __post_init__(self) -> None:
        if self.duration_ms <= 0:
            raise ValueError("duration_ms must be positive")
        if not self.times or len(self.times) != len(self.volumes):
            raise ValueError("times and volumes must be non-empty and the same length")
        if self.times[0] != 0.0 or self.times[-1] != 1.0:
            raise ValueError("times must start at 0.0 and end at 1.0")
        for prev, cur in zip(self.times, self.times[1:]):
            if cur <= prev:
                raise ValueError("times must be strictly increasing")
        for volume in self.volumes:
            if not 0.0 <= volume <= 1.0:
                raise ValueError(f"volume {volume} outside [0, 1]")

    @classmethod
    def ramp(cls, duration_ms: int) -> "VolumeShaperConfig":
        return cls(duration_ms=duration_ms, times=(0.0, 1.0), volumes=(0.0, 1.0))
