from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import mutagen
from mutagen import MutagenError

from .audio import AudioAttributes, VolumeShaperConfig
from .models import SoundLoadError
from .protocols import MediaLocator, ScopedContext

logger = logging.getLogger(__name__)


class LoadedRingtone:
    """A sound file that has been probed and is ready to hand to a player."""

    def __init__(
        self,
        uri: str,
        path: Path,
        duration_seconds: Optional[float],
        audio_attributes: AudioAttributes,
        volume_shaper_config: Optional[VolumeShaperConfig] = None,
    ) -> None:
        self.uri = uri
        self.path = path
        self.duration_seconds = duration_seconds
        self.audio_attributes = audio_attributes
        self.volume_shaper_config = volume_shaper_config
        self._volume = 1.0

    @property
    def volume(self) -> float:
        return self._volume

    def set_volume(self, level: float) -> None:
        self._volume = min(1.0, max(0.0, float(level)))

    def __repr__(self) -> str:
        return f"LoadedRingtone(uri={self.uri!r}, path={str(self.path)!r}, volume={self._volume})"


class MutagenSoundEngine:
    """Builds ringtones by opening the referenced file with mutagen."""

    def __init__(self, locator: MediaLocator) -> None:
        self.locator = locator

    def get_ringtone(
        self,
        context: ScopedContext,
        uri: str,
        volume_shaper_config: Optional[VolumeShaperConfig],
        audio_attributes: AudioAttributes,
    ) -> LoadedRingtone:
        path = self._resolve_path(context, uri)
        if not path.is_file():
            raise SoundLoadError(f"{uri}: {path} does not exist")
        try:
            audio = mutagen.File(str(path))
        except (MutagenError, OSError) as exc:
            raise SoundLoadError(f"{uri}: cannot read {path}: {exc}") from exc
        if audio is None:
            raise SoundLoadError(f"{uri}: {path} is not a recognised audio file")
        duration = getattr(getattr(audio, "info", None), "length", None)
        logger.debug("Loaded %s from %s (%.2fs)", uri, path, duration or 0.0)
        return LoadedRingtone(
            uri=uri,
            path=path,
            duration_seconds=duration,
            audio_attributes=audio_attributes,
            volume_shaper_config=volume_shaper_config,
        )

    def _resolve_path(self, context: ScopedContext, uri: str) -> Path:
        parsed = urlparse(uri)
        if parsed.scheme == "file":
            local = unquote(parsed.netloc + parsed.path)
            if not local:
                raise SoundLoadError(f"{uri}: empty file path")
            return Path(local)
        path = self.locator.locate(context, uri)
        if path is None:
            raise SoundLoadError(f"{uri}: no media for user {context.user_id}")
        return path
