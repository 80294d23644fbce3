from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, Sequence

from .audio import AudioAttributes, VolumeShaperConfig
from .models import ProfileInfo, SoundKind, UserHandle


class ScopedContext(Protocol):
    package_name: str
    user_handle: UserHandle

    @property
    def user_id(self) -> int: ...


class ContextProvider(Protocol):
    def base_context(self) -> ScopedContext: ...

    def create_scoped_context(
        self, package_name: str, flags: int, user_handle: UserHandle
    ) -> ScopedContext: ...

    def enabled_profiles(self, user_id: int) -> Sequence[ProfileInfo]: ...

    def is_user_unlocked(self, user_id: int) -> bool: ...


class SettingsStore(Protocol):
    def get_string_for_user(self, context: ScopedContext, key: str, user_id: int) -> str: ...

    def actual_default_sound_uri(
        self, context: ScopedContext, kind: SoundKind
    ) -> Optional[str]: ...

    def system_default_uri(self, kind: SoundKind) -> Optional[str]: ...


class Ringtone(Protocol):
    uri: str
    audio_attributes: AudioAttributes

    @property
    def volume(self) -> float: ...

    def set_volume(self, level: float) -> None: ...


class SoundEngine(Protocol):
    def get_ringtone(
        self,
        context: ScopedContext,
        uri: str,
        volume_shaper_config: Optional[VolumeShaperConfig],
        audio_attributes: AudioAttributes,
    ) -> Optional[Ringtone]: ...


class UserSession(Protocol):
    def current_user_handle(self) -> UserHandle: ...


class MediaLocator(Protocol):
    def locate(self, context: ScopedContext, uri: str) -> Optional[Path]: ...
