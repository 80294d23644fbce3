from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .config import DeviceSettings, UserSettings
from .models import (
    ConfigError,
    PackageNotFoundError,
    ProfileInfo,
    SoundKind,
    UserHandle,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeviceContext:
    package_name: str
    user_handle: UserHandle

    @property
    def user_id(self) -> int:
        return self.user_handle.identifier


class ConfiguredDevice:
    """Users, profiles, sound settings and media described by the ``device`` config section.

    Implements the context, settings, session and media-lookup capabilities the
    resolver and the sound engine depend on.
    """

    def __init__(self, settings: DeviceSettings, package_name: str) -> None:
        self.settings = settings
        self.package_name = package_name
        self._users: Dict[int, UserSettings] = {user.id: user for user in settings.users}

    def _user(self, user_id: int) -> UserSettings:
        user = self._users.get(user_id)
        if user is None:
            raise ConfigError(f"unknown user {user_id}")
        return user

    # ContextProvider

    def base_context(self) -> DeviceContext:
        return DeviceContext(self.package_name, self.current_user_handle())

    def create_scoped_context(
        self, package_name: str, flags: int, user_handle: UserHandle
    ) -> DeviceContext:
        user = self._users.get(user_handle.identifier)
        if user is None:
            raise PackageNotFoundError(f"{package_name} (no such user {user_handle.identifier})")
        if user.packages is not None and package_name not in user.packages:
            raise PackageNotFoundError(f"{package_name} not installed for user {user.id}")
        return DeviceContext(package_name, user_handle)

    def enabled_profiles(self, user_id: int) -> List[ProfileInfo]:
        owner = self._user(user_id)
        profiles: List[ProfileInfo] = []
        for user in self.settings.users:
            if user.id != owner.id and user.parent != owner.id:
                continue
            if not user.enabled:
                continue
            profiles.append(
                ProfileInfo(
                    user_handle=UserHandle(user.id),
                    managed=user.managed,
                    enabled=user.enabled,
                    parent_id=user.parent,
                )
            )
        return profiles

    def is_user_unlocked(self, user_id: int) -> bool:
        user = self._users.get(user_id)
        return bool(user and user.unlocked)

    # SettingsStore

    def get_string_for_user(self, context: DeviceContext, key: str, user_id: int) -> str:
        user = self._users.get(user_id)
        if user is None:
            return ""
        return user.sounds.get(key, "")

    def actual_default_sound_uri(self, context: DeviceContext, kind: SoundKind) -> Optional[str]:
        value = self.get_string_for_user(context, kind.setting_key, context.user_id)
        return value or None

    def system_default_uri(self, kind: SoundKind) -> Optional[str]:
        return kind.default_uri

    # UserSession

    def current_user_handle(self) -> UserHandle:
        return UserHandle(self.settings.current_user)

    # MediaLocator

    def locate(self, context: DeviceContext, uri: str) -> Optional[Path]:
        kind = SoundKind.from_default_uri(uri)
        if kind is None:
            return self.settings.media.get(uri)
        if not self.is_user_unlocked(context.user_id):
            # Credential storage is unavailable; only the cached default can be read.
            if kind is SoundKind.RINGTONE:
                return self.settings.ringtone_cache
            return None
        actual = self.actual_default_sound_uri(context, kind)
        if actual is None or SoundKind.from_default_uri(actual) is not None:
            return None
        if actual.startswith("file://"):
            return Path(actual[len("file://") :])
        return self.settings.media.get(actual)
