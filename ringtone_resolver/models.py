from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Optional
from urllib.parse import quote

if TYPE_CHECKING:
    from .protocols import Ringtone

SETTINGS_SYSTEM_PREFIX = "content://settings/system/"


@dataclass(frozen=True, slots=True)
class UserHandle:
    identifier: int

    def __str__(self) -> str:
        return f"UserHandle{{{self.identifier}}}"


class CallerClassification(Enum):
    ORDINARY = "ordinary"
    MANAGED_PROFILE = "work"
    UNKNOWN = "unknown"


class SoundKind(Enum):
    RINGTONE = "ringtone"
    NOTIFICATION = "notification_sound"
    ALARM = "alarm_alert"

    @property
    def setting_key(self) -> str:
        return self.value

    @property
    def default_uri(self) -> str:
        """Systemwide alias that always points at the current default of this kind."""
        return SETTINGS_SYSTEM_PREFIX + self.value

    @classmethod
    def from_default_uri(cls, uri: str) -> Optional["SoundKind"]:
        if not uri.startswith(SETTINGS_SYSTEM_PREFIX):
            return None
        key = uri[len(SETTINGS_SYSTEM_PREFIX) :]
        for kind in cls:
            if kind.value == key:
                return kind
        return None


@dataclass(frozen=True, slots=True)
class CallerInfo:
    user_type: CallerClassification = CallerClassification.ORDINARY
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class IncomingCall:
    ringtone: Optional[str] = None
    caller_info: Optional[CallerInfo] = None
    associated_user: Optional[UserHandle] = None

    @property
    def caller_classification(self) -> CallerClassification:
        if self.caller_info is None:
            return CallerClassification.UNKNOWN
        return self.caller_info.user_type


@dataclass(frozen=True, slots=True)
class ProfileInfo:
    user_handle: UserHandle
    managed: bool = False
    enabled: bool = True
    parent_id: Optional[int] = None

    def is_managed_profile(self) -> bool:
        return self.managed


@dataclass(frozen=True, slots=True)
class RingtoneSelection:
    """A resolved sound reference and, when construction worked, its playable handle."""

    uri: str
    ringtone: Optional["Ringtone"] = None

    def __post_init__(self) -> None:
        if not self.uri:
            raise ValueError("RingtoneSelection requires a sound uri")

    def __iter__(self) -> Iterator[object]:
        yield self.uri
        yield self.ringtone

    @property
    def playable(self) -> bool:
        return self.ringtone is not None


class RingtoneError(Exception):
    """Base class for errors raised by the resolver and its collaborators."""


class WrongThreadError(RingtoneError):
    """Raised when blocking ringtone work is attempted on the dispatch thread."""


class PackageNotFoundError(RingtoneError):
    """Raised when a context cannot be created for a package/user pair."""


class SoundLoadError(RingtoneError):
    """Raised when a sound reference cannot be turned into a playable handle."""


class ConfigError(RingtoneError):
    """Raised when the device description is inconsistent."""


def file_uri(path: str) -> str:
    """``file://`` reference for a local path, quoted so ``#`` and ``?`` survive parsing."""
    return "file://" + quote(path)
