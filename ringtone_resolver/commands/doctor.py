from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..app import RingtoneApp
from ..audio import default_ringtone_attributes
from ..models import PackageNotFoundError, RingtoneError, SoundKind, file_uri


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


@dataclass(slots=True)
class DoctorReport:
    ok: bool = True
    checks: list[str] = field(default_factory=list)

    def passed(self, label: str, detail: Optional[str] = None) -> None:
        self.checks.append(CheckLine(label, "OK", detail).render())

    def warn(self, label: str, detail: Optional[str] = None) -> None:
        self.checks.append(CheckLine(label, "WARNING", detail).render())

    def fail(self, label: str, detail: Optional[str] = None) -> None:
        self.ok = False
        self.checks.append(CheckLine(label, "ERROR", detail).render())


def _check_sound(app: RingtoneApp, report: DoctorReport, label: str, uri: str) -> None:
    context = app.device.base_context()
    try:
        ringtone = app.engine.get_ringtone(
            context, uri, None, default_ringtone_attributes(haptic_channels_muted=False)
        )
    except RingtoneError as exc:
        report.fail(label, str(exc))
        return
    report.passed(label, str(ringtone.path))


def run(app: RingtoneApp) -> DoctorReport:
    report = DoctorReport()
    device = app.device
    current = device.current_user_handle()
    report.passed("Users", f"{len(app.settings.device.users)} configured, current {current.identifier}")

    try:
        device.create_scoped_context(app.settings.resolver.package_name, 0, current)
    except PackageNotFoundError as exc:
        report.fail("Package", str(exc))
    else:
        report.passed("Package", app.settings.resolver.package_name)

    managed = [
        profile
        for profile in device.enabled_profiles(current.identifier)
        if profile.user_handle != current and profile.is_managed_profile()
    ]
    if len(managed) > 1:
        report.warn("Work profile", f"{len(managed)} managed profiles; work contacts use the default ringtone")
    elif managed:
        report.passed("Work profile", f"user {managed[0].user_handle.identifier}")
    else:
        report.passed("Work profile", "none")

    vibration = app.settings.resolver.vibration_sound_path
    if vibration:
        _check_sound(app, report, "Vibration sound", file_uri(vibration))
    else:
        report.warn("Vibration sound", "vibration_sound_path not configured")

    if not device.is_user_unlocked(current.identifier):
        report.warn("Default ringtone", "current user is locked; systemwide default in use")
    else:
        uri = device.actual_default_sound_uri(device.base_context(), SoundKind.RINGTONE)
        if uri is None:
            report.warn("Default ringtone", "not set for current user")
        else:
            _check_sound(app, report, "Default ringtone", uri)

    locked = [user.id for user in app.settings.device.users if not user.unlocked]
    if locked:
        cache = app.settings.device.ringtone_cache
        if cache is None or not cache.is_file():
            report.warn("Ringtone cache", f"missing; locked user(s) {locked} will ring without sound")
        else:
            report.passed("Ringtone cache", str(cache))
    return report
