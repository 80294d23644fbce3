from __future__ import annotations

import logging
from typing import Optional

from .audio import AudioAttributes, VolumeShaperConfig, default_ringtone_attributes
from .config import ResolverSettings
from .models import (
    CallerClassification,
    IncomingCall,
    PackageNotFoundError,
    RingtoneSelection,
    SoundKind,
    UserHandle,
    file_uri,
)
from .protocols import (
    ContextProvider,
    Ringtone,
    ScopedContext,
    SettingsStore,
    SoundEngine,
    UserSession,
)
from .thread_guard import ThreadGuard

logger = logging.getLogger(__name__)


class RingtoneResolver:
    """Picks the sound to play for an incoming call.

    The caller-specified ringtone wins when it can be loaded. Otherwise the
    default ringtone of the resolved user/profile is used, or the process's own
    default when that user has none configured. Locked users only ever get the
    systemwide default alias. Nothing is cached between calls.
    """

    def __init__(
        self,
        contexts: ContextProvider,
        settings_store: SettingsStore,
        engine: SoundEngine,
        session: UserSession,
        *,
        settings: Optional[ResolverSettings] = None,
        thread_guard: Optional[ThreadGuard] = None,
    ) -> None:
        self.contexts = contexts
        self.settings_store = settings_store
        self.engine = engine
        self.session = session
        self.settings = settings or ResolverSettings()
        self.thread_guard = thread_guard or ThreadGuard(
            enabled=self.settings.enforce_thread_check
        )

    def get_ringtone(
        self,
        incoming_call: IncomingCall,
        volume_shaper_config: Optional[VolumeShaperConfig],
        haptic_channels_muted: bool,
    ) -> Optional[RingtoneSelection]:
        # Building a ringtone does blocking I/O and can deadlock the dispatch loop.
        self.thread_guard.check_not_on_dispatch_thread("get_ringtone")

        audio_attrs = default_ringtone_attributes(haptic_channels_muted)

        if self._is_work_contact(incoming_call):
            user_context = self.work_profile_context(self.session.current_user_handle())
        else:
            user_context = self.context_for_user(incoming_call.associated_user)

        ringtone_uri = incoming_call.ringtone
        ringtone: Optional[Ringtone] = None

        if ringtone_uri and user_context is not None:
            ringtone = self._build(
                user_context, ringtone_uri, volume_shaper_config, audio_attrs
            )

        if ringtone is not None:
            return RingtoneSelection(ringtone_uri, ringtone)

        if self._has_default_ringtone_for_user(user_context):
            context_to_use = user_context
        else:
            context_to_use = self.contexts.base_context()

        default_uri = self._default_ringtone_uri(context_to_use)
        if not default_uri:
            return None

        ringtone = self._build(context_to_use, default_uri, volume_shaper_config, audio_attrs)
        return RingtoneSelection(default_uri, ringtone)

    def get_haptic_only_ringtone(self) -> RingtoneSelection:
        """Ringtone for calls whose ringer is silent but which should still vibrate."""
        self.thread_guard.check_not_on_dispatch_thread("get_haptic_only_ringtone")
        ringtone_uri = file_uri(self.settings.vibration_sound_path)
        audio_attrs = default_ringtone_attributes(haptic_channels_muted=False)
        ringtone = self._build(self.contexts.base_context(), ringtone_uri, None, audio_attrs)
        if ringtone is not None:
            ringtone.set_volume(0.0)
        return RingtoneSelection(ringtone_uri, ringtone)

    def work_profile_context(self, user_handle: UserHandle) -> Optional[ScopedContext]:
        # The enabled profiles of a user include the user itself.
        work_profile: Optional[UserHandle] = None
        managed_profile_count = 0
        try:
            profiles = list(self.contexts.enabled_profiles(user_handle.identifier))
        except Exception:
            logger.exception("Cannot list profiles of %s", user_handle)
            return None
        for profile in profiles:
            if profile.user_handle != user_handle and profile.is_managed_profile():
                managed_profile_count += 1
                work_profile = profile.user_handle
        if managed_profile_count == 1:
            return self.context_for_user(work_profile)
        if managed_profile_count > 1:
            logger.debug(
                "%d managed profiles for %s; using the default context",
                managed_profile_count,
                user_handle,
            )
        return None

    def context_for_user(self, user_handle: Optional[UserHandle]) -> Optional[ScopedContext]:
        if user_handle is None:
            return None
        try:
            return self.contexts.create_scoped_context(
                self.settings.package_name, 0, user_handle
            )
        except PackageNotFoundError as exc:
            logger.warning("Package name not found: %s", exc)
        return None

    def _build(
        self,
        context: ScopedContext,
        uri: str,
        volume_shaper_config: Optional[VolumeShaperConfig],
        audio_attrs: AudioAttributes,
    ) -> Optional[Ringtone]:
        try:
            return self.engine.get_ringtone(context, uri, volume_shaper_config, audio_attrs)
        except Exception:
            logger.exception("get_ringtone: exception while getting ringtone %s", uri)
        return None

    def _default_ringtone_uri(self, context: ScopedContext) -> Optional[str]:
        try:
            if self.contexts.is_user_unlocked(context.user_id):
                default_uri = self.settings_store.actual_default_sound_uri(
                    context, SoundKind.RINGTONE
                )
                if default_uri is None:
                    logger.info("get_ringtone: default ringtone for %s is unset", context.user_handle)
            else:
                default_uri = self.settings_store.system_default_uri(SoundKind.RINGTONE)
                if default_uri is None:
                    logger.info("get_ringtone: systemwide default ringtone is unset")
        except Exception:
            logger.exception("get_ringtone: cannot read default ringtone for %s", context.user_handle)
            return None
        return default_uri

    def _has_default_ringtone_for_user(self, user_context: Optional[ScopedContext]) -> bool:
        if user_context is None:
            return False
        try:
            value = self.settings_store.get_string_for_user(
                user_context, SoundKind.RINGTONE.setting_key, user_context.user_id
            )
        except Exception:
            logger.exception("Cannot read ringtone setting of %s", user_context.user_handle)
            return False
        return bool(value)

    @staticmethod
    def _is_work_contact(incoming_call: IncomingCall) -> bool:
        return (
            incoming_call.caller_info is not None
            and incoming_call.caller_classification is CallerClassification.MANAGED_PROFILE
        )
