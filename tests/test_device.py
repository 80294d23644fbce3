import unittest
from pathlib import Path

from ringtone_resolver.config import DeviceSettings
from ringtone_resolver.device import ConfiguredDevice, DeviceContext
from ringtone_resolver.models import PackageNotFoundError, SoundKind, UserHandle


def _device(**overrides) -> ConfiguredDevice:
    raw = {
        "current_user": 0,
        "ringtone_cache": "/cache/ringtone.ogg",
        "media": {"content://media/12": "/sounds/ring.ogg"},
        "users": [
            {"id": 0, "sounds": {"ringtone": "content://media/12"}},
            {"id": 10, "managed": True, "parent": 0, "packages": ["other.pkg"]},
            {"id": 11, "managed": True, "parent": 0, "enabled": False},
            {"id": 12, "parent": 0, "unlocked": False},
        ],
    }
    raw.update(overrides)
    return ConfiguredDevice(DeviceSettings.model_validate(raw), "pkg")


class TestConfiguredDevice(unittest.TestCase):
    def test_enabled_profiles_include_user_itself(self) -> None:
        device = _device()
        profiles = device.enabled_profiles(0)
        self.assertEqual([p.user_handle.identifier for p in profiles], [0, 10, 12])
        self.assertEqual([p.is_managed_profile() for p in profiles], [False, True, False])

    def test_scoped_context_requires_installed_package(self) -> None:
        device = _device()
        ctx = device.create_scoped_context("pkg", 0, UserHandle(0))
        self.assertEqual(ctx.user_id, 0)
        with self.assertRaises(PackageNotFoundError):
            device.create_scoped_context("pkg", 0, UserHandle(10))
        with self.assertRaises(PackageNotFoundError):
            device.create_scoped_context("pkg", 0, UserHandle(99))

    def test_sound_settings(self) -> None:
        device = _device()
        ctx = device.base_context()
        self.assertEqual(device.get_string_for_user(ctx, "ringtone", 0), "content://media/12")
        self.assertEqual(device.get_string_for_user(ctx, "ringtone", 12), "")
        self.assertEqual(device.actual_default_sound_uri(ctx, SoundKind.RINGTONE), "content://media/12")
        self.assertIsNone(device.actual_default_sound_uri(ctx, SoundKind.ALARM))
        self.assertEqual(
            device.system_default_uri(SoundKind.RINGTONE), "content://settings/system/ringtone"
        )

    def test_locate_media_and_default_alias(self) -> None:
        device = _device()
        ctx = device.base_context()
        self.assertEqual(device.locate(ctx, "content://media/12"), Path("/sounds/ring.ogg"))
        self.assertEqual(device.locate(ctx, SoundKind.RINGTONE.default_uri), Path("/sounds/ring.ogg"))
        self.assertIsNone(device.locate(ctx, "content://media/unknown"))

    def test_locked_user_reads_ringtone_cache(self) -> None:
        device = _device()
        locked = DeviceContext("pkg", UserHandle(12))
        self.assertFalse(device.is_user_unlocked(12))
        self.assertEqual(device.locate(locked, SoundKind.RINGTONE.default_uri), Path("/cache/ringtone.ogg"))
        self.assertIsNone(device.locate(locked, SoundKind.ALARM.default_uri))

    def test_current_user(self) -> None:
        self.assertEqual(_device().current_user_handle(), UserHandle(0))


if __name__ == "__main__":
    unittest.main()
