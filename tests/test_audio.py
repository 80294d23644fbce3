import unittest

from ringtone_resolver.audio import (
    AudioUsage,
    ContentType,
    VolumeShaperConfig,
    default_ringtone_attributes,
)


class TestAudioAttributes(unittest.TestCase):
    def test_default_ringtone_attributes(self) -> None:
        attrs = default_ringtone_attributes(haptic_channels_muted=False)
        self.assertEqual(attrs.usage, AudioUsage.NOTIFICATION_RINGTONE)
        self.assertEqual(attrs.content_type, ContentType.SONIFICATION)
        self.assertFalse(attrs.haptic_channels_muted)
        self.assertTrue(default_ringtone_attributes(True).haptic_channels_muted)


class TestVolumeShaperConfig(unittest.TestCase):
    def test_ramp_runs_from_silence_to_full(self) -> None:
        shaper = VolumeShaperConfig.ramp(1000)
        self.assertEqual(shaper.duration_ms, 1000)
        self.assertEqual(shaper.times, (0.0, 1.0))
        self.assertEqual(shaper.volumes, (0.0, 1.0))

    def test_invalid_curves_are_rejected(self) -> None:
        bad = [
            dict(duration_ms=0, times=(0.0, 1.0), volumes=(0.0, 1.0)),
            dict(duration_ms=10, times=(0.0, 1.0), volumes=(0.0,)),
            dict(duration_ms=10, times=(0.1, 1.0), volumes=(0.0, 1.0)),
            dict(duration_ms=10, times=(0.0, 0.5, 0.5, 1.0), volumes=(0.0, 0.1, 0.2, 1.0)),
            dict(duration_ms=10, times=(0.0, 1.0), volumes=(0.0, 1.5)),
        ]
        for kwargs in bad:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    VolumeShaperConfig(**kwargs)


if __name__ == "__main__":
    unittest.main()
