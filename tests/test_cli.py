import io
import json
import logging
import tempfile
import unittest
import wave
from contextlib import redirect_stdout
from pathlib import Path

from ringtone_resolver.cli import main
from ringtone_resolver.models import file_uri


def _write_wav(path: Path) -> None:
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(8000)
        wav_file.writeframes(b"\x00\x00" * 800)


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        self._handlers = list(root.handlers)
        self._level = root.level
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.ring = self.tmp / "ring.wav"
        self.work = self.tmp / "work.wav"
        self.haptic = self.tmp / "haptic.wav"
        for path in (self.ring, self.work, self.haptic):
            _write_wav(path)
        self.config = self.tmp / "config.yaml"
        self.config.write_text(
            "\n".join(
                [
                    "resolver:",
                    f"  vibration_sound_path: {self.haptic}",
                    "device:",
                    "  media:",
                    f"    content://media/1: {self.ring}",
                    f"    content://media/2: {self.work}",
                    "  users:",
                    "    - id: 0",
                    "      sounds:",
                    "        ringtone: content://media/1",
                    "    - id: 10",
                    "      managed: true",
                    "      parent: 0",
                    "      sounds:",
                    "        ringtone: content://media/2",
                ]
            ),
            encoding="utf-8",
        )

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.handlers[:] = self._handlers
        root.setLevel(self._level)
        self._tmp.cleanup()

    def _run(self, *args: str) -> str:
        out = io.StringIO()
        with redirect_stdout(out):
            main(["--config", str(self.config), *args])
        return out.getvalue()

    def test_resolve_default_ringtone(self) -> None:
        payload = json.loads(self._run("resolve", "--json"))
        self.assertEqual(payload["uri"], "content://media/1")
        self.assertTrue(payload["playable"])
        self.assertEqual(payload["path"], str(self.ring))

    def test_resolve_work_contact(self) -> None:
        payload = json.loads(self._run("resolve", "--caller", "work", "--json"))
        self.assertEqual(payload["uri"], "content://media/2")

    def test_resolve_caller_ringtone_fallback(self) -> None:
        payload = json.loads(
            self._run("resolve", "--ringtone", "content://media/missing", "--caller", "ordinary", "--json")
        )
        self.assertEqual(payload["uri"], "content://media/1")

    def test_haptic(self) -> None:
        payload = json.loads(self._run("haptic", "--json"))
        self.assertEqual(payload["uri"], file_uri(str(self.haptic)))
        self.assertEqual(payload["volume"], 0.0)
        self.assertFalse(payload["haptic_channels_muted"])

    def test_doctor(self) -> None:
        output = self._run("doctor")
        self.assertIn("Package: OK", output)
        self.assertIn("Work profile: OK (user 10)", output)
        self.assertIn("Default ringtone: OK", output)

    def test_malformed_config_exits(self) -> None:
        self.config.write_text("device: [unclosed\n", encoding="utf-8")
        with self.assertRaises(SystemExit) as ctx:
            main(["--config", str(self.config), "doctor"])
        self.assertIn("Invalid configuration", str(ctx.exception.code))

    def test_missing_config_exits(self) -> None:
        with self.assertRaises(SystemExit):
            main(["--config", str(self.tmp / "nope.yaml"), "doctor"])


if __name__ == "__main__":
    unittest.main()
