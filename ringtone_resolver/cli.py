from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import yaml
from pydantic import ValidationError

from .app import RingtoneApp
from .commands import doctor as cmd_doctor
from .commands import resolve as cmd_resolve
from .config import Settings, find_config

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Incoming-call ringtone resolution")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    resolve_parser = subparsers.add_parser(
        "resolve", help="Resolve the ringtone for a simulated incoming call"
    )
    resolve_parser.add_argument(
        "--ringtone", default=None, help="Ringtone URI specified by the caller's contact"
    )
    resolve_parser.add_argument(
        "--caller",
        choices=sorted(cmd_resolve.CALLER_CHOICES),
        default=None,
        help="Caller classification (omit when no caller info is known)",
    )
    resolve_parser.add_argument(
        "--user", type=int, default=None, help="User id the call is associated with"
    )
    resolve_parser.add_argument(
        "--haptic-muted",
        action="store_true",
        help="Mute the haptic channels of the ringtone",
    )
    resolve_parser.add_argument(
        "--json", action="store_true", help="Emit machine-readable JSON to stdout"
    )
    haptic_parser = subparsers.add_parser(
        "haptic", help="Resolve the silent ringtone used for vibrate-only rings"
    )
    haptic_parser.add_argument(
        "--json", action="store_true", help="Emit machine-readable JSON to stdout"
    )
    subparsers.add_parser("doctor", help="Check the configured device and sounds")
    return parser


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)

    logging.getLogger("mutagen").setLevel(logging.WARNING)
    return warn_buffer


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    warn_buffer = configure_logging(args.log_level)
    try:
        settings = Settings.load(find_config(args.config))
    except FileNotFoundError as exc:
        raise SystemExit(str(exc)) from exc
    except (ValidationError, yaml.YAMLError) as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    app = RingtoneApp.create(settings)
    try:
        match args.command:
            case "resolve":
                print(
                    cmd_resolve.run(
                        app,
                        ringtone=args.ringtone,
                        caller=args.caller,
                        user_id=args.user,
                        haptic_muted=args.haptic_muted,
                        json_output=args.json,
                    )
                )
            case "haptic":
                print(cmd_resolve.run_haptic(app, json_output=args.json))
            case "doctor":
                report = cmd_doctor.run(app)
                for line in report.checks:
                    print(line)
                if not report.ok:
                    raise SystemExit(1)
            case _:
                parser.error("Unknown command")
    finally:
        if warn_buffer.records and not getattr(args, "json", False):
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")


if __name__ == "__main__":
    main()
