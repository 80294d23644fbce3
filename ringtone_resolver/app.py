from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import Settings
from .device import ConfiguredDevice
from .engine import MutagenSoundEngine
from .resolver import RingtoneResolver
from .thread_guard import ThreadGuard


@dataclass
class RingtoneApp:
    settings: Settings
    device: ConfiguredDevice
    engine: MutagenSoundEngine
    resolver: RingtoneResolver

    @classmethod
    def create(
        cls, settings: Settings, *, thread_guard: Optional[ThreadGuard] = None
    ) -> "RingtoneApp":
        device = ConfiguredDevice(settings.device, settings.resolver.package_name)
        engine = MutagenSoundEngine(device)
        resolver = RingtoneResolver(
            device,
            device,
            engine,
            device,
            settings=settings.resolver,
            thread_guard=thread_guard,
        )
        return cls(settings=settings, device=device, engine=engine, resolver=resolver)
