from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

from ..app import RingtoneApp
from ..models import (
    CallerClassification,
    CallerInfo,
    IncomingCall,
    RingtoneSelection,
    UserHandle,
)

T = TypeVar("T")

CALLER_CHOICES = {
    "ordinary": CallerClassification.ORDINARY,
    "work": CallerClassification.MANAGED_PROFILE,
    "unknown": CallerClassification.UNKNOWN,
}


def off_dispatch_thread(func: Callable[[], T]) -> T:
    """Run blocking ringtone work on a worker thread and wait for it."""
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="ringtone") as pool:
        return pool.submit(func).result()


def build_call(
    ringtone: Optional[str], caller: Optional[str], user_id: Optional[int]
) -> IncomingCall:
    caller_info = None
    if caller is not None:
        caller_info = CallerInfo(user_type=CALLER_CHOICES[caller])
    associated = UserHandle(user_id) if user_id is not None else None
    return IncomingCall(ringtone=ringtone, caller_info=caller_info, associated_user=associated)


def describe(selection: Optional[RingtoneSelection]) -> dict:
    if selection is None:
        return {"uri": None, "playable": False}
    payload: dict = {"uri": selection.uri, "playable": selection.playable}
    ringtone = selection.ringtone
    if ringtone is not None:
        payload["path"] = str(getattr(ringtone, "path", "")) or None
        payload["duration_seconds"] = getattr(ringtone, "duration_seconds", None)
        payload["volume"] = ringtone.volume
        payload["haptic_channels_muted"] = ringtone.audio_attributes.haptic_channels_muted
    return payload


def render(payload: dict, *, json_output: bool) -> str:
    if json_output:
        return json.dumps(payload, indent=2, sort_keys=True)
    if payload["uri"] is None:
        return "No ringtone available"
    lines = [f"Ringtone: {payload['uri']}"]
    if not payload["playable"]:
        lines.append("  (not playable)")
        return "\n".join(lines)
    lines.append(f"  file: {payload.get('path')}")
    duration = payload.get("duration_seconds")
    if duration is not None:
        lines.append(f"  duration: {duration:.2f}s")
    lines.append(f"  volume: {payload['volume']:.2f}")
    lines.append(f"  haptics muted: {payload['haptic_channels_muted']}")
    return "\n".join(lines)


def run(
    app: RingtoneApp,
    *,
    ringtone: Optional[str] = None,
    caller: Optional[str] = None,
    user_id: Optional[int] = None,
    haptic_muted: bool = False,
    json_output: bool = False,
) -> str:
    call = build_call(ringtone, caller, user_id)
    if call.associated_user is None:
        call = IncomingCall(
            ringtone=call.ringtone,
            caller_info=call.caller_info,
            associated_user=app.device.current_user_handle(),
        )
    shaper = app.settings.playback.volume_shaper()
    selection = off_dispatch_thread(
        lambda: app.resolver.get_ringtone(call, shaper, haptic_muted)
    )
    return render(describe(selection), json_output=json_output)


def run_haptic(app: RingtoneApp, *, json_output: bool = False) -> str:
    selection = off_dispatch_thread(app.resolver.get_haptic_only_ringtone)
    return render(describe(selection), json_output=json_output)
