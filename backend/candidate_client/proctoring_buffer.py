# backend/candidate_client/proctoring_buffer.py
"""
Client-side proctoring signal batching.

Events are queued and shipped in one POST shortly after the first one
arrives; later events within the window ride along on the same flush.
Delivery is best-effort and never interrupts the candidate.
"""
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

import httpx

from candidate_client.api_client import ClientError

logger = logging.getLogger(__name__)

FLUSH_DELAY_SECONDS = 1.2
DEVTOOLS_GAP_PX = 180
HEARTBEAT_INTERVAL_SECONDS = 15

BLOCKED_SHORTCUT_KEYS = frozenset("uspij")


def is_blocked_shortcut(key: str, ctrl: bool = False, meta: bool = False) -> bool:
    if key == "F12":
        return True
    return (ctrl or meta) and key.lower() in BLOCKED_SHORTCUT_KEYS


def devtools_gap(outer_width: int, inner_width: int, outer_height: int, inner_height: int) -> Optional[Dict[str, int]]:
    """Window chrome gap details when it looks like docked devtools, else None."""
    width_gap = abs(outer_width - inner_width)
    height_gap = abs(outer_height - inner_height)
    if width_gap > DEVTOOLS_GAP_PX or height_gap > DEVTOOLS_GAP_PX:
        return {"widthGap": width_gap, "heightGap": height_gap}
    return None


class ProctoringEventBuffer:
    def __init__(
        self,
        send: Callable[[List[Dict[str, Any]]], Any],
        delay: float = FLUSH_DELAY_SECONDS,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self._send = send
        self._delay = delay
        self._timer_factory = timer_factory
        self._pending: List[Dict[str, Any]] = []
        self._timer = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._pending)

    @property
    def flush_scheduled(self) -> bool:
        return self._timer is not None

    def log(self, event_type: str, details: Optional[Dict[str, Any]] = None) -> None:
        event: Dict[str, Any] = {"type": event_type}
        if details:
            event["details"] = details
        with self._lock:
            self._pending.append(event)
            if self._timer is not None:
                return
            self._timer = self._timer_factory(self._delay, self.flush)
        self._timer.start()

    def flush(self) -> int:
        with self._lock:
            self._timer = None
            events, self._pending = self._pending, []
        if not events:
            return 0
        try:
            self._send(events)
        except (ClientError, httpx.HTTPError, ValueError) as e:
            logger.debug("proctoring flush dropped %d event(s): %s", len(events), e)
            return 0
        return len(events)

    def close(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        self.flush()

    # ---- browser signal helpers ----
    def key_down(self, key: str, ctrl: bool = False, meta: bool = False, shift: bool = False) -> bool:
        if not is_blocked_shortcut(key, ctrl, meta):
            return False
        self.log("blocked_shortcut", {"key": key, "ctrl": ctrl, "meta": meta, "shift": shift})
        return True

    def window_check(self, outer_width: int, inner_width: int, outer_height: int, inner_height: int) -> None:
        """Periodic check (every HEARTBEAT_INTERVAL_SECONDS): devtools suspicion, then a heartbeat."""
        gap = devtools_gap(outer_width, inner_width, outer_height, inner_height)
        if gap is not None:
            self.log("suspected_devtools", gap)
        self.log("heartbeat")
