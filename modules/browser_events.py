# Browser Events Bridge
# Zero-height component that reports host-page pointer and viewport events back to the app

from pathlib import Path

import streamlit.components.v1 as components

from shared.logging import get_logger

logger = get_logger(__name__)

POINTER_LEAVE = "pointer_leave"
VIEWPORT = "viewport"

_FRONTEND_DIR = Path(__file__).parent / "browser_events_frontend"
_component = components.declare_component("demo_browser_events", path=str(_FRONTEND_DIR))


def browser_events(key="demo_browser_events", settle_ms=250, desktop_min_width=768):
    """Latest event the page reported, or None.

    The value sticks between reruns, so callers de-duplicate on its "seq" and "at".
    """
    return _component(key=key, settle_ms=settle_ms, desktop_min_width=desktop_min_width, default=None)


class BrowserEventRouter:
    """Hands each new browser event to the exit funnel or the position tracker"""

    def __init__(self, funnel, tracker):
        self._funnel = funnel
        self._tracker = tracker
        self._last = None

    def dispatch(self, event):
        """True when event is new and changed what the overlays show"""
        if not event:
            return False
        # seq restarts whenever the frame remounts
        stamp = (event.get("seq"), event.get("at"))
        if stamp == self._last:
            return False
        self._last = stamp
        kind = event.get("type")
        if kind == POINTER_LEAVE:
            return self._funnel.on_pointer_leave(event.get("clientY", 1), bool(event.get("desktop")))
        if kind == VIEWPORT:
            self._tracker.on_viewport_change()
            return False
        logger.debug("browser_event_ignored", type=kind)
        return False
