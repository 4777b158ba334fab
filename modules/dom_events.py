# Element Events
# Minimal element tree with selector matching and capture/bubble click dispatch

import re

from shared.logging import get_logger

logger = get_logger(__name__)

_ATTR_SELECTOR = re.compile(r'^\[\s*([\w-]+)\s*(?:=\s*["\']?([^"\'\]]*)["\']?\s*)?\]$')


class Element:
    """A rendered element: tag, attributes and parent link"""

    def __init__(self, tag="div", attrs=None, parent=None, text=""):
        self.tag = tag
        self.attrs = dict(attrs or {})
        self.parent = parent
        self.text = text

    @property
    def id(self):
        return self.attrs.get("id")

    @property
    def classes(self):
        return set(str(self.attrs.get("class", "")).split())

    def child(self, tag="div", attrs=None, text=""):
        return Element(tag, attrs, parent=self, text=text)

    def matches(self, selector) -> bool:
        """Match a single simple selector; unsupported selectors never match"""
        selector = (selector or "").strip()
        if not selector:
            return False
        match = _ATTR_SELECTOR.match(selector)
        if match:
            name, value = match.group(1), match.group(2)
            if name not in self.attrs:
                return False
            return value is None or str(self.attrs[name]) == value
        if selector.startswith("#"):
            return self.id == selector[1:]
        if selector.startswith("."):
            return selector[1:] in self.classes
        if re.fullmatch(r"[\w-]+", selector):
            return self.tag == selector
        return False

    def closest(self, selector):
        node = self
        while node is not None:
            if node.matches(selector):
                return node
            node = node.parent
        return None

    def path(self):
        """Root-first ancestor chain including self"""
        chain = []
        node = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return list(reversed(chain))

    def __repr__(self):
        return f"<Element {self.tag} {self.attrs}>"


class ClickEvent:
    def __init__(self, target):
        self.target = target
        self.default_prevented = False
        self.propagation_stopped = False

    def prevent_default(self):
        self.default_prevented = True

    def stop_propagation(self):
        self.propagation_stopped = True


class Listener:
    """Registration handle; remove() detaches it even mid-dispatch"""

    def __init__(self, dispatcher, callback, capture):
        self._dispatcher = dispatcher
        self.callback = callback
        self.capture = capture
        self.active = True

    def remove(self):
        if not self.active:
            return
        self.active = False
        self._dispatcher._discard(self)


class EventDispatcher:
    """Document-level click dispatch: capture listeners first, then bubble listeners"""

    def __init__(self):
        self._listeners = []

    def add_listener(self, callback, capture=False) -> Listener:
        listener = Listener(self, callback, capture)
        self._listeners.append(listener)
        return listener

    def _discard(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def listener_count(self):
        return len(self._listeners)

    def dispatch(self, event) -> bool:
        """Run listeners for event; returns True unless the default action was prevented"""
        snapshot = list(self._listeners)
        for phase_capture in (True, False):
            for listener in snapshot:
                if listener.capture is not phase_capture or not listener.active:
                    continue
                try:
                    listener.callback(event)
                except Exception:
                    logger.exception("event_listener_failed")
                if event.propagation_stopped:
                    return not event.default_prevented
        return not event.default_prevented

    def click(self, target) -> bool:
        return self.dispatch(ClickEvent(target))
