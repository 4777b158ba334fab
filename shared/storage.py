# Persistence Port
# Tab-scoped key/value stores backing the demo session; the Streamlit store survives a reload through the URL

from typing import Iterator, Optional, Protocol

import streamlit as st


class KeyValueStore(Protocol):
    """String key/value store living as long as the visitor's browser tab."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> Iterator[str]: ...


class MemoryStore:
    """Dict-backed store for tests and headless use"""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = str(value)

    def remove(self, key):
        self._data.pop(key, None)

    def keys(self):
        return iter(list(self._data))

    def snapshot(self):
        return dict(self._data)

    def __contains__(self, key):
        return key in self._data

    def __len__(self):
        return len(self._data)


class StreamlitSessionStore:
    """Store kept in st.session_state and mirrored into the page URL's query params.

    session_state is lost when the tab reloads; the URL is not, so a fresh
    session hydrates itself from the query params before anything reads the store.
    """

    PREFIX = "store:"
    HYDRATED_KEY = "store:__hydrated__"

    def __init__(self, state=None, params=None):
        self._state = state
        self._params = params

    @property
    def state(self):
        return st.session_state if self._state is None else self._state

    @property
    def params(self):
        return st.query_params if self._params is None else self._params

    def _key(self, key):
        return f"{self.PREFIX}{key}"

    def get(self, key):
        return self.state.get(self._key(key))

    def set(self, key, value):
        self.state[self._key(key)] = str(value)

    def remove(self, key):
        full_key = self._key(key)
        if full_key in self.state:
            del self.state[full_key]

    def keys(self):
        stored = [k for k in self.state.keys() if str(k).startswith(self.PREFIX) and k != self.HYDRATED_KEY]
        return iter([k[len(self.PREFIX):] for k in stored])

    def hydrate(self, owned=None):
        """Copy persisted keys from the URL into a session that has not seen them yet.

        Returns the number of keys restored; later calls in the same session are no-ops.
        """
        if self.state.get(self.HYDRATED_KEY):
            return 0
        self.state[self.HYDRATED_KEY] = True
        restored = 0
        for key in list(self.params.keys()):
            if owned is not None and not owned(key):
                continue
            self.state[self._key(key)] = str(self.params[key])
            restored += 1
        return restored

    def sync_to_url(self, owned=None):
        """Make the URL's query params mirror the store; keys outside owned are left alone"""
        stored = {key: self.get(key) for key in self.keys()}
        for key in list(self.params.keys()):
            if (owned is None or owned(key)) and key not in stored:
                del self.params[key]
        for key, value in stored.items():
            if self.params.get(key) != value:
                self.params[key] = value

    def clear_url(self, owned):
        for key in list(self.params.keys()):
            if owned(key):
                del self.params[key]
