"""Versioned response caches for the push worker's offline shell."""

import threading

from workspace_client.host import FetchResponse


class Cache:
    """One named cache mapping request URLs to stored responses."""

    def __init__(self, name: str):
        """Initialize an empty cache."""
        self.name = name
        self._entries: dict[str, FetchResponse] = {}
        self._lock = threading.Lock()

    def match(self, url: str) -> FetchResponse | None:
        """Return a copy of the stored response for `url`, if any."""
        with self._lock:
            response = self._entries.get(url)
        return response.clone() if response is not None else None

    def put(self, url: str, response: FetchResponse) -> None:
        """Store a response, replacing any previous one for the URL."""
        with self._lock:
            self._entries[url] = response

    def keys(self) -> list[str]:
        """URLs currently cached."""
        with self._lock:
            return list(self._entries)


class InMemoryCacheStorage:
    """Process-local cache storage keyed by cache name."""

    def __init__(self) -> None:
        """Initialize without caches."""
        self._caches: dict[str, Cache] = {}
        self._lock = threading.Lock()

    def open(self, name: str) -> Cache:
        """Return the named cache, creating it on first use."""
        with self._lock:
            cache = self._caches.get(name)
            if cache is None:
                cache = self._caches[name] = Cache(name)
            return cache

    def keys(self) -> list[str]:
        """Names of all caches."""
        with self._lock:
            return list(self._caches)

    def delete(self, name: str) -> bool:
        """Remove a cache. Returns whether it existed."""
        with self._lock:
            return self._caches.pop(name, None) is not None

    def match(self, url: str) -> FetchResponse | None:
        """Search every cache for a stored response to `url`."""
        for name in self.keys():
            response = self.open(name).match(url)
            if response is not None:
                return response
        return None
