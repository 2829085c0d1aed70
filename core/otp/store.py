from django.core.cache import caches


class CacheRecordStore:
    """
    Keyed record store on top of Django's cache (Redis in production).

    `add` is an atomic add-if-absent and `delete` reports whether this caller
    removed the key, which is what single-issue / single-use rely on.
    """

    def __init__(self, prefix: str, alias: str = "default"):
        self.prefix = prefix
        self.alias = alias

    @property
    def cache(self):
        return caches[self.alias]

    def key(self, name: str) -> str:
        return f"{self.prefix}:{name}"

    def get(self, name: str):
        return self.cache.get(self.key(name))

    def add(self, name: str, value, ttl_seconds: int) -> bool:
        return bool(self.cache.add(self.key(name), value, timeout=ttl_seconds))

    def set(self, name: str, value, ttl_seconds: int) -> None:
        self.cache.set(self.key(name), value, timeout=ttl_seconds)

    def delete(self, name: str) -> bool:
        return bool(self.cache.delete(self.key(name)))

    def incr(self, name: str, ttl_seconds: int) -> int:
        key = self.key(name)
        self.cache.add(key, 0, timeout=ttl_seconds)
        try:
            return self.cache.incr(key)
        except ValueError:
            # expired between add and incr
            self.cache.add(key, 1, timeout=ttl_seconds)
            return 1
