# runtime/hooks.py
from typing import Protocol


class RoutingHooks(Protocol):
    def freeze_start(self, *, nodes, edges): ...
    def freeze_end(self, *, retained, pruned, center, ms): ...
    def node_skipped(self, *, node_id, lon, lat): ...
    def way_skipped(self, *, name, missing): ...
    def search_start(self, *, start, goal): ...
    def search_end(self, *, start, goal, found, expanded, pushed, stale, length_mi, ms): ...
    def error(self, *, reason: str, **kw): ...


class NoopHooks:
    def freeze_start(self, **_):
        pass

    def freeze_end(self, **_):
        pass

    def node_skipped(self, **_):
        pass

    def way_skipped(self, **_):
        pass

    def search_start(self, **_):
        pass

    def search_end(self, **_):
        pass

    def error(self, **_):
        pass
