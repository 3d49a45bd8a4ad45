# io/search_logging.py
import json
import logging
import sys
import threading

from roadnav.runtime.hooks import NoopHooks


def _default_json_logger(name="roadnav", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class SearchLogging(NoopHooks):
    """
    Structured logs for network construction and route queries.

    Freeze and skipped node or way records are always reported. Individual searches are logged
    at DEBUG, one in every `sample_every`, and only when `debug` is on; failed
    searches are reported at WARNING regardless.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or _default_json_logger(level=level)
        self._searches = 0
        self._lock = threading.Lock()  # searches may finish on several threads
        self.skipped_nodes = 0
        self.skipped_ways = 0

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id, **extra}
        self.log.log(getattr(logging, level), msg, extra={"extra": payload})

    # network lifecycle

    def freeze_start(self, *, nodes, edges):
        self._emit("INFO", "freeze_start", nodes=nodes, edges=edges)

    def freeze_end(self, *, retained, pruned, center, ms):
        self._emit("INFO", "freeze_end", retained=retained, pruned=pruned, center=center, ms=ms)

    def node_skipped(self, *, node_id, lon, lat):
        self.skipped_nodes += 1
        self._emit("WARNING", "node_skipped", node=node_id, lon=lon, lat=lat)

    def way_skipped(self, *, name, missing):
        self.skipped_ways += 1
        self._emit("WARNING", "way_skipped", way=name, missing=missing[:10])

    # queries

    @property
    def searches(self) -> int:
        return self._searches

    def search_end(self, *, start, goal, found, expanded, pushed, stale, length_mi, ms):
        with self._lock:
            self._searches += 1
            n = self._searches
        if not found:
            self._emit("WARNING", "no_path", start=start, goal=goal, expanded=expanded, ms=ms)
        elif self.debug and n % self.sample_every == 0:
            self._emit(
                "DEBUG",
                "search_done",
                start=start,
                goal=goal,
                expanded=expanded,
                pushed=pushed,
                stale=stale,
                length_mi=length_mi,
                ms=ms,
            )

    def error(self, *, reason: str, **kw):
        self._emit("ERROR", "routing_error", reason=reason, **kw)
