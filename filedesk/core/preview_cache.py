import os
import time
import logging
import threading
from typing import Callable, Dict, Optional

from filedesk.core.mime import normalize_extension
from filedesk.core.preview_generator import PreviewGenerator
from filedesk.models.previews import CacheEntry, CacheKey, ErrorPreview, PreviewArtifact

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
DEFAULT_SWEEP_INTERVAL_SECONDS = 3600

class PreviewCache:
    """
    In-memory preview cache keyed by (absolute path, mtime_ns).

    A changed file gets a new key, so stale previews are never served;
    superseded entries just age out. A single background sweeper evicts
    entries older than the TTL.
    """

    def __init__(
        self,
        generator: Optional[PreviewGenerator] = None,
        ttl: float = DEFAULT_TTL_SECONDS,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.generator = generator or PreviewGenerator()
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self._clock = clock

        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0, "generations": 0, "evictions": 0}

        self._stop_event = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

    def get_or_generate(self, path: str, declared_type: str) -> PreviewArtifact:
        try:
            st = os.stat(path)
        except OSError as e:
            logger.debug(f"Stat failed for {path}: {e}")
            return ErrorPreview(
                file_type=normalize_extension(declared_type),
                reason=f"Cannot access file: {e.strerror or e}",
            )

        key = CacheKey(os.path.abspath(path), st.st_mtime_ns)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._stats["hits"] += 1
                return entry.artifact
            self._stats["misses"] += 1

        # Generate outside the lock; concurrent misses on one key may both
        # generate and the last write wins.
        logger.debug(f"Preview cache miss: {key.path} @ {key.mtime_ns}")
        artifact = self.generator.generate(path, declared_type)

        with self._lock:
            self._stats["generations"] += 1
            self._entries[key] = CacheEntry(key=key, artifact=artifact, created_at=self._clock())

        return artifact

    def sweep(self, now: Optional[float] = None) -> int:
        """Removes entries older than the TTL. Returns how many were evicted."""
        now = self._clock() if now is None else now
        with self._lock:
            expired = [k for k, e in self._entries.items() if now - e.created_at > self.ttl]
            for k in expired:
                del self._entries[k]
            self._stats["evictions"] += len(expired)

        if expired:
            logger.info(f"Preview cache sweep evicted {len(expired)} entries")
        return len(expired)

    def invalidate(self, path: Optional[str] = None) -> int:
        with self._lock:
            if path is None:
                removed = len(self._entries)
                self._entries.clear()
                return removed
            abs_path = os.path.abspath(path)
            stale = [k for k in self._entries if k.path == abs_path]
            for k in stale:
                del self._entries[k]
            return len(stale)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._stats, entries=len(self._entries))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._entries

    # --- Sweeper lifecycle ---

    @property
    def is_sweeping(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def start(self):
        if self.is_sweeping:
            return
        self._stop_event.clear()
        self._sweeper = threading.Thread(target=self._sweep_loop, name="preview-cache-sweeper", daemon=True)
        self._sweeper.start()
        logger.info(f"Preview cache sweeper started (ttl={self.ttl}s, interval={self.sweep_interval}s)")

    def stop(self):
        if self._sweeper is None:
            return
        self._stop_event.set()
        self._sweeper.join()
        self._sweeper = None
        logger.info("Preview cache sweeper stopped")

    def _sweep_loop(self):
        while not self._stop_event.wait(self.sweep_interval):
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Preview cache sweep failed: {e}", exc_info=True)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
