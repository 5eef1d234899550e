"""Formula validation through texvccheck, with a bounded LRU cache in front.

texvccheck is invoked as ``texvccheck <formula>`` and prints a single status
character followed by a payload:

    +  valid, payload is the normalized formula
    S  syntax error
    E  lexing error
    F  unknown function, payload is the function name
    -  any other error

Running the executable costs a process spawn per formula, so
``CachedTexChecker`` memoizes outcomes keyed on the formula text. The cache is
shared by all request threads.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
import logging
import subprocess
import threading

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 100_000

_STATUS_CODES = {
    "+": "ok",
    "S": "syntax_error",
    "E": "lexing_error",
    "F": "unknown_function",
    "-": "unknown_error",
}


class TexCheckerError(Exception):
    """The checker executable could not produce an outcome."""


@dataclass(frozen=True)
class TexResult:
    """Outcome of checking one formula."""
    status: str
    normalized: str | None = None
    detail: str = ""

    @property
    def is_valid(self) -> bool:
        return self.status == "ok"

    def describe(self) -> str:
        """Human readable diagnostic."""
        if self.status == "ok":
            return "valid formula"
        if self.status == "unknown_function":
            return f"unknown function {self.detail!r}"
        label = self.status.replace("_", " ")
        return f"{label}: {self.detail}" if self.detail else label


def parse_checker_output(output: str) -> TexResult:
    """
    Interpret texvccheck's stdout.

    Raises:
        TexCheckerError: Output is empty.
    """
    output = output.rstrip("\r\n")
    if not output:
        raise TexCheckerError("formula checker produced no output")

    status = _STATUS_CODES.get(output[0], "unknown_error")
    payload = output[1:]

    if status == "ok":
        return TexResult(status=status, normalized=payload)
    return TexResult(status=status, detail=payload)


class TexChecker:
    """Runs the texvccheck executable once per formula."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def check(self, formula: str) -> TexResult:
        """
        Check a single formula.

        Raises:
            TexCheckerError: The executable is missing, cannot be started
                or produced no usable output.
        """
        try:
            proc = subprocess.run(
                [str(self.path), formula],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise TexCheckerError(f"could not run {self.path}: {e}") from e

        if not proc.stdout.strip():
            stderr = proc.stderr.strip()
            raise TexCheckerError(
                f"{self.path} exited with status {proc.returncode}"
                + (f": {stderr}" if stderr else "")
            )

        return parse_checker_output(proc.stdout)


@dataclass
class _Pending:
    """Serializes checker calls for a single formula."""
    lock: threading.Lock = field(default_factory=threading.Lock)
    waiters: int = 0


class CachedTexChecker:
    """
    LRU cache for formula check outcomes.

    All cache state (lookup, insert, evict) is guarded by one lock. Misses
    call the wrapped checker outside that lock, but at most one call per
    formula is in flight: concurrent requests for the same formula wait for
    the first one and then read its cached outcome.

    Checker failures are not cached, so a later request retries.

    Example:
        >>> cache = CachedTexChecker(TexChecker(Path("/usr/bin/texvccheck")))
        >>> cache.check("x^2").is_valid
        True
        >>> cache.check("x^2").is_valid  # Cache hit
        True
    """

    def __init__(self, checker, capacity: int = DEFAULT_CACHE_SIZE):
        """
        Args:
            checker: Object with a ``check(formula) -> TexResult`` method.
            capacity: Maximum number of cached outcomes.
        """
        if capacity < 1:
            raise ValueError(f"cache capacity must be positive, got {capacity}")

        self._checker = checker
        self._capacity = capacity
        self._entries: OrderedDict[str, TexResult] = OrderedDict()
        self._pending: dict[str, _Pending] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def check(self, formula: str) -> TexResult:
        """Return the cached outcome for ``formula``, running the checker on a miss."""
        result = self._lookup(formula)
        if result is not None:
            return result

        with self._lock:
            pending = self._pending.get(formula)
            if pending is None:
                pending = self._pending[formula] = _Pending()
            pending.waiters += 1

        try:
            with pending.lock:
                # Another thread may have filled the entry while we waited
                result = self._lookup(formula)
                if result is None:
                    with self._lock:
                        self._misses += 1
                    result = self._checker.check(formula)
                    self._store(formula, result)
                return result
        finally:
            with self._lock:
                pending.waiters -= 1
                if pending.waiters == 0:
                    del self._pending[formula]

    def _lookup(self, formula: str) -> TexResult | None:
        with self._lock:
            result = self._entries.get(formula)
            if result is not None:
                self._entries.move_to_end(formula)
                self._hits += 1
            return result

    def _store(self, formula: str, result: TexResult) -> None:
        with self._lock:
            if formula in self._entries:
                self._entries.move_to_end(formula)
            elif len(self._entries) >= self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Cache EVICT: {evicted[:40]!r}")
            self._entries[formula] = result

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, formula: str) -> bool:
        # Membership test does not refresh recency
        with self._lock:
            return formula in self._entries

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def clear(self) -> int:
        """
        Drop all cached outcomes.

        Returns:
            Number of entries that were cached
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        if count > 0:
            logger.info(f"Cleared {count} cached formula outcome(s)")
        return count
