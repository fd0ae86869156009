"""Host platform description: core count, cache line size, SIMD flags."""

from __future__ import annotations

import os
import platform as _stdlib_platform
from dataclasses import dataclass, field
from enum import IntFlag

DEFAULT_CACHE_LINE_SIZE = 64
DEFAULT_CORE_COUNT = 1


class SimdFlag(IntFlag):
    """SIMD instruction sets the kernels were built to use."""

    AVX2 = 1 << 0
    AVX512 = 1 << 1
    NEON = 1 << 2
    SVE = 1 << 3


_current: Platform | None = None
_saved_affinity: set[int] | None = None


@dataclass(frozen=True)
class Platform:
    """An initialised host platform."""

    name: str
    cache_line_size: int = DEFAULT_CACHE_LINE_SIZE
    core_count: int = DEFAULT_CORE_COUNT
    simd_flags: SimdFlag = field(default=SimdFlag(0))

    def pin_thread(self, cpu_id: int) -> None:
        """Restrict the calling thread to ``cpu_id`` where the OS allows it.

        Raises ValueError when ``cpu_id`` is not a core of this platform.
        """
        global _saved_affinity
        if not 0 <= cpu_id < self.core_count:
            raise ValueError(
                f"cpu_id {cpu_id} out of range 0..{self.core_count - 1}"
            )
        get_affinity = getattr(os, "sched_getaffinity", None)
        set_affinity = getattr(os, "sched_setaffinity", None)
        if set_affinity is None:
            return
        if _saved_affinity is None and get_affinity is not None:
            _saved_affinity = set(get_affinity(0))
        set_affinity(0, {cpu_id})


def _detect_name() -> str:
    machine = _stdlib_platform.machine().lower()
    if machine in {"x86_64", "amd64", "i386", "i486", "i586", "i686", "x86"}:
        return "x86"
    if machine.startswith(("arm", "aarch64")):
        return "ARM"
    return "fallback"


def _detect_cache_line_size() -> int:
    sysconf_names = getattr(os, "sysconf_names", {})
    if "SC_LEVEL1_DCACHE_LINESIZE" in sysconf_names:
        try:
            size = os.sysconf("SC_LEVEL1_DCACHE_LINESIZE")
        except (OSError, ValueError):
            size = 0
        if size > 0:
            return int(size)
    return DEFAULT_CACHE_LINE_SIZE


def _restore_affinity() -> None:
    global _saved_affinity
    if _saved_affinity is None:
        return
    set_affinity = getattr(os, "sched_setaffinity", None)
    if set_affinity is not None:
        try:
            set_affinity(0, _saved_affinity)
        except OSError:
            pass
    _saved_affinity = None


def init_platform() -> Platform:
    """Detect the host and make it the current platform."""
    global _current
    _current = Platform(
        name=_detect_name(),
        cache_line_size=_detect_cache_line_size(),
        core_count=os.cpu_count() or DEFAULT_CORE_COUNT,
    )
    return _current


def finalize_platform() -> None:
    """Release the current platform, undoing any thread pinning it did."""
    global _current
    if _current is not None:
        _restore_affinity()
    _current = None


def current_platform() -> Platform | None:
    """Return the current platform, or None before initialisation."""
    return _current


def cache_line_size() -> int:
    """Cache line size in bytes; 64 when no platform is initialised."""
    return _current.cache_line_size if _current else DEFAULT_CACHE_LINE_SIZE


def core_count() -> int:
    """Number of online cores; 1 when no platform is initialised."""
    return _current.core_count if _current else DEFAULT_CORE_COUNT