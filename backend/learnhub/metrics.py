"""
In-process counters for resolver diagnostics. Process-local; for multi-worker use external metrics (e.g. Prometheus).
"""
import threading

# Parent cycles broken while building a hierarchy.
hierarchy_cycles_total: int = 0
# Collection mapping rows skipped because they reference zero or several entities.
malformed_mappings_total: int = 0
_lock = threading.Lock()


def increment_hierarchy_cycles_total(n: int = 1) -> int:
    """Increment hierarchy_cycles_total by n; return new value. Thread-safe."""
    global hierarchy_cycles_total
    with _lock:
        hierarchy_cycles_total += n
        return hierarchy_cycles_total


def increment_malformed_mappings_total(n: int = 1) -> int:
    """Increment malformed_mappings_total by n; return new value. Thread-safe."""
    global malformed_mappings_total
    with _lock:
        malformed_mappings_total += n
        return malformed_mappings_total


def record_diagnostics(diagnostics) -> None:
    """Bump counters from a resolver diagnostics list."""
    cycles = sum(1 for d in diagnostics if d.kind == "cycle")
    malformed = sum(1 for d in diagnostics if d.kind == "malformed_mapping")
    if cycles:
        increment_hierarchy_cycles_total(cycles)
    if malformed:
        increment_malformed_mappings_total(malformed)


def snapshot() -> dict[str, int]:
    with _lock:
        return {
            "hierarchy_cycles_total": hierarchy_cycles_total,
            "malformed_mappings_total": malformed_mappings_total,
        }
