"""Process inspection utilities."""

import psutil


def get_process_info(pid: int) -> dict[str, float] | None:
    """Get process resource information.

    Args:
        pid: Process ID to query.

    Returns:
        Dict with memory_mb and cpu_percent, or None if unavailable.
    """
    try:
        proc = psutil.Process(pid)
        mem_info = proc.memory_info()
        return {
            "memory_mb": mem_info.rss / (1024 * 1024),
            "cpu_percent": proc.cpu_percent(interval=0.1),
        }
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return None
