"""Duration labels shown in the library list and the player."""


def _split(seconds: float) -> tuple[int, int, int]:
    total = max(0, int(seconds))
    return total // 3600, (total % 3600) // 60, total % 60


def format_library_duration(seconds: float) -> str:
    """Compact label: '1h 29m' above an hour, else '4m 05s'."""
    h, m, s = _split(seconds)
    if h > 0:
        return f"{h}h {m:02d}m"
    return f"{m}m {s:02d}s"


def format_player_duration(seconds: float) -> str:
    """Full label: '1h 29m 40s' above an hour, else '4m 05s'."""
    h, m, s = _split(seconds)
    if h > 0:
        return f"{h}h {m:02d}m {s:02d}s"
    return f"{m}m {s:02d}s"


def format_progress(position: float, duration: float) -> str:
    return f"{format_library_duration(position)} / {format_library_duration(duration)}"
