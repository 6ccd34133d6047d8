"""Countdown display helpers"""


def format_clock(seconds: int) -> str:
    """
    Format a second count as a countdown clock.

    Returns:
        str: "m:ss" below an hour, "h:mm:ss" from an hour on
    """
    seconds = max(int(seconds), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
