from datetime import datetime, timezone

QUALITY_BARS = {
    1: "🟥",
    2: "🟧 🟧",
    3: "🟨 🟨 🟨",
    4: "🟩 🟩 🟩 🟩",
}

_UNITS = [
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
]


def render_quality(quality: int) -> str:
    """Render an averaged recall quality as a colored bar, 🚫 when there is nothing to show."""
    return QUALITY_BARS.get(quality, "🚫")


def keycap(number: int) -> str:
    """Keycap emoji for a single digit, e.g. 3 -> 3️⃣."""
    if not 0 <= number <= 9:
        raise ValueError(f"Keycap digits go from 0 to 9, got {number}")
    return f"{number}️⃣"


def format_relative(moment: datetime, now: datetime | None = None) -> str:
    """
    Describe a moment relative to now, e.g. "3 days ago" or "in 2 hours".

    Args:
        moment: Timezone-aware datetime to describe
        now: Reference time (default: current UTC time)

    Returns:
        Human readable relative time
    """
    if now is None:
        now = datetime.now(timezone.utc)
    seconds = (moment - now).total_seconds()
    future = seconds > 0
    seconds = abs(seconds)

    for unit, size in _UNITS:
        if seconds >= size:
            count = int(seconds // size)
            label = f"{count} {unit}{'s' if count != 1 else ''}"
            return f"in {label}" if future else f"{label} ago"
    return "moments from now" if future else "moments ago"
