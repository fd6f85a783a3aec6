"""Terminal rendering of the writing dashboard."""

from __future__ import annotations

from datetime import date

from writerstats.aggregate import (
    DayPoint,
    counters_total,
    goal_percent,
    rolling_window,
    streak,
)
from writerstats.dates import today_key
from writerstats.settings import Settings
from writerstats.stats import StatsStore

W = "\033[97m"   # bright white
G = "\033[32m"   # green
Y = "\033[33m"   # yellow
D = "\033[2m"    # dim
B = "\033[1m"    # bold
N = "\033[0m"    # reset

SPARK_CHARS = "▁▂▃▄▅▆▇█"
BAR_WIDTH = 24
PROGRESS_WIDTH = 30


def progress_bar(percent: int, width: int = PROGRESS_WIDTH) -> str:
    filled = round(width * max(0, min(percent, 100)) / 100)
    return "█" * filled + "░" * (width - filled)


def bar_chart(points: list[DayPoint], width: int = BAR_WIDTH) -> list[str]:
    """One horizontal bar per day, scaled to the busiest day."""
    peak = max([p.value for p in points] + [1])
    label_width = max(len(p.label) for p in points) if points else 0
    lines = []
    for point in points:
        length = round(width * point.value / peak)
        # Empty days keep a sliver so the row still reads as a bar
        bar = "█" * length if length else "▏"
        value = f" {Y}{point.value:,}{N}" if point.value > 0 else ""
        lines.append(f"  {D}{point.label:>{label_width}}{N} {G}{bar}{N}{value}")
    return lines


def sparkline(values: list[int]) -> str:
    peak = max(values + [1])
    top = len(SPARK_CHARS) - 1
    return "".join(SPARK_CHARS[round(top * v / peak)] for v in values)


def render_dashboard(store: StatsStore, settings: Settings, today: date | None = None) -> str:
    counters = store.get(today_key(today))
    total = counters_total(counters, settings)
    pct = goal_percent(total, settings.daily_goal)
    days = streak(store, settings, today)

    lines = [f"{W}{B}Today{N}"]
    row = f"  {W}Typed{N} {Y}{counters.typed:,}{N}"
    if settings.count_pastes:
        row += f"   {W}Pasted{N} {Y}{counters.pasted:,}{N}"
    row += f"   {W}Total{N} {Y}{total:,}{N}"
    lines.append(row)

    bar_colour = G if pct >= 100 else Y
    lines.append(f"  {bar_colour}{progress_bar(pct)}{N} {pct}% of {settings.daily_goal:,} word goal")
    lines.append("")

    lines.append(f"{W}{B}Streak{N}")
    lines.append(f"  {Y}{days}{N} day{'s' if days != 1 else ''} in a row")
    lines.append("")

    lines.append(f"{W}{B}Last 7 Days{N}")
    lines.extend(bar_chart(rolling_window(7, store, settings, today)))
    lines.append("")

    month = rolling_window(30, store, settings, today)
    lines.append(f"{W}{B}Last 30 Days{N}")
    lines.append(f"  {G}{sparkline([p.value for p in month])}{N}")
    lines.append(f"  {D}{month[0].label} … {month[-1].label}{N}")
    return "\n".join(lines)
