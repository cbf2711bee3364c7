import io
from typing import List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb

from ..models import ChartSeries, Metric

# same palette as the web dashboard
COLORS = [
    "#667eea", "#f093fb", "#4facfe", "#43e97b", "#38f9d7",
    "#fa709a", "#fee140", "#a8edea", "#d299c2", "#f6d365",
]


def darken(color: str, percent: float = 20) -> tuple:
    """Shift each RGB channel down by `percent` of full scale, clamped at 0."""
    amt = percent / 100.0
    return tuple(max(0.0, c - amt) for c in to_rgb(color))


def _bar_colors(n: int) -> List[str]:
    return [COLORS[i % len(COLORS)] for i in range(n)]


def make_bar_chart(series: ChartSeries) -> bytes:
    """
    Render the ranking series as a bar chart.
    Returns PNG bytes so the API can stream them straight back.
    """
    colors = _bar_colors(len(series.values))

    fig, ax = plt.subplots(figsize=(9, 4.8))
    ax.bar(
        series.labels,
        series.values,
        color=colors or None,
        edgecolor=[darken(c) for c in colors] or None,
        linewidth=2,
    )
    ax.set_title(series.title)
    ax.set_ylabel(series.axis_label)
    ax.set_ylim(bottom=0)
    if series.metric is Metric.total_gdp:
        ax.yaxis.set_major_formatter(lambda v, _pos: f"${v:,.0f}B")
    else:
        ax.yaxis.set_major_formatter(lambda v, _pos: f"${v:,.0f}")
    ax.grid(True, axis="y", alpha=0.3)
    plt.setp(ax.get_xticklabels(), rotation=30, ha="right")
    fig.tight_layout()

    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=140)
    plt.close(fig)
    return buf.getvalue()
