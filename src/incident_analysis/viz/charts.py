from __future__ import annotations

import colorsys
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np

from incident_analysis.contracts import ImageContent
from incident_analysis.viz.common import DPI, figsize_for, figure_to_image

LINE_SIZE = (800, 400)
PIE_SIZE = (600, 600)
BAR_SIZE = (800, 500)

LINE_COLOR = (75 / 255, 192 / 255, 192 / 255)
LINE_FILL = (75 / 255, 192 / 255, 192 / 255, 0.2)
BAR_COLOR = (54 / 255, 162 / 255, 235 / 255, 0.8)
BAR_EDGE = (54 / 255, 162 / 255, 235 / 255, 1.0)


def hue_ramp(count: int, saturation: float = 0.70, lightness: float = 0.60) -> list[tuple]:
    """Evenly spaced hues, one per slice (``hsl(i * 360 / n, 70%, 60%)``)."""
    if count <= 0:
        return []
    return [
        colorsys.hls_to_rgb(index / count, lightness, saturation) for index in range(count)
    ]


def plot_incident_trend(
    labels: Sequence[str],
    counts: Sequence[int],
    title: str,
    series_label: str = "Incidents",
) -> ImageContent:
    fig, ax = plt.subplots(figsize=figsize_for(*LINE_SIZE), dpi=DPI)
    x = np.arange(len(labels), dtype=float)
    ax.plot(x, counts, color=LINE_COLOR, linewidth=2.0, marker="o", label=series_label)
    ax.fill_between(x, counts, color=LINE_FILL)
    ax.set_title(title)
    ax.set_ylabel("Count")
    ax.set_ylim(bottom=0)
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.legend(loc="upper right")
    return figure_to_image(fig)


def plot_share_pie(labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent:
    fig, ax = plt.subplots(figsize=figsize_for(*PIE_SIZE), dpi=DPI)
    wedges, _ = ax.pie(counts, colors=hue_ramp(len(counts)), startangle=90, counterclock=False)
    ax.set_title(title)
    ax.axis("equal")
    ax.legend(wedges, labels, loc="center left", bbox_to_anchor=(1.0, 0.5), fontsize=8)
    return figure_to_image(fig)


def plot_ranked_bars(
    labels: Sequence[str],
    counts: Sequence[int],
    title: str,
    series_label: str = "Incidents",
) -> ImageContent:
    fig, ax = plt.subplots(figsize=figsize_for(*BAR_SIZE), dpi=DPI)
    x = np.arange(len(labels), dtype=float)
    ax.bar(x, counts, color=BAR_COLOR, edgecolor=BAR_EDGE, linewidth=1.0, label=series_label)
    ax.set_title(title)
    ax.set_ylabel("Count")
    ax.set_ylim(bottom=0)
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha="right")
    return figure_to_image(fig)
