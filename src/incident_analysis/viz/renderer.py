from __future__ import annotations

import importlib
import logging
from typing import Callable, Sequence

from incident_analysis.contracts import ImageContent

LOGGER = logging.getLogger(__name__)


class ChartRenderer:
    """Chart capability. Every method returns ``None`` when no image is produced."""

    available: bool = False

    def line_chart(self, labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent | None:
        raise NotImplementedError

    def pie_chart(self, labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent | None:
        raise NotImplementedError

    def bar_chart(self, labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent | None:
        raise NotImplementedError


class NullChartRenderer(ChartRenderer):
    available = False

    def line_chart(self, labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent | None:
        return None

    def pie_chart(self, labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent | None:
        return None

    def bar_chart(self, labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent | None:
        return None


class MatplotlibChartRenderer(ChartRenderer):
    available = True

    def __init__(self) -> None:
        self._charts = importlib.import_module("incident_analysis.viz.charts")

    def _render(
        self,
        kind: str,
        plot: Callable[..., ImageContent],
        labels: Sequence[str],
        counts: Sequence[int],
        title: str,
    ) -> ImageContent | None:
        if not labels or sum(counts) <= 0:
            return None
        try:
            return plot(list(labels), list(counts), title)
        except Exception:
            LOGGER.exception("Chart generation failed for %s chart", kind)
            return None

    def line_chart(self, labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent | None:
        return self._render("line", self._charts.plot_incident_trend, labels, counts, title)

    def pie_chart(self, labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent | None:
        return self._render("pie", self._charts.plot_share_pie, labels, counts, title)

    def bar_chart(self, labels: Sequence[str], counts: Sequence[int], title: str) -> ImageContent | None:
        return self._render("bar", self._charts.plot_ranked_bars, labels, counts, title)


def probe_chart_renderer(enabled: bool = True) -> ChartRenderer:
    """Select the chart renderer once for the lifetime of the process."""
    if not enabled:
        LOGGER.info("Chart support disabled by configuration, running in table-only mode")
        return NullChartRenderer()
    try:
        matplotlib = importlib.import_module("matplotlib")
        matplotlib.use("Agg")
        renderer = MatplotlibChartRenderer()
    except ImportError as exc:
        LOGGER.warning("Chart dependencies not available (%s), running in table-only mode", exc)
        return NullChartRenderer()
    LOGGER.info("Chart support enabled")
    return renderer
