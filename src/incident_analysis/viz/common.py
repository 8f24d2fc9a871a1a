from __future__ import annotations

import base64
import io

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from incident_analysis.contracts import ImageContent

DPI = 100


def figsize_for(width_px: int, height_px: int) -> tuple[float, float]:
    return (width_px / DPI, height_px / DPI)


def figure_to_image(fig: Figure) -> ImageContent:
    buffer = io.BytesIO()
    fig.tight_layout()
    fig.savefig(buffer, format="png", dpi=DPI)
    plt.close(fig)
    return ImageContent(data=base64.b64encode(buffer.getvalue()).decode("ascii"))
