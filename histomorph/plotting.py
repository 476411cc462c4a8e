"""Matplotlib overlays of labeled perimeters."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg", force=False)
import matplotlib.pyplot as plt
import numpy as np

from histomorph.geometry.types import ArcKind, Curve, LabelColor, PerimeterLabels

RUN_STYLE = {
    ArcKind.DOUBLE: {"color": "gold", "linewidth": 3.0},
    (ArcKind.SINGLE, LabelColor.RED): {"color": "tab:red", "linewidth": 2.5},
    (ArcKind.SINGLE, LabelColor.GREEN): {"color": "tab:green", "linewidth": 2.5},
    (ArcKind.SINGLE, None): {"color": "tab:orange", "linewidth": 2.5},
}


def _arc_xy(perimeter: Curve, indices: np.ndarray) -> np.ndarray:
    # include the closing vertex so the drawn run covers its last segment
    n = len(perimeter)
    idx = np.append(indices, (indices[-1] + 1) % n)
    return perimeter.points[idx]


def plot_perimeter_labels(perimeter: Curve, labels: PerimeterLabels, *, ax=None, title: str | None = None):
    """Draw the perimeter with double/single runs highlighted."""

    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))
    closed = np.vstack([perimeter.points, perimeter.points[:1]])
    ax.plot(closed[:, 0], closed[:, 1], color="0.6", linewidth=1.0, label="perimeter")

    seen = set()
    for arc in labels.runs:
        key = arc.kind if arc.kind is ArcKind.DOUBLE else (arc.kind, arc.color)
        style = RUN_STYLE.get(key, {"color": "black", "linewidth": 2.0})
        name = arc.kind.value if arc.color is None else f"{arc.kind.value} ({arc.color.value})"
        xy = _arc_xy(perimeter, arc.indices())
        ax.plot(xy[:, 0], xy[:, 1], label=None if key in seen else name, **style)
        seen.add(key)

    ax.set_aspect("equal")
    ax.invert_yaxis()
    if title:
        ax.set_title(title)
    if labels.runs:
        ax.legend(loc="best", fontsize="small")
    return ax


def save_perimeter_plot(path: str | Path, perimeter: Curve, labels: PerimeterLabels, *, title: str | None = None) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(figsize=(6, 6))
    try:
        plot_perimeter_labels(perimeter, labels, ax=ax, title=title)
        fig.savefig(out, dpi=150, bbox_inches="tight")
    finally:
        plt.close(fig)
    return out
