import matplotlib
matplotlib.use('Agg')

import matplotlib.pyplot as plt
import numpy as np

from .merge_engine import MergeGroup
from .models import Bounds


def _segments(program, fast: bool) -> np.ndarray:
    """XY segments of a tracked program as an (n, 2, 2) array."""
    segments = [
        ((line.start.x, line.start.y), (line.end.x, line.end.y))
        for line in program.lines
        if line.is_retained and line.is_fast == fast and line.has_xy
    ]
    if not segments:
        return np.empty((0, 2, 2))
    return np.array(segments, dtype=float)


def plot_group_preview(group: MergeGroup, ax=None, font_size: int = 8):
    """
    Draw the tracked XY toolpath of every member of a merge group.

    Rapid traverses are drawn dashed, feed moves solid. Drilling programs
    are not tracked and are left out.

    Args:
        group: Merge group to draw
        ax: Existing axes, or None to create a figure
        font_size: Font size for labels

    Returns:
        The axes drawn on
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 8))

    colors = plt.rcParams['axes.prop_cycle'].by_key()['color']
    for i, member in enumerate(member for member in group.members if member.bounds is not None):
        color = colors[i % len(colors)]
        for fast, style in ((False, '-'), (True, ':')):
            segments = _segments(member, fast)
            if len(segments) == 0:
                continue
            # NaN breaks between segments so one plot call draws them all
            xs = np.column_stack([segments[:, 0, 0], segments[:, 1, 0], np.full(len(segments), np.nan)]).ravel()
            ys = np.column_stack([segments[:, 0, 1], segments[:, 1, 1], np.full(len(segments), np.nan)]).ravel()
            label = f"{member.filename} ({'rapid' if fast else 'feed'})"
            ax.plot(xs, ys, linestyle=style, color=color, linewidth=1, label=label)

    bounds = group.bounds
    ax.set_xlabel("X (mm)", fontsize=font_size + 2)
    ax.set_ylabel("Y (mm)", fontsize=font_size + 2)
    ax.set_title(
        f"{group.folder_name} / {group.tool_id}\n{_bounds_label(bounds)}",
        fontsize=font_size + 4,
    )
    if ax.lines:
        ax.legend(fontsize=font_size)
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal', adjustable='datalim')
    ax.margins(0.1)
    return ax


def _bounds_label(bounds: Bounds) -> str:
    lo, hi = bounds.minimum, bounds.maximum
    if not np.isfinite([lo.x, lo.y, lo.z, hi.x, hi.y, hi.z]).all():
        return "no tracked moves"
    return (f"X {lo.x:.3f}..{hi.x:.3f}  Y {lo.y:.3f}..{hi.y:.3f}  "
            f"Z {lo.z:.3f}..{hi.z:.3f}")


def save_group_preview(group: MergeGroup, output_file: str, dpi: int = 150) -> str:
    """
    Save a toolpath preview of a merge group as an image.

    Args:
        group: Merge group to draw
        output_file: Image path (format from the extension)
        dpi: Image resolution

    Returns:
        output_file
    """
    fig, ax = plt.subplots(figsize=(10, 8), dpi=dpi)
    try:
        plot_group_preview(group, ax=ax)
        fig.tight_layout()
        fig.savefig(output_file, dpi=dpi, bbox_inches='tight')
    finally:
        plt.close(fig)
    return output_file
