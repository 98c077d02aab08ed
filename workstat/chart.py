"""Pie chart geometry and rendering.

Angles are in degrees in screen coordinates: x to the right, y pointing
down. -90 is the top of the circle and increasing angles run clockwise.
The drawing code inverts the matplotlib y-axis so the same numbers can be
used for both the layout and the patches.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from matplotlib.figure import Figure
from matplotlib.patches import Circle, Wedge

from .models import ChartDataItem

START_ANGLE = -90.0
FULL_CIRCLE = 360.0
DEFAULT_LABEL_RADIUS_RATIO = 0.8
DEFAULT_INNER_RADIUS_RATIO = 0.6
DEFAULT_MIN_LABEL_PERCENTAGE = 3.0
REMAINING_LABEL = "Remaining"
REMAINING_COLOR = "#E5E5EA"


@dataclass(frozen=True)
class PieSlice:
    title: str
    percentage: float
    color: str
    start_angle: float
    end_angle: float
    label_x: float
    label_y: float
    show_label: bool

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle


@dataclass(frozen=True)
class ChartLayout:
    width: float
    height: float
    center: tuple[float, float]
    radius: float
    slices: list[PieSlice] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(s.percentage for s in self.slices)

    @property
    def is_empty(self) -> bool:
        return not self.slices


@dataclass(frozen=True)
class LegendEntry:
    title: str
    percentage: float
    color: str
    is_remaining: bool = False


def percentage_to_sweep(percentage: float) -> float:
    return percentage / 100.0 * FULL_CIRCLE


def point_on_circle(center: tuple[float, float], radius: float, angle: float) -> tuple[float, float]:
    radians = math.radians(angle)
    cx, cy = center
    return cx + radius * math.cos(radians), cy + radius * math.sin(radians)


def compute_layout(
    data: list[ChartDataItem],
    width: float,
    height: float,
    label_radius_ratio: float = DEFAULT_LABEL_RADIUS_RATIO,
    min_label_percentage: float = DEFAULT_MIN_LABEL_PERCENTAGE,
) -> ChartLayout:
    """Partition the circle among ``data`` and place one label per slice.

    Slices are laid out in list order from the top, clockwise. Each label
    sits on the slice's bisector at ``label_radius_ratio`` of the radius;
    slices below ``min_label_percentage`` get no label.
    """
    center = (width / 2, height / 2)
    radius = min(width, height) / 2
    label_radius = radius * label_radius_ratio

    slices: list[PieSlice] = []
    current = START_ANGLE
    for item in data:
        sweep = percentage_to_sweep(item.percentage)
        start, end = current, current + sweep
        label_x, label_y = point_on_circle(center, label_radius, start + sweep / 2)
        slices.append(
            PieSlice(
                title=item.title,
                percentage=item.percentage,
                color=item.color,
                start_angle=start,
                end_angle=end,
                label_x=label_x,
                label_y=label_y,
                show_label=item.percentage >= min_label_percentage,
            )
        )
        current = end
    return ChartLayout(width=width, height=height, center=center, radius=radius, slices=slices)


def legend_entries(data: list[ChartDataItem]) -> list[LegendEntry]:
    entries = [LegendEntry(item.title, item.percentage, item.color) for item in data]
    total = sum(item.percentage for item in data)
    if data and total < 100:
        entries.append(LegendEntry(REMAINING_LABEL, 100 - total, REMAINING_COLOR, is_remaining=True))
    return entries


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def ease_in_out(t: float) -> float:
    t = min(max(t, 0.0), 1.0)
    if t < 0.5:
        return 4 * t * t * t
    return 1 - (-2 * t + 2) ** 3 / 2


def slice_progress(elapsed: float, index: int, duration: float = 0.8, stagger: float = 0.1) -> float:
    """Eased grow-in progress of slice ``index`` after ``elapsed`` seconds."""
    if duration <= 0:
        return 1.0
    return ease_in_out((elapsed - index * stagger) / duration)


def animation_length(count: int, duration: float = 0.8, stagger: float = 0.1) -> float:
    return duration + max(count - 1, 0) * stagger


def draw_pie_chart(
    figure: Figure,
    layout: ChartLayout,
    progress: list[float] | None = None,
    inner_radius_ratio: float = DEFAULT_INNER_RADIUS_RATIO,
    remaining_color: str = REMAINING_COLOR,
    center_caption: str = "Used",
    empty_text: str = "No data",
):
    figure.clear()
    ax = figure.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, layout.width)
    ax.set_ylim(layout.height, 0)
    ax.set_aspect("equal")
    ax.axis("off")

    if layout.is_empty:
        ax.text(
            layout.center[0],
            layout.center[1],
            empty_text,
            ha="center",
            va="center",
            fontsize=10,
            color="#4b5563",
        )
        return ax

    if progress is None:
        progress = [1.0] * len(layout.slices)

    ring_width = layout.radius * (1 - inner_radius_ratio)
    ax.add_patch(
        Circle(layout.center, layout.radius, facecolor=remaining_color, alpha=0.6, linewidth=0)
    )
    ax.add_patch(
        Circle(layout.center, layout.radius * inner_radius_ratio, facecolor="white", linewidth=0)
    )
    for idx, piece in enumerate(layout.slices):
        scale = progress[idx] if idx < len(progress) else 1.0
        if scale <= 0 or piece.sweep <= 0:
            continue
        ax.add_patch(
            Wedge(
                layout.center,
                layout.radius * scale,
                piece.start_angle,
                piece.end_angle,
                width=ring_width * scale,
                facecolor=piece.color,
                edgecolor="white",
                linewidth=1.0,
            )
        )
        if piece.show_label:
            ax.text(
                piece.label_x,
                piece.label_y,
                f"{piece.title}\n{format_percentage(piece.percentage)}",
                ha="center",
                va="center",
                fontsize=7,
                fontweight="semibold",
                color="#1f2937",
                alpha=scale,
                wrap=True,
            )

    ax.text(
        layout.center[0],
        layout.center[1] - layout.radius * 0.06,
        format_percentage(layout.total),
        ha="center",
        va="center",
        fontsize=14,
        fontweight="bold",
        color="#111827",
    )
    ax.text(
        layout.center[0],
        layout.center[1] + layout.radius * 0.14,
        center_caption,
        ha="center",
        va="center",
        fontsize=8,
        color="#6b7280",
    )
    return ax
