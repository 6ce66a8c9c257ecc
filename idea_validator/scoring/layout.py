"""Chart layout for the market opportunity heatmap."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .opportunity import BubbleDatum, OpportunityScorer

GRID_STEPS = (0, 25, 50, 75, 100)


@dataclass(frozen=True)
class PlacedBubble:
    """Bubble projected onto canvas pixels."""

    bubble: BubbleDatum
    cx: float
    cy: float
    selected: bool = False


@dataclass(frozen=True)
class GridLine:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str
    range: str


@dataclass
class HeatmapChart:
    """Everything needed to draw the heatmap."""

    width: int
    height: int
    bubbles: List[PlacedBubble]
    grid: List[GridLine]
    axes: List[GridLine]
    x_label: str
    y_label: str
    size_legend: str
    color_legend: List[LegendEntry] = field(default_factory=list)
    selected: Optional[BubbleDatum] = None


class ChartLayout:
    """Project normalized 0-100 bubble coordinates onto an SVG canvas.

    The plot area starts at (left, top) and grows right/up from its bottom
    left corner, so y = 100 sits at the top edge.
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 500,
        left: float = 50,
        top: float = 50,
        plot_width: float = 700,
        plot_height: float = 400,
        scorer: Optional[OpportunityScorer] = None,
    ):
        self.width = width
        self.height = height
        self.left = left
        self.top = top
        self.plot_width = plot_width
        self.plot_height = plot_height
        self.scorer = scorer or OpportunityScorer()

    @property
    def bottom(self) -> float:
        return self.top + self.plot_height

    @property
    def right(self) -> float:
        return self.left + self.plot_width

    def to_canvas(self, x: float, y: float) -> tuple:
        """Map chart coordinates (0-100) to canvas pixels."""
        cx = self.left + (x / 100) * self.plot_width
        cy = self.bottom - (y / 100) * self.plot_height
        return cx, cy

    def place(
        self, bubbles: Sequence[BubbleDatum], selected_id: Optional[str] = None
    ) -> List[PlacedBubble]:
        """Project bubbles onto the canvas, keeping input order."""
        placed = []
        for bubble in bubbles:
            cx, cy = self.to_canvas(bubble.x, bubble.y)
            placed.append(
                PlacedBubble(bubble=bubble, cx=cx, cy=cy, selected=bubble.id == selected_id)
            )
        return placed

    def grid_lines(self) -> List[GridLine]:
        lines = []
        for step in GRID_STEPS:
            x, y = self.to_canvas(step, step)
            lines.append(GridLine(x1=x, y1=self.top, x2=x, y2=self.bottom))
            lines.append(GridLine(x1=self.left, y1=y, x2=self.right, y2=y))
        return lines

    def axis_lines(self) -> List[GridLine]:
        return [
            GridLine(x1=self.left, y1=self.bottom, x2=self.right, y2=self.bottom),
            GridLine(x1=self.left, y1=self.top, x2=self.left, y2=self.bottom),
        ]

    def color_legend(self) -> List[LegendEntry]:
        """Colour bands as the scorer assigns them."""
        easy_below = self.scorer.easy_below
        medium_below = self.scorer.medium_below
        colors = self.scorer.COLORS
        return [
            LegendEntry(label="Easy Entry", color=colors["easy"], range=f"0-{easy_below - 1}"),
            LegendEntry(
                label="Medium Entry",
                color=colors["medium"],
                range=f"{easy_below}-{medium_below - 1}",
            ),
            LegendEntry(label="Hard Entry", color=colors["hard"], range=f"{medium_below}-100"),
        ]

    def render(
        self, bubbles: Sequence[BubbleDatum], selected_id: Optional[str] = None
    ) -> HeatmapChart:
        """Lay out a full chart.

        Args:
            bubbles: Bubbles to draw
            selected_id: Id of the bubble to highlight; the first bubble is
                selected when omitted or unknown

        Returns:
            HeatmapChart instance
        """
        selected = select_bubble(bubbles, selected_id)

        return HeatmapChart(
            width=self.width,
            height=self.height,
            bubbles=self.place(bubbles, selected.id if selected else None),
            grid=self.grid_lines(),
            axes=self.axis_lines(),
            x_label="Competition Intensity",
            y_label="Growth Rate",
            size_legend="Market Size (larger = bigger market)",
            color_legend=self.color_legend(),
            selected=selected,
        )


def select_bubble(
    bubbles: Sequence[BubbleDatum], selected_id: Optional[str] = None
) -> Optional[BubbleDatum]:
    """Pick the bubble to show in the detail panel."""
    if not bubbles:
        return None

    if selected_id is not None:
        for bubble in bubbles:
            if bubble.id == selected_id:
                return bubble

    return bubbles[0]
