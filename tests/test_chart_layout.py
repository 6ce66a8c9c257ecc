import pytest

from idea_validator.scoring.layout import ChartLayout, select_bubble
from idea_validator.scoring.opportunity import HARD_COLOR, OpportunityScorer, derive_all_metrics
from idea_validator.storage.models import ValidatedIdea


def make_bubbles():
    ideas = [
        ValidatedIdea(id="a", summary="A", market_analysis="", score=80),
        ValidatedIdea(id="b", summary="B", market_analysis="market competition", score=50),
        ValidatedIdea(id="c", summary="C", market_analysis="growth trend", score=20),
    ]
    return derive_all_metrics(ideas)


def test_to_canvas_maps_corners():
    layout = ChartLayout()

    assert layout.to_canvas(0, 0) == (50, 450)
    assert layout.to_canvas(100, 100) == (750, 50)
    assert layout.to_canvas(50, 50) == (400, 250)


def test_place_projects_bubbles_in_order():
    bubbles = make_bubbles()

    placed = ChartLayout().place(bubbles)

    assert [p.bubble.id for p in placed] == ["a", "b", "c"]
    # b: competition 37, growth 20
    assert placed[1].cx == pytest.approx(50 + 0.37 * 700)
    assert placed[1].cy == pytest.approx(450 - 0.20 * 400)


def test_render_selects_first_bubble_by_default():
    chart = ChartLayout().render(make_bubbles())

    assert chart.selected.id == "a"
    assert [p.selected for p in chart.bubbles] == [True, False, False]


def test_render_selects_requested_bubble():
    chart = ChartLayout().render(make_bubbles(), selected_id="c")

    assert chart.selected.id == "c"
    assert [p.selected for p in chart.bubbles] == [False, False, True]


def test_unknown_selection_falls_back_to_first():
    assert select_bubble(make_bubbles(), "missing").id == "a"


def test_render_empty_chart():
    chart = ChartLayout().render([])

    assert chart.bubbles == []
    assert chart.selected is None
    assert len(chart.grid) == 10
    assert len(chart.axes) == 2


def test_grid_lines_cover_plot_area():
    lines = ChartLayout().grid_lines()

    vertical = [line for line in lines if line.x1 == line.x2]
    assert sorted(line.x1 for line in vertical) == [50, 225, 400, 575, 750]
    assert all(line.y1 == 50 and line.y2 == 450 for line in vertical)


def test_legend_lists_three_bands():
    chart = ChartLayout().render(make_bubbles())

    assert [entry.range for entry in chart.color_legend] == ["0-34", "35-64", "65-100"]
    assert chart.x_label == "Competition Intensity"
    assert chart.y_label == "Growth Rate"


def test_legend_follows_scorer_configuration():
    scorer = OpportunityScorer({"opportunity": {"colors": {"easy": "green"}, "easy_below": 40}})

    legend = ChartLayout(scorer=scorer).color_legend()

    assert [entry.color for entry in legend] == ["green", scorer.COLORS["medium"], HARD_COLOR]
    assert [entry.range for entry in legend] == ["0-39", "40-64", "65-100"]
