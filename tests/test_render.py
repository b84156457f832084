"""Tests for the render/compare engine.

Frames are checked through their semantic tags, not pixels.
"""

import numpy as np
import pytest

from iscn.probability.config import LabConfig
from iscn.probability.generator import CoinFlip, Spike
from iscn.probability.render import (
    Circle,
    Frame,
    Line,
    Polyline,
    Rect,
    Surface,
    render_bernoulli,
    render_poisson,
)


@pytest.fixture
def surface():
    return Surface(800.0, 400.0)


@pytest.fixture
def scenario_spikes():
    return tuple(Spike(t) for t in [0.0, 0.05, 0.07, 0.20])


def _flips(outcomes):
    return tuple(CoinFlip(outcome=o, seq=i) for i, o in enumerate(outcomes))


# ---------------------------------------------------------------------------
# Bernoulli
# ---------------------------------------------------------------------------

class TestRenderBernoulli:
    def test_background_first(self, surface):
        frame = render_bernoulli(surface, (), 0.0, 0.5)
        assert frame.commands[0].tag == "background"
        assert (frame.width, frame.height) == (800.0, 400.0)

    def test_empty_window_zero_bars(self, surface):
        frame = render_bernoulli(surface, (), 0.0, 0.5)
        bars = frame.tagged("bar")
        assert [b.height for b in bars] == [0.0, 0.0]
        labels = [t.text for t in frame.tagged("bar_label")]
        assert labels == ["0 (Closed): 0.00", "1 (Open): 0.00"]
        assert frame.tagged("dot") == []

    def test_bar_heights_are_fractions(self, surface):
        frame = render_bernoulli(surface, _flips([1, 1, 1, 0]), 0.0, 0.5)
        closed, opened = frame.tagged("bar")
        assert closed.height == pytest.approx(0.25 * 150.0)
        assert opened.height == pytest.approx(0.75 * 150.0)
        # bars stand on the same baseline
        assert closed.y + closed.height == pytest.approx(350.0)
        assert opened.y + opened.height == pytest.approx(350.0)

    def test_target_line(self, surface):
        frame = render_bernoulli(surface, (), 0.0, 0.3)
        (line,) = frame.tagged("target")
        assert isinstance(line, Line)
        assert line.y0 == line.y1 == pytest.approx(350.0 - 0.3 * 150.0)
        assert (line.x0, line.x1) == (400.0, 800.0)
        assert line.dash
        assert frame.tagged("target_label")[0].text == "Target p=0.30"

    def test_dots_by_recency(self, surface):
        frame = render_bernoulli(surface, _flips([0, 1]), 0.0, 0.5)
        older, newest = frame.tagged("dot")
        assert isinstance(newest, Circle)
        assert newest.x == 750.0
        assert older.x == 735.0
        assert newest.fill != older.fill

    def test_old_dots_scroll_off(self, surface):
        frame = render_bernoulli(surface, _flips([1] * 200), 0.0, 0.5)
        dots = frame.tagged("dot")
        # x = 750 - 15 * age >= 0 for age 0..50
        assert len(dots) == 51
        assert all(d.x >= 0 for d in dots)


# ---------------------------------------------------------------------------
# Poisson
# ---------------------------------------------------------------------------

class TestRenderPoisson:
    def test_raster_positions(self, surface, scenario_spikes):
        frame = render_poisson(surface, scenario_spikes, 0.25, 0.5)
        xs = [tick.x0 for tick in frame.tagged("spike")]
        expected = [750.0 - (0.25 - t) * 150.0 for t in [0.0, 0.05, 0.07, 0.20]]
        np.testing.assert_allclose(xs, expected)

    def test_aged_spikes_leave_surface(self, surface):
        spikes = (Spike(0.0), Spike(9.9))
        frame = render_poisson(surface, spikes, 10.0, 0.5)
        # age 10 s -> x = 750 - 1500 < 0
        assert len(frame.tagged("spike")) == 1

    def test_three_samples_draw_histogram_and_theory(self, surface, scenario_spikes):
        frame = render_poisson(surface, scenario_spikes, 0.25, 0.5)
        assert len(frame.tagged("isi_bar")) == 30
        assert len(frame.tagged("theory")) == 1
        assert len(frame.tagged("isi_label")) == 1

    def test_two_samples_draw_neither(self, surface, scenario_spikes):
        frame = render_poisson(surface, scenario_spikes[:3], 0.1, 0.5)
        assert frame.tagged("isi_bar") == []
        assert frame.tagged("theory") == []

    def test_histogram_normalised_to_peak(self, surface, scenario_spikes):
        frame = render_poisson(surface, scenario_spikes, 0.25, 0.5)
        heights = [b.height for b in frame.tagged("isi_bar")]
        assert max(heights) == pytest.approx(150.0)
        assert sum(h > 0 for h in heights) == 3

    def test_theory_curve_shape(self, surface, scenario_spikes):
        config = LabConfig()
        frame = render_poisson(surface, scenario_spikes, 0.25, 0.5, config)
        (curve,) = frame.tagged("theory")
        assert isinstance(curve, Polyline)
        xs = np.array([p[0] for p in curve.points])
        ys = np.array([p[1] for p in curve.points])
        # one sample every 2 px across the 680 px histogram
        assert len(xs) == 341
        assert xs[0] == 60.0 and xs[-1] == pytest.approx(740.0)
        assert ys[0] == pytest.approx(360.0 - 150.0)
        lam = config.effective_rate(0.5)
        assert ys[-1] == pytest.approx(360.0 - np.exp(-lam * 0.2) * 150.0)
        assert np.all(np.diff(ys) > 0)

    def test_rate_label(self, surface):
        frame = render_poisson(surface, (), 0.0, 1.0)
        assert frame.tagged("raster_label")[0].text == "RASTER PLOT (Rate: ~50Hz)"


# ---------------------------------------------------------------------------
# Surface handling
# ---------------------------------------------------------------------------

class TestSurface:
    def test_resize_takes_effect_next_frame(self, surface, scenario_spikes):
        before = render_bernoulli(surface, _flips([1, 0]), 0.0, 0.5)
        surface.resize(400, 300)
        after = render_bernoulli(surface, _flips([1, 0]), 0.0, 0.5)
        assert (after.width, after.height) == (400.0, 300.0)
        closed_before, _ = before.tagged("bar")
        closed_after, _ = after.tagged("bar")
        assert closed_before.x == 200.0 - 30.0
        assert closed_after.x == 100.0 - 30.0
        assert after.tagged("target")[0].x1 == 400.0

    def test_resize_poisson_histogram_width(self, surface, scenario_spikes):
        surface.resize(1000, 500)
        frame = render_poisson(surface, scenario_spikes, 0.25, 0.5)
        bars = frame.tagged("isi_bar")
        assert bars[-1].x + bars[-1].width + 1.0 == pytest.approx(940.0)
        assert frame.tagged("theory")[0].points[0][1] == pytest.approx(460.0 - 150.0)

    def test_resize_rejects_non_positive(self, surface):
        with pytest.raises(ValueError):
            surface.resize(0, 100)

    def test_redraw_is_idempotent(self, surface, scenario_spikes):
        a = render_poisson(surface, scenario_spikes, 0.25, 0.5)
        b = render_poisson(surface, scenario_spikes, 0.25, 0.5)
        assert a == b

    def test_frame_tagged(self):
        frame = Frame(10, 10)
        rect = frame.add(Rect(0, 0, 1, 1, tag="x"))
        assert frame.tagged("x") == [rect]
