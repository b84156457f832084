"""Render/compare engine: draw primitives for one frame of the lab.

The renderers speak in an immediate-mode 2D vocabulary (rectangles, lines,
circles, polylines, text) addressed in surface pixels with the origin at
the top-left. A host backend (see iscn.portal.figures) turns them into
pixels.

Every renderer is a pure function of (surface, records, now, rate, config).
Geometry is derived from the surface bounds passed in on each call, so a
resized surface takes effect on the next frame.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from iscn.probability.config import DEFAULT_CONFIG
from iscn.probability.statistics import (
    exponential_isi_curve,
    inter_arrivals,
    isi_histogram,
    outcome_fractions,
    spike_times,
)
from iscn.utils import get_logger

LOG = get_logger("probability.render")

BACKGROUND = "#09090b"
GRID = "#27272a"
LABEL = "#a1a1aa"
WHITE = "#ffffff"
OPEN_COLOR = "#10b981"
CLOSED_COLOR = "#ef4444"
TARGET_COLOR = "#fbbf24"
SPIKE_COLOR = "#a855f7"
ISI_FILL = "rgba(168, 85, 247, 0.2)"
ISI_STROKE = "rgba(168, 85, 247, 0.5)"
THEORY_COLOR = "#0ed3cf"
FONT = "12px sans-serif"


# ---------------------------------------------------------------------------
# Drawing surface and primitives
# ---------------------------------------------------------------------------

@dataclass
class Surface:
    """The host's drawing area. Hosts resize it in place."""
    width: float = 800.0
    height: float = 400.0
    ready: bool = True

    def resize(self, width, height):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    tag: str = ""


@dataclass(frozen=True)
class Line:
    x0: float
    y0: float
    x1: float
    y1: float
    color: str = WHITE
    width: float = 1.0
    dash: Tuple[float, ...] = ()
    tag: str = ""


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius: float
    fill: str = WHITE
    tag: str = ""


@dataclass(frozen=True)
class Polyline:
    points: Tuple[Tuple[float, float], ...]
    color: str = WHITE
    width: float = 1.0
    tag: str = ""


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    color: str = WHITE
    font: str = FONT
    tag: str = ""


@dataclass
class Frame:
    """Ordered draw commands for a surface of the given size."""
    width: float
    height: float
    commands: List[object] = field(default_factory=list)

    def add(self, command):
        self.commands.append(command)
        return command

    def tagged(self, tag):
        """Commands carrying `tag`, in draw order."""
        return [c for c in self.commands if c.tag == tag]


def _new_frame(surface):
    frame = Frame(width=surface.width, height=surface.height)
    frame.add(Rect(0.0, 0.0, surface.width, surface.height,
                   fill=BACKGROUND, tag="background"))
    return frame


# ---------------------------------------------------------------------------
# Bernoulli
# ---------------------------------------------------------------------------

def render_bernoulli(surface, flips, now, rate, config=DEFAULT_CONFIG):
    """Dot stream, Closed/Open bars and the target-probability line.

    Parameters
    ----------
    surface : Surface
    flips : sequence of CoinFlip
        Window snapshot, oldest first.
    now : float
        Host clock (unused by this mode; kept for a uniform signature).
    rate : float
        Target open probability p.
    config : LabConfig

    Returns
    -------
    Frame
    """
    w, h = surface.width, surface.height
    frame = _new_frame(surface)

    # --- Dot stream, newest at the right ---
    pitch = config.coin_size + config.coin_gap
    newest = len(flips) - 1
    for i, flip in enumerate(flips):
        x = w - config.right_margin - (newest - i) * pitch
        if x < 0:
            continue
        frame.add(Circle(x, config.stream_y, config.coin_size / 2,
                         fill=OPEN_COLOR if flip.outcome == 1 else CLOSED_COLOR,
                         tag="dot"))

    # --- Aggregate bars ---
    closed_frac, open_frac = outcome_fractions(flips)
    baseline = h - config.bar_baseline_offset
    bars = (
        (w / 4, closed_frac, CLOSED_COLOR, "0 (Closed)", 40.0),
        (3 * w / 4, open_frac, OPEN_COLOR, "1 (Open)", 35.0),
    )
    for cx, frac, color, name, label_shift in bars:
        bar_h = frac * config.max_bar_height
        frame.add(Rect(cx - config.bar_width / 2, baseline - bar_h,
                       config.bar_width, bar_h, fill=color, tag="bar"))
        frame.add(Text(cx - label_shift, h - 30.0, f"{name}: {frac:.2f}",
                       tag="bar_label"))

    # --- Target probability ---
    target_y = baseline - rate * config.max_bar_height
    frame.add(Line(w / 2, target_y, w, target_y, color=TARGET_COLOR,
                   dash=(5.0, 5.0), tag="target"))
    frame.add(Text(w - 100.0, target_y - 5.0, f"Target p={rate:.2f}",
                   color=TARGET_COLOR, tag="target_label"))
    return frame


# ---------------------------------------------------------------------------
# Poisson
# ---------------------------------------------------------------------------

def render_poisson(surface, spikes, now, rate, config=DEFAULT_CONFIG):
    """Scrolling raster, ISI histogram and the exponential theory curve.

    The histogram is normalised to its tallest bin and the curve to its
    value at t = 0, so both share the same height basis. Neither is drawn
    before `config.min_isi_samples` intervals exist.

    Parameters
    ----------
    surface : Surface
    spikes : sequence of Spike
        Window snapshot, oldest first.
    now : float
        Host clock; spike age is now - spike.time.
    rate : float
        Normalised rate parameter.
    config : LabConfig

    Returns
    -------
    Frame
    """
    w, h = surface.width, surface.height
    lambda_eff = config.effective_rate(rate)
    frame = _new_frame(surface)

    frame.add(Text(20.0, 30.0, f"RASTER PLOT (Rate: ~{lambda_eff:.0f}Hz)",
                   color=LABEL, tag="raster_label"))
    frame.add(Line(0.0, config.raster_y, w, config.raster_y, color=GRID,
                   tag="raster_axis"))

    # --- Raster, newest at the right, scrolling left with age ---
    times = spike_times(spikes)
    xs = w - config.right_margin - (now - times) * config.scroll_speed
    top = config.raster_y - config.raster_half_height
    bottom = config.raster_y + config.raster_half_height
    for x in xs[(xs > 0) & (xs < w)]:
        frame.add(Line(float(x), top, float(x), bottom, color=SPIKE_COLOR,
                       width=2.0, tag="spike"))

    isis = inter_arrivals(times)
    if len(isis) < config.min_isi_samples:
        return frame

    # --- ISI histogram ---
    hist_bottom = h - config.hist_bottom_offset
    hist_x = config.hist_side_margin
    hist_w = max(w - 2 * config.hist_side_margin, 0.0)
    counts, _ = isi_histogram(isis, config.max_isi, config.isi_bins)
    peak = max(int(counts.max()), 1)
    bar_w = hist_w / config.isi_bins

    frame.add(Text(20.0, hist_bottom - config.hist_height - 20.0,
                   "ISI HISTOGRAM (Inter-Spike Intervals)",
                   color=LABEL, tag="isi_label"))
    for i, count in enumerate(counts):
        bar_h = count / peak * config.hist_height
        frame.add(Rect(hist_x + i * bar_w, hist_bottom - bar_h,
                       max(bar_w - 1.0, 0.0), bar_h,
                       fill=ISI_FILL, stroke=ISI_STROKE, tag="isi_bar"))

    # --- Theory: exp(-lambda t), one sample every curve_step_px pixels ---
    if hist_w > 0:
        px = np.arange(0.0, hist_w + 1e-9, config.curve_step_px)
        y = hist_bottom - exponential_isi_curve(lambda_eff, px / hist_w * config.max_isi) \
            * config.hist_height
        points = tuple((float(hist_x + a), float(b)) for a, b in zip(px, y))
        frame.add(Polyline(points, color=THEORY_COLOR, width=2.0, tag="theory"))
    else:
        LOG.debug("Surface too narrow (%.0f px) for the theory curve", w)
    return frame
