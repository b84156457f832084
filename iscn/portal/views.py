"""Host shell for the probability lab.

The host owns what the lab core deliberately does not: the animation
schedule, the mode and rate controls, the drawing surface and the live
readout. Each periodic callback measures dt on the host clock, runs one
lab tick and pushes the resulting frame into a Plotly pane.
"""

import time

try:
    import panel as pn
    HAS_PANEL = True
except ImportError:
    HAS_PANEL = False

from iscn.portal.figures import frame_to_figure
from iscn.probability.modes import MODE_LABELS, SimulationMode
from iscn.probability.render import Surface
from iscn.probability.session import ProbabilityLab
from iscn.utils import get_logger

LOG = get_logger("portal.views")

MODE_OPTIONS = {
    "Bernoulli (Coin)": SimulationMode.BERNOULLI.value,
    "Poisson (Spikes)": SimulationMode.POISSON.value,
}


def _require_panel():
    if not HAS_PANEL:
        raise ImportError(
            "Panel is required for the portal. Install with: pip install 'iscn[portal]'"
        )


class ProbabilityHost:
    """Controls, clock and animation loop around a ProbabilityLab.

    Parameters
    ----------
    lab : ProbabilityLab, optional
        The lab to drive. A fresh one (Poisson, rate 0.5) if None.
    surface : Surface, optional
        Drawing area; 800 x 400 by default.
    period_ms : int
        Callback period of the animation loop.
    clock : callable
        Monotonic clock in seconds.
    """

    def __init__(self, lab=None, surface=None, period_ms=33, clock=time.perf_counter):
        _require_panel()
        self.lab = lab or ProbabilityLab()
        self.surface = surface or Surface(800.0, 400.0)
        self.period_ms = period_ms
        self.clock = clock
        self._callback = None
        self._last = None

        labels = MODE_LABELS[self.lab.mode]
        self.mode_select = pn.widgets.Select(
            name="Mode", options=MODE_OPTIONS, value=self.lab.mode.value,
        )
        self.rate_slider = pn.widgets.FloatSlider(
            name=labels.param,
            start=self.lab.config.rate_min, end=self.lab.config.rate_max,
            step=0.01, value=self.lab.rate,
        )
        self.description = pn.pane.Markdown(
            self._description_md(), styles={"color": "#c9d1d9"},
        )
        self.live = pn.pane.Markdown(
            self._live_md(), styles={"color": "#ffffff"},
        )
        self.plot = pn.pane.Plotly(
            frame_to_figure(self.lab.draw(self.surface)),
        )

        self.mode_select.param.watch(self._on_mode, "value")
        self.rate_slider.param.watch(self._on_rate, "value")

    # --- Readouts ---

    def _description_md(self):
        labels = MODE_LABELS[self.lab.mode]
        return f"### {labels.header}\n*{labels.description}*"

    def _live_md(self):
        return f"**Live Data**  \n{self.lab.stats().readout()}"

    # --- Loop ---

    def tick(self):
        """One animation step: measure dt, advance the lab, redraw."""
        now = self.clock()
        dt = 0.0 if self._last is None else now - self._last
        self._last = now
        frame = self.lab.frame(dt, now, self.surface)
        if frame is not None:
            self.plot.object = frame_to_figure(frame)
        self.live.object = self._live_md()
        return frame

    def start(self):
        if self._callback is not None:
            return
        self._last = None
        self._callback = pn.state.add_periodic_callback(self.tick, period=self.period_ms)
        LOG.info("Animation loop started (%d ms period)", self.period_ms)

    def stop(self):
        if self._callback is None:
            return
        self._callback.stop()
        self._callback = None
        LOG.info("Animation loop stopped")

    @property
    def running(self):
        return self._callback is not None

    def resize(self, width, height):
        self.surface.resize(width, height)

    # --- Control events ---

    def _on_mode(self, event):
        was_running = self.running
        self.stop()
        self.lab.set_mode(event.new)
        self.rate_slider.name = MODE_LABELS[self.lab.mode].param
        self.description.object = self._description_md()
        self.live.object = self._live_md()
        self.plot.object = frame_to_figure(self.lab.draw(self.surface))
        if was_running:
            self.start()

    def _on_rate(self, event):
        self.lab.set_rate(event.new)

    def layout(self):
        controls = pn.Column(
            self.description,
            self.mode_select,
            self.rate_slider,
            self.live,
            width=320,
        )
        return pn.Row(controls, self.plot, sizing_mode="stretch_width")


def probability_view(lab=None, period_ms=33, autostart=True):
    """Build the probability lab tab.

    Parameters
    ----------
    lab : ProbabilityLab, optional
        The lab to drive.
    period_ms : int
        Animation callback period.
    autostart : bool
        Start the animation loop immediately (once the page has loaded,
        when served).

    Returns
    -------
    pn.Row
    """
    host = ProbabilityHost(lab=lab, period_ms=period_ms)
    if autostart:
        pn.state.onload(host.start)
    if pn.state.curdoc is not None:
        pn.state.on_session_destroyed(lambda session_context: host.stop())
    return host.layout()
