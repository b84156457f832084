"""Simulation sessions and the lab's mode state machine.

A `SimulationSession` owns everything that accumulates while one mode is
active: the generator, the history window, the statistics throttle and the
latest live statistics. Nothing is kept at module level.

The host drives time. It calls `tick(dt, now)` at its own cadence (a
browser refresh, a Panel periodic callback, or a test loop with synthetic
clocks); the core never schedules callbacks of its own.
"""

import math

from iscn.probability.config import DEFAULT_CONFIG
from iscn.probability.generator import BernoulliGenerator, PoissonGenerator
from iscn.probability.history import CountWindow, TimeWindow
from iscn.probability.modes import SimulationMode
from iscn.probability.render import render_bernoulli, render_poisson
from iscn.probability.statistics import (
    LiveStatistics,
    StatsThrottle,
    compute_statistics,
)
from iscn.utils import get_logger

LOG = get_logger("probability.session")


def _bernoulli_parts(config, rng, seed):
    return (BernoulliGenerator(config, rng=rng, seed=seed),
            CountWindow(config.bernoulli_window),
            render_bernoulli)


def _poisson_parts(config, rng, seed):
    return (PoissonGenerator(config, rng=rng, seed=seed),
            TimeWindow(config.poisson_window_s),
            render_poisson)


MODE_PARTS = {
    SimulationMode.BERNOULLI: _bernoulli_parts,
    SimulationMode.POISSON: _poisson_parts,
}
"""Per-mode factories: (config, rng, seed) -> (generator, window, renderer)."""


def clamp_rate(rate, config=DEFAULT_CONFIG):
    """Clamp a rate parameter into [rate_min, rate_max].

    Non-finite values cannot be clamped meaningfully and raise ValueError.
    """
    rate = float(rate)
    if not math.isfinite(rate):
        raise ValueError(f"Rate must be finite, got {rate}")
    clamped = min(max(rate, config.rate_min), config.rate_max)
    if clamped != rate:
        LOG.warning("Rate %.4f outside [%.2f, %.2f]; clamped to %.2f",
                    rate, config.rate_min, config.rate_max, clamped)
    return clamped


class SimulationSession:
    """One mode-active lifetime of the lab.

    Parameters
    ----------
    mode : SimulationMode or str
        Active mode.
    rate : float
        Initial rate parameter.
    config : LabConfig
    rng : object, optional
        Random source with a `random()` method, shared by the generator.
    seed : int, optional
        Seed for the default RandomState when rng is None.
    """

    def __init__(self, mode, rate=0.5, config=DEFAULT_CONFIG, rng=None, seed=None):
        self.mode = SimulationMode.parse(mode)
        self.config = config
        self.rate = clamp_rate(rate, config)
        self.generator, self.window, self._render = MODE_PARTS[self.mode](config, rng, seed)
        self.throttle = StatsThrottle(config.stats_interval_s)
        self._stats = LiveStatistics.empty(self.mode)
        self.now = 0.0
        LOG.debug("Session created: mode=%s, rate=%.2f", self.mode.value, self.rate)

    def set_rate(self, rate):
        self.rate = clamp_rate(rate, self.config)
        return self.rate

    def tick(self, dt, now, rate=None):
        """Advance the simulation by one host tick.

        Parameters
        ----------
        dt : float
            Seconds since the previous tick. Negative values count as 0.
        now : float
            Monotonic host clock (s).
        rate : float, optional
            New rate parameter for this and later ticks.

        Returns
        -------
        list
            Events emitted this tick (zero or one record).
        """
        if rate is not None:
            self.set_rate(rate)
        dt = max(float(dt), 0.0)
        self.now = float(now)

        events = []
        record = self.generator.step(dt, self.now, self.rate)
        if record is not None:
            self.window.append(record)
            events.append(record)
        self.window.prune(self.now)

        if self.throttle.due(self.now):
            self._stats = compute_statistics(self.mode, self.window.snapshot())
        return events

    def snapshot(self):
        return self.window.snapshot()

    def stats(self):
        """Live statistics as of the last throttled refresh."""
        return self._stats

    def draw(self, surface):
        """Frame for the current window, or None if the surface is not ready."""
        if surface is None or not surface.ready:
            LOG.debug("Surface not ready; skipping frame")
            return None
        return self._render(surface, self.snapshot(), self.now, self.rate, self.config)

    def reset(self):
        """Forget all history and statistics. Safe to call repeatedly."""
        self.window.clear()
        self.throttle.reset()
        self._stats = LiveStatistics.empty(self.mode)


class ProbabilityLab:
    """The lab's mode state machine.

    States are the simulation modes. Selecting a different mode replaces
    the session, which clears the history and zeroes the statistics.
    Selecting the active mode again changes nothing.

    Parameters
    ----------
    mode : SimulationMode or str
        Initial mode. The original lab opens on Poisson.
    rate : float
        Initial rate parameter, kept across mode switches.
    config : LabConfig
    rng : object, optional
        Random source passed to every session.
    seed : int, optional
        Seed for the default RandomState of every session.
    """

    def __init__(self, mode=SimulationMode.POISSON, rate=0.5, config=DEFAULT_CONFIG,
                 rng=None, seed=None):
        self.config = config
        self._rng = rng
        self._seed = seed
        self.session = SimulationSession(mode, rate, config, rng=rng, seed=seed)

    @property
    def mode(self):
        return self.session.mode

    @property
    def rate(self):
        return self.session.rate

    def set_rate(self, rate):
        return self.session.set_rate(rate)

    def set_mode(self, mode):
        """Switch modes; returns True if the mode changed."""
        mode = SimulationMode.parse(mode)
        if mode is self.session.mode:
            return False
        LOG.info("Switching mode %s -> %s", self.session.mode.value, mode.value)
        self.session = SimulationSession(mode, self.session.rate, self.config,
                                         rng=self._rng, seed=self._seed)
        return True

    def reset(self):
        LOG.debug("Resetting %s session", self.mode.value)
        self.session.reset()

    def tick(self, dt, now, rate=None):
        return self.session.tick(dt, now, rate=rate)

    def stats(self):
        return self.session.stats()

    def snapshot(self):
        return self.session.snapshot()

    def draw(self, surface):
        return self.session.draw(surface)

    def frame(self, dt, now, surface, rate=None):
        """Run one full tick (generate, store, draw) and return the frame."""
        self.tick(dt, now, rate=rate)
        return self.draw(surface)
