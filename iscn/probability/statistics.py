"""Aggregates derived from a history snapshot.

Everything here is rebuilt from scratch on every call; nothing is updated
incrementally, so no result can go stale relative to the window.
"""

from dataclasses import dataclass

import numpy as np

from iscn.probability.modes import SimulationMode


# ---------------------------------------------------------------------------
# Bernoulli aggregates
# ---------------------------------------------------------------------------

def outcome_counts(flips):
    """Return (closed_count, open_count) for a sequence of CoinFlip."""
    n_open = sum(1 for f in flips if f.outcome == 1)
    return len(flips) - n_open, n_open


def outcome_fractions(flips):
    """Return (closed_fraction, open_fraction).

    An empty window divides by 1 and yields (0.0, 0.0).
    """
    closed, opened = outcome_counts(flips)
    total = len(flips) or 1
    return closed / total, opened / total


# ---------------------------------------------------------------------------
# Poisson aggregates
# ---------------------------------------------------------------------------

def spike_times(spikes):
    """Timestamps of a sequence of Spike, as a float array."""
    return np.array([s.time for s in spikes], dtype=np.float64)


def inter_arrivals(times):
    """Consecutive differences of arrival times (length n - 1)."""
    times = np.asarray(times, dtype=np.float64)
    if times.size < 2:
        return np.array([], dtype=np.float64)
    return np.diff(times)


def isi_histogram(isis, max_isi, n_bins):
    """Count inter-spike intervals into fixed-width bins over [0, max_isi).

    Intervals outside the range are ignored. Each interval inside it is
    counted exactly once, so counts.sum() equals the number of intervals
    in [0, max_isi).

    Returns
    -------
    counts : np.ndarray
        Integer counts, shape (n_bins,).
    edges : np.ndarray
        Bin edges, shape (n_bins + 1,).
    """
    isis = np.asarray(isis, dtype=np.float64)
    width = max_isi / n_bins
    inside = isis[(isis >= 0.0) & (isis < max_isi)]
    # Rounding can push an interval just below max_isi into bin n_bins.
    idx = np.minimum(np.floor(inside / width).astype(int), n_bins - 1)
    counts = np.bincount(idx, minlength=n_bins)
    edges = np.linspace(0.0, max_isi, n_bins + 1)
    return counts, edges


def exponential_isi_curve(lambda_eff, t):
    """Theoretical ISI survival shape exp(-lambda * t), peak 1 at t = 0."""
    return np.exp(-lambda_eff * np.asarray(t, dtype=np.float64))


# ---------------------------------------------------------------------------
# Live statistics for the host readout
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LiveStatistics:
    """Summary numbers shown next to the canvas.

    Attributes
    ----------
    mode : SimulationMode
    open_count : int
        Bernoulli: open outcomes in the window.
    total_count : int
        Bernoulli: flips in the window.
    empirical_probability : float
        Bernoulli: open_count / total_count, 0.0 for an empty window.
    spike_count : int
        Poisson: spikes in the window.
    """
    mode: SimulationMode
    open_count: int = 0
    total_count: int = 0
    empirical_probability: float = 0.0
    spike_count: int = 0

    @classmethod
    def empty(cls, mode):
        return cls(mode=SimulationMode.parse(mode))

    def readout(self):
        """One-line live-data text."""
        if self.mode is SimulationMode.BERNOULLI:
            return (f"Open: {self.open_count}/{self.total_count} "
                    f"({self.empirical_probability:.2f})")
        return f"Count: {self.spike_count} spikes"


def compute_statistics(mode, records):
    """LiveStatistics for a window snapshot."""
    mode = SimulationMode.parse(mode)
    if mode is SimulationMode.BERNOULLI:
        _, n_open = outcome_counts(records)
        total = len(records)
        return LiveStatistics(
            mode=mode,
            open_count=n_open,
            total_count=total,
            empirical_probability=n_open / (total or 1),
        )
    return LiveStatistics(mode=mode, spike_count=len(records))


class StatsThrottle:
    """Gate that opens at most once per `interval` seconds of host clock.

    The first call after construction or reset always opens.
    """

    def __init__(self, interval):
        self.interval = interval
        self._last = None

    def due(self, now):
        if self._last is None or now - self._last > self.interval:
            self._last = now
            return True
        return False

    def reset(self):
        self._last = None
