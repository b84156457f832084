"""Event generators: time-stepped Bernoulli flips and Poisson spikes.

Both laws test a per-tick fire probability `rate * dt`, the thinning
approximation of a continuous-time process. It is valid while dt is small
against 1 / rate, which holds at display refresh rates (dt ~ 16 ms) for the
supported rates (at most 50 Hz). A tick therefore emits at most one event.

After a stall (a background tab resuming) dt can be large enough for
rate * dt to exceed 1. By default the probability is clamped to 1; with
`clamp=False` the literal comparison is kept, which fires with certainty.
"""

from dataclasses import dataclass

import numpy as np

from iscn.probability.config import DEFAULT_CONFIG


@dataclass(frozen=True)
class CoinFlip:
    """One Bernoulli outcome: 1 (channel open) or 0 (closed).

    seq is the arrival index within the session.
    """
    outcome: int
    seq: int

    @property
    def is_open(self):
        return self.outcome == 1


@dataclass(frozen=True)
class Spike:
    """One Poisson arrival at simulation time `time` (s)."""
    time: float


def fire_probability(rate_hz, dt, clamp=True):
    """Probability that an event falls within a tick of length dt.

    Negative dt is treated as an empty tick.
    """
    p = rate_hz * max(dt, 0.0)
    return min(p, 1.0) if clamp else p


def _make_rng(rng, seed):
    if rng is not None:
        return rng
    return np.random.RandomState(seed)


class BernoulliGenerator:
    """Samples an ion channel at a fixed flip rate.

    How often the channel is sampled (flip_rate) is decoupled from the
    channel's open probability (the rate parameter).

    Parameters
    ----------
    config : LabConfig
        Supplies flip_rate and the clamping policy.
    rng : object, optional
        Anything with a `random()` method returning floats in [0, 1).
    seed : int, optional
        Seed for the default numpy RandomState when rng is None.
    """

    def __init__(self, config=DEFAULT_CONFIG, rng=None, seed=None):
        self.config = config
        self.rng = _make_rng(rng, seed)
        self._count = 0

    def step(self, dt, now, rate):
        """Advance one tick; return a CoinFlip or None."""
        p_fire = fire_probability(self.config.flip_rate, dt,
                                  clamp=self.config.clamp_fire_probability)
        if self.rng.random() >= p_fire:
            return None
        outcome = 1 if self.rng.random() < rate else 0
        flip = CoinFlip(outcome=outcome, seq=self._count)
        self._count += 1
        return flip


class PoissonGenerator:
    """Emits spikes at lambda_eff = lambda_base + rate * lambda_span.

    Parameters
    ----------
    config : LabConfig
        Supplies the rate mapping and the clamping policy.
    rng : object, optional
        Anything with a `random()` method returning floats in [0, 1).
    seed : int, optional
        Seed for the default numpy RandomState when rng is None.
    """

    def __init__(self, config=DEFAULT_CONFIG, rng=None, seed=None):
        self.config = config
        self.rng = _make_rng(rng, seed)

    def step(self, dt, now, rate):
        """Advance one tick; return a Spike stamped with `now`, or None."""
        p_fire = fire_probability(self.config.effective_rate(rate), dt,
                                  clamp=self.config.clamp_fire_probability)
        if self.rng.random() < p_fire:
            return Spike(time=float(now))
        return None
