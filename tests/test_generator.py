"""Tests for the Bernoulli and Poisson event generators."""

import numpy as np
import pytest

from iscn.probability.config import LabConfig
from iscn.probability.generator import (
    BernoulliGenerator,
    CoinFlip,
    PoissonGenerator,
    Spike,
    fire_probability,
)


class ScriptedRNG:
    """Returns a fixed sequence of uniform draws."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls]
        self.calls += 1
        return value


# ---------------------------------------------------------------------------
# Fire probability
# ---------------------------------------------------------------------------

class TestFireProbability:
    def test_small_dt(self):
        assert fire_probability(5.0, 0.01) == pytest.approx(0.05)

    def test_clamped_after_stall(self):
        assert fire_probability(50.0, 2.0) == 1.0

    def test_unclamped_exceeds_one(self):
        assert fire_probability(50.0, 2.0, clamp=False) == pytest.approx(100.0)

    def test_negative_dt_is_empty_tick(self):
        assert fire_probability(50.0, -0.5) == 0.0


# ---------------------------------------------------------------------------
# Bernoulli
# ---------------------------------------------------------------------------

class TestBernoulliGenerator:
    def test_open_outcome(self):
        gen = BernoulliGenerator(rng=ScriptedRNG([0.0, 0.3]))
        flip = gen.step(0.2, 0.2, rate=0.5)
        assert flip == CoinFlip(outcome=1, seq=0)
        assert flip.is_open

    def test_closed_outcome(self):
        gen = BernoulliGenerator(rng=ScriptedRNG([0.0, 0.7]))
        flip = gen.step(0.2, 0.2, rate=0.5)
        assert flip.outcome == 0

    def test_no_fire_draws_once(self):
        rng = ScriptedRNG([0.5])
        gen = BernoulliGenerator(rng=rng)
        # p_fire = 5 Hz * 0.016 s = 0.08
        assert gen.step(0.016, 0.016, rate=0.9) is None
        assert rng.calls == 1

    def test_flip_rate_independent_of_p(self):
        """The fire test uses flip_rate, not the rate parameter."""
        gen = BernoulliGenerator(rng=ScriptedRNG([0.07, 0.0]))
        # 0.07 < 0.08 fires even though p is tiny
        assert gen.step(0.016, 0.016, rate=0.01) is not None

    def test_sequence_numbers_increase(self):
        # p_fire = 5 Hz * 0.1 s = 0.5
        gen = BernoulliGenerator(rng=ScriptedRNG([0.0, 0.1, 0.9, 0.0, 0.1]))
        first = gen.step(0.1, 0.1, 0.5)
        assert gen.step(0.1, 0.2, 0.5) is None
        second = gen.step(0.1, 0.3, 0.5)
        assert (first.seq, second.seq) == (0, 1)

    def test_seeded_reproducible(self):
        a = BernoulliGenerator(seed=7)
        b = BernoulliGenerator(seed=7)
        for step in range(100):
            assert a.step(0.05, step * 0.05, 0.3) == b.step(0.05, step * 0.05, 0.3)


# ---------------------------------------------------------------------------
# Poisson
# ---------------------------------------------------------------------------

class TestPoissonGenerator:
    def test_effective_rate_mapping(self):
        config = LabConfig()
        assert config.effective_rate(0.0) == 5.0
        assert config.effective_rate(1.0) == 50.0
        assert config.effective_rate(0.5) == pytest.approx(27.5)

    def test_spike_carries_clock(self):
        gen = PoissonGenerator(rng=ScriptedRNG([0.0]))
        assert gen.step(0.016, 3.25, rate=0.5) == Spike(time=3.25)

    def test_threshold(self):
        # p_fire = 27.5 Hz * 0.02 s = 0.55
        gen = PoissonGenerator(rng=ScriptedRNG([0.54, 0.56]))
        assert gen.step(0.02, 1.0, 0.5) is not None
        assert gen.step(0.02, 1.02, 0.5) is None

    def test_zero_dt_never_fires(self):
        gen = PoissonGenerator(rng=ScriptedRNG([0.0]))
        assert gen.step(0.0, 1.0, 0.99) is None

    def test_stall_fires_at_most_once(self):
        """A 3 s stall at 50 Hz is still a single tick with a single event."""
        gen = PoissonGenerator(rng=ScriptedRNG([0.999]))
        assert isinstance(gen.step(3.0, 10.0, 1.0), Spike)

    def test_mean_rate_close_to_lambda(self):
        gen = PoissonGenerator(seed=1)
        dt = 1.0 / 60.0
        n = sum(gen.step(dt, i * dt, 0.0) is not None for i in range(60 * 200))
        # lambda = 5 Hz over 200 s: 1000 expected, sd ~ 31
        assert 880 < n < 1120

    def test_default_rng_is_numpy(self):
        assert isinstance(PoissonGenerator().rng, np.random.RandomState)
