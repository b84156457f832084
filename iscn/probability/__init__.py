"""probability — Bernoulli and Poisson processes, live.

The probability lab animates two stochastic processes one frame at a time:
ion-channel coin flips sampled at a fixed rate (Bernoulli) and spike
arrivals at a controllable rate (Poisson). Each frame compares the
empirical picture with theory: bar heights against the target p, and the
ISI histogram against exp(-lambda t).
"""

from .config import LabConfig, DEFAULT_CONFIG
from .modes import SimulationMode, ModeLabels, MODE_LABELS
from .generator import (
    CoinFlip,
    Spike,
    fire_probability,
    BernoulliGenerator,
    PoissonGenerator,
)
from .history import CountWindow, TimeWindow
from .statistics import (
    LiveStatistics,
    StatsThrottle,
    compute_statistics,
    exponential_isi_curve,
    inter_arrivals,
    isi_histogram,
    outcome_counts,
    outcome_fractions,
    spike_times,
)
from .render import (
    Surface,
    Frame,
    Rect,
    Line,
    Circle,
    Polyline,
    Text,
    render_bernoulli,
    render_poisson,
)
from .session import SimulationSession, ProbabilityLab, clamp_rate
