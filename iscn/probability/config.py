"""Configuration of the probability lab.

All constants of the simulation and of the drawing geometry live in one
`LabConfig`. A configuration can be loaded from a YAML file, built from a
mapping, or taken as `DEFAULT_CONFIG`.
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path

import yaml

from iscn.utils import get_logger

LOG = get_logger("probability.config")


@dataclass(frozen=True)
class LabConfig:
    """Constants for the generators, windows, statistics and renderer.

    Attributes
    ----------
    rate_min, rate_max : float
        Allowed range of the rate parameter.
    flip_rate : float
        Coin flips per second in Bernoulli mode, independent of p (Hz).
    bernoulli_window : int
        Number of most recent flips kept.
    lambda_base, lambda_span : float
        Poisson rate mapping: lambda_eff = lambda_base + rate * lambda_span (Hz).
    poisson_window_s : float
        Spikes older than now - poisson_window_s are evicted (s).
    max_isi : float
        Upper edge of the ISI histogram (s).
    isi_bins : int
        Number of ISI histogram bins over [0, max_isi).
    min_isi_samples : int
        Histogram and theory curve are drawn only from this many intervals.
    stats_interval_s : float
        Minimum host-clock time between live statistics refreshes (s).
    clamp_fire_probability : bool
        Clamp the per-tick fire probability rate * dt to 1.
    """
    rate_min: float = 0.01
    rate_max: float = 0.99
    flip_rate: float = 5.0
    bernoulli_window: int = 200
    lambda_base: float = 5.0
    lambda_span: float = 45.0
    poisson_window_s: float = 5.0
    max_isi: float = 0.2
    isi_bins: int = 30
    min_isi_samples: int = 3
    stats_interval_s: float = 0.1
    clamp_fire_probability: bool = True

    # --- Geometry (pixels) ---
    right_margin: float = 50.0
    coin_size: float = 10.0
    coin_gap: float = 5.0
    stream_y: float = 100.0
    bar_width: float = 60.0
    max_bar_height: float = 150.0
    bar_baseline_offset: float = 50.0
    raster_y: float = 80.0
    raster_half_height: float = 15.0
    scroll_speed: float = 150.0
    hist_height: float = 150.0
    hist_bottom_offset: float = 40.0
    hist_side_margin: float = 60.0
    curve_step_px: int = 2

    def __post_init__(self):
        if not 0.0 <= self.rate_min <= self.rate_max <= 1.0:
            raise ValueError(
                f"Need 0 <= rate_min <= rate_max <= 1, got "
                f"[{self.rate_min}, {self.rate_max}]"
            )
        positive = ("flip_rate", "bernoulli_window", "poisson_window_s",
                    "max_isi", "isi_bins", "scroll_speed", "curve_step_px")
        for name in positive:
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.lambda_base < 0 or self.lambda_span < 0:
            raise ValueError("lambda_base and lambda_span must be non-negative")
        if self.min_isi_samples < 1:
            raise ValueError("min_isi_samples must be at least 1")
        if self.stats_interval_s < 0:
            raise ValueError("stats_interval_s must be non-negative")

    @property
    def isi_bin_width(self):
        return self.max_isi / self.isi_bins

    def effective_rate(self, rate):
        """Poisson event rate (Hz) for a normalised rate parameter."""
        return self.lambda_base + rate * self.lambda_span

    @classmethod
    def from_dict(cls, mapping):
        """Build a configuration, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(mapping) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**mapping)

    @classmethod
    def from_yaml(cls, path):
        """Load a configuration from a YAML file.

        Keys absent from the file keep their defaults.
        """
        with open(path, "r") as fptr:
            mapping = yaml.safe_load(fptr) or {}
        LOG.info("Loaded lab configuration from %s", path)
        return cls.from_dict(mapping)

    def dump_yaml(self, path):
        """Dump this configuration to a YAML file and return its path."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as fptr:
            yaml.safe_dump(asdict(self), fptr, sort_keys=False)
        return path


DEFAULT_CONFIG = LabConfig()
