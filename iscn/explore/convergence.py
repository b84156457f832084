"""Monte Carlo checks that the lab's generators obey their laws.

The animation loop only ever shows a short window, which is too noisy to
judge by eye whether the generators are right. These experiments run the
same generators for many synthetic ticks and compare against theory:

1. Bernoulli: the fraction of open outcomes converges to p, within the
   binomial 95% interval 1.96 * sqrt(p (1 - p) / n).
2. Poisson: the thinned per-tick process fires at about lambda_eff and its
   inter-spike intervals have mean near 1 / lambda_eff and CV near 1.
"""

import numpy as np
import pandas as pd

from iscn.probability.config import DEFAULT_CONFIG
from iscn.probability.generator import BernoulliGenerator, PoissonGenerator
from iscn.probability.statistics import inter_arrivals

from iscn.utils import get_logger

LOG = get_logger("explore.convergence")


def bernoulli_convergence(rates=None, n_flips=5000, config=DEFAULT_CONFIG, seed=42):
    """Empirical open probability against the target, for several p.

    The generator is driven at dt = 1 / flip_rate, so every tick flips.

    Parameters
    ----------
    rates : list of float, optional
        Target probabilities. Default: [0.1, 0.25, 0.5, 0.75, 0.9].
    n_flips : int
        Flips per rate.
    config : LabConfig
    seed : int
        Random seed.

    Returns
    -------
    pd.DataFrame
        Columns: rate, n_flips, open_count, empirical_p, abs_error, ci95,
        within_ci.
    """
    if rates is None:
        rates = [0.1, 0.25, 0.5, 0.75, 0.9]
    dt = 1.0 / config.flip_rate

    rows = []
    for p in rates:
        LOG.info("Bernoulli convergence: p=%.2f, %d flips", p, n_flips)
        gen = BernoulliGenerator(config, seed=seed)
        n_open, n_total = 0, 0
        for step in range(n_flips):
            flip = gen.step(dt, step * dt, p)
            if flip is not None:
                n_open += flip.outcome
                n_total += 1
        empirical = n_open / (n_total or 1)
        ci95 = 1.96 * np.sqrt(p * (1.0 - p) / max(n_total, 1))
        rows.append({
            "rate": p,
            "n_flips": n_total,
            "open_count": n_open,
            "empirical_p": empirical,
            "abs_error": abs(empirical - p),
            "ci95": float(ci95),
            "within_ci": bool(abs(empirical - p) <= ci95),
        })

    return pd.DataFrame(rows)


def poisson_isi_sweep(rates=None, duration_s=60.0, dt=1.0 / 60.0,
                      config=DEFAULT_CONFIG, seed=42):
    """Spike count and ISI statistics of the thinned Poisson generator.

    Parameters
    ----------
    rates : list of float, optional
        Normalised rate parameters. Default: [0.01, 0.25, 0.5, 0.75, 0.99].
    duration_s : float
        Simulated seconds per rate.
    dt : float
        Tick length (s). The default matches a 60 Hz display.
    config : LabConfig
    seed : int
        Random seed.

    Returns
    -------
    pd.DataFrame
        Columns: rate, lambda_eff, n_spikes, empirical_rate, mean_isi,
        expected_isi, isi_cv.
    """
    if rates is None:
        rates = [0.01, 0.25, 0.5, 0.75, 0.99]
    n_steps = int(round(duration_s / dt))

    rows = []
    for r in rates:
        lam = config.effective_rate(r)
        LOG.info("Poisson ISI sweep: rate=%.2f (lambda=%.1f Hz), %.0f s", r, lam, duration_s)
        gen = PoissonGenerator(config, seed=seed)
        times = []
        for step in range(n_steps):
            spike = gen.step(dt, step * dt, r)
            if spike is not None:
                times.append(spike.time)
        isis = inter_arrivals(times)
        mean_isi = float(np.mean(isis)) if len(isis) else float("nan")
        isi_cv = float(np.std(isis) / np.mean(isis)) if len(isis) > 1 else float("nan")
        rows.append({
            "rate": r,
            "lambda_eff": lam,
            "n_spikes": len(times),
            "empirical_rate": len(times) / duration_s,
            "mean_isi": mean_isi,
            "expected_isi": 1.0 / lam,
            "isi_cv": isi_cv,
        })

    return pd.DataFrame(rows)


def convergence_report(bernoulli_df=None, poisson_df=None):
    """Format convergence results as a text report.

    Parameters
    ----------
    bernoulli_df : pd.DataFrame, optional
        Output of bernoulli_convergence.
    poisson_df : pd.DataFrame, optional
        Output of poisson_isi_sweep.

    Returns
    -------
    str
    """
    lines = ["=== Generator convergence ==="]

    if bernoulli_df is not None and len(bernoulli_df):
        n_ok = int(bernoulli_df["within_ci"].sum())
        lines.append(f"Bernoulli: {n_ok}/{len(bernoulli_df)} rates within 95% CI")
        for _, row in bernoulli_df.iterrows():
            lines.append(
                f"  p={row['rate']:.2f}: p_hat={row['empirical_p']:.3f} "
                f"(n={row['n_flips']}, |err|={row['abs_error']:.3f}, "
                f"ci={row['ci95']:.3f})"
            )

    if poisson_df is not None and len(poisson_df):
        lines.append("Poisson:")
        for _, row in poisson_df.iterrows():
            lines.append(
                f"  lambda={row['lambda_eff']:.1f} Hz: "
                f"observed {row['empirical_rate']:.1f} Hz, "
                f"mean ISI {row['mean_isi'] * 1000:.1f} ms "
                f"(expected {row['expected_isi'] * 1000:.1f} ms), "
                f"CV {row['isi_cv']:.2f}"
            )

    return "\n".join(lines)
