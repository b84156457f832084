"""Experiments that check the labs against theory."""

from .convergence import (
    bernoulli_convergence,
    poisson_isi_sweep,
    convergence_report,
)
