"""Simulation modes of the probability lab and their display labels."""

from dataclasses import dataclass
from enum import Enum


class SimulationMode(Enum):
    """Which generator law, window policy and renderer are active."""
    BERNOULLI = "coin"
    POISSON = "poisson"

    @classmethod
    def parse(cls, value):
        """Accept a mode, its value ("coin") or its name ("Bernoulli")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for mode in cls:
                if key in (mode.value, mode.name.lower()):
                    return mode
        raise ValueError(
            f"Unknown simulation mode {value!r}; expected one of "
            f"{[m.value for m in cls]}"
        )


@dataclass(frozen=True)
class ModeLabels:
    """Text shown by the host around the canvas."""
    header: str
    param: str
    description: str
    color: str


MODE_LABELS = {
    SimulationMode.BERNOULLI: ModeLabels(
        header="Bernoulli Process",
        param="Probability (p)",
        description="Simulating independent binary events (Ion Channels).",
        color="#10b981",
    ),
    SimulationMode.POISSON: ModeLabels(
        header="Poisson Process",
        param="Firing Rate (λ)",
        description="Simulating random spike arrival times.",
        color="#a855f7",
    ),
}
