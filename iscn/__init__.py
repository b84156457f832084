"""iscn — Introduction to Systems Computational Neuroscience labs.

Interactive simulations of introductory computational-neuroscience
concepts. The probability lab animates Bernoulli ion-channel flips and
Poisson spike trains, and compares what it sees against theory.

Subpackages:
    probability   Event generators, sliding-window history, live statistics
                  and the render/compare engine
    portal        Panel host shell driving the lab from a browser
    explore       Monte Carlo convergence experiments
    utils         Logging
"""

__version__ = "0.1.0"
