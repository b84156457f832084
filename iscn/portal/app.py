"""Assemble the iscn portal.

Usage:
    # In a notebook
    from iscn.portal.app import build_portal
    portal = build_portal()
    portal.servable()

    # As a standalone app
    panel serve iscn/portal/app.py --show
"""

import panel as pn

from iscn.utils import get_logger

LOG = get_logger("portal.app")


def build_portal(lab=None, autostart=True):
    """Build the complete portal application.

    Parameters
    ----------
    lab : ProbabilityLab, optional
        Lab driven by the Probability tab. A fresh one if None.
    autostart : bool
        Start animation loops as soon as the page loads.

    Returns
    -------
    pn.Tabs
        The complete portal, ready for .servable() or .show().
    """
    pn.extension("plotly", sizing_mode="stretch_width")

    from iscn.portal.views import probability_view

    tabs = [
        ("Probability", probability_view(lab=lab, autostart=autostart)),
    ]
    portal = pn.Tabs(*tabs, sizing_mode="stretch_both")

    LOG.info("Portal built: %d tabs", len(tabs))
    return portal


# --- Standalone entry point ---
if __name__ == "__main__" or __name__.startswith("bokeh"):
    portal = build_portal()
    portal.servable()
