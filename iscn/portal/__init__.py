"""portal — Browser host for the iscn labs.

A Panel application that drives the probability lab from a periodic
callback and displays its frames through Plotly.

Launch with:
    panel serve iscn/portal/app.py
or in a notebook:
    from iscn.portal.app import build_portal
    portal = build_portal()
    portal.servable()

Requires: panel >= 1.0, plotly
"""

from .figures import frame_to_figure
from .views import ProbabilityHost, probability_view
from .app import build_portal
