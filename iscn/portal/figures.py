"""Turn render frames into Plotly figures.

Frames use canvas coordinates (origin top-left, y pointing down). The
figure reverses its y axis and pins both axes to the frame bounds, so a
primitive at (x, y) lands on the same pixel it would on a canvas.
"""

try:
    import plotly.graph_objects as go
    HAS_PLOTLY = True
except ImportError:
    HAS_PLOTLY = False

from iscn.probability.render import BACKGROUND, Circle, Line, Polyline, Rect, Text


def _require_plotly():
    if not HAS_PLOTLY:
        raise ImportError(
            "plotly is required to display frames. "
            "Install it with: pip install 'iscn[portal]'"
        )


def _font_size(font):
    head = font.split("px")[0].strip()
    return int(float(head)) if head.replace(".", "", 1).isdigit() else 12


def _shape(cmd):
    if isinstance(cmd, Rect):
        return dict(
            type="rect", x0=cmd.x, y0=cmd.y,
            x1=cmd.x + cmd.width, y1=cmd.y + cmd.height,
            fillcolor=cmd.fill or "rgba(0,0,0,0)",
            line=dict(color=cmd.stroke, width=1) if cmd.stroke else dict(width=0),
            layer="below",
        )
    if isinstance(cmd, Line):
        return dict(
            type="line", x0=cmd.x0, y0=cmd.y0, x1=cmd.x1, y1=cmd.y1,
            line=dict(color=cmd.color, width=cmd.width,
                      dash="dash" if cmd.dash else "solid"),
        )
    if isinstance(cmd, Circle):
        return dict(
            type="circle",
            x0=cmd.x - cmd.radius, y0=cmd.y - cmd.radius,
            x1=cmd.x + cmd.radius, y1=cmd.y + cmd.radius,
            fillcolor=cmd.fill, line=dict(width=0),
        )
    return None


def frame_to_figure(frame, title=None):
    """Render a Frame as a Plotly figure.

    Parameters
    ----------
    frame : Frame or None
        Draw commands. None (surface not ready) gives an empty dark figure.
    title : str, optional
        Figure title.

    Returns
    -------
    plotly.graph_objects.Figure
    """
    _require_plotly()
    fig = go.Figure()
    width = frame.width if frame is not None else 800.0
    height = frame.height if frame is not None else 400.0

    shapes, annotations = [], []
    for cmd in (frame.commands if frame is not None else []):
        if isinstance(cmd, Polyline):
            xs, ys = zip(*cmd.points) if cmd.points else ((), ())
            fig.add_trace(go.Scatter(
                x=list(xs), y=list(ys), mode="lines", name=cmd.tag,
                line=dict(color=cmd.color, width=cmd.width),
                hoverinfo="skip", showlegend=False,
            ))
        elif isinstance(cmd, Text):
            annotations.append(dict(
                x=cmd.x, y=cmd.y, text=cmd.text, showarrow=False,
                xanchor="left", yanchor="bottom",
                font=dict(color=cmd.color, size=_font_size(cmd.font)),
            ))
        else:
            shape = _shape(cmd)
            if shape is not None:
                shapes.append(shape)

    fig.update_layout(
        title=title,
        width=int(width), height=int(height),
        margin=dict(l=0, r=0, t=30 if title else 0, b=0),
        paper_bgcolor=BACKGROUND, plot_bgcolor=BACKGROUND,
        template="plotly_dark",
        shapes=shapes, annotations=annotations,
        xaxis=dict(range=[0, width], visible=False, fixedrange=True),
        yaxis=dict(range=[height, 0], visible=False, fixedrange=True),
    )
    return fig
