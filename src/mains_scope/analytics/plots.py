"""
Plotting functions for scope and transient history visualization.
"""

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from ..config import STATISTICS
from ..engine import SampleWindow, TransientEvent, classify

LEG_COLORS = {"L1": "#4CAF50", "L2": "#FF9800"}


def plot_scope_window(
    legs: dict[str, SampleWindow],
    zero_level: float = 0.0,
    trail: list[SampleWindow] | None = None,
    title: str = "Split-Phase Waveform",
    show: bool = False,
):
    """
    Plot the displayed window of every leg, oscilloscope style.

    Args:
        legs: {"L1": window, "L2": window} from SimulationSession.sample_legs
        zero_level: Effective DC offset (V), drawn as the zero line
        trail: Older L1 windows drawn as a fading trail
        title: Plot title
        show: Call fig.show() before returning

    Returns:
        plotly Figure
    """
    fig = go.Figure()
    reference = next(iter(legs.values()))

    # Time axis relative to the window start keeps a triggered trace stationary
    for i, window in enumerate(trail or []):
        alpha = (i + 1) / (len(trail) + 1) * 0.3
        fig.add_trace(
            go.Scatter(
                x=(window.times - window.window_start) * 1000,
                y=window.samples,
                mode="lines",
                line=dict(color=f"rgba(76, 175, 80, {alpha:.3f})", width=1),
                showlegend=False,
                hoverinfo="skip",
            )
        )

    for name, window in legs.items():
        fig.add_trace(
            go.Scatter(
                x=(window.times - window.window_start) * 1000,
                y=window.samples,
                mode="lines",
                name=f"{name} (Hot)" if name == "L1" else f"{name} (Hot) - 180°",
                line=dict(color=LEG_COLORS.get(name, "white"), width=2),
            )
        )

    fig.add_hline(
        y=zero_level,
        line=dict(color="#2196F3" if zero_level == 0 else "#FF9800", dash="dash"),
        annotation_text=f"Zero: {zero_level:g}V",
    )

    if reference.trigger_time is not None:
        trigger_x = (reference.trigger_time - reference.window_start) * 1000
        fig.add_vline(x=trigger_x, line=dict(color="#FF4444", width=2))
        fig.add_trace(
            go.Scatter(
                x=[trigger_x],
                y=[reference.trigger_level],
                mode="markers",
                name=f"T: {reference.trigger_level:g}V",
                marker=dict(color="#FF4444", symbol="line-ew-open", size=16),
            )
        )

    fig.update_xaxes(title_text="Time in window (ms)")
    fig.update_yaxes(title_text="Voltage (V)")
    fig.update_layout(title_text=title, template="plotly_dark", showlegend=True)

    if show:
        fig.show()
    return fig


def plot_transient_history(
    history: list,
    reference: float = STATISTICS["nominal_rms_reference"],
    title: str = "Transient History",
    show: bool = False,
):
    """
    Plot RMS estimate and per-leg peak magnitudes over recent ticks.

    Args:
        history: TransientSample list from SimulationSession.get_transient_history
        reference: Nominal RMS reference (V) for the sag/swell thresholds
        title: Plot title
        show: Call fig.show() before returning

    Returns:
        plotly Figure
    """
    fig = make_subplots(
        rows=2,
        cols=1,
        shared_xaxes=True,
        vertical_spacing=0.08,
        subplot_titles=("RMS Estimate", "Peak Magnitude"),
    )

    if history:
        t0 = history[-1].wall_clock_timestamp
        x = np.array([s.wall_clock_timestamp - t0 for s in history]) * 1000
    else:
        x = np.array([])

    rms = [s.rms_estimate for s in history]
    fig.add_trace(
        go.Scatter(x=x, y=rms, mode="lines", name="RMS", line=dict(color="#2196F3")),
        row=1,
        col=1,
    )

    # Sag / swell thresholds
    for fraction, label in (
        (STATISTICS["sag_threshold"], "Sag"),
        (STATISTICS["swell_threshold"], "Swell"),
    ):
        fig.add_hline(
            y=fraction * reference,
            line=dict(color="#888", dash="dot"),
            annotation_text=f"{label} {fraction * reference:.0f}V",
            row=1,
            col=1,
        )

    event_colors = {TransientEvent.SAG: "#f44336", TransientEvent.SWELL: "#ff9800"}
    for event, color in event_colors.items():
        idx = [i for i, s in enumerate(history) if classify(s, reference) is event]
        if idx:
            fig.add_trace(
                go.Scatter(
                    x=x[idx],
                    y=[rms[i] for i in idx],
                    mode="markers",
                    name=event.value.capitalize(),
                    marker=dict(color=color, size=6),
                ),
                row=1,
                col=1,
            )

    for attr, name in (("peak_magnitude_l1", "L1"), ("peak_magnitude_l2", "L2")):
        fig.add_trace(
            go.Scatter(
                x=x,
                y=[getattr(s, attr) for s in history],
                mode="lines",
                name=f"|{name}|",
                line=dict(color=LEG_COLORS[name]),
            ),
            row=2,
            col=1,
        )

    fig.update_xaxes(title_text="Wall-clock time (ms)", row=2, col=1)
    fig.update_yaxes(title_text="Voltage (V RMS)", row=1, col=1)
    fig.update_yaxes(title_text="Voltage (V)", row=2, col=1)
    fig.update_layout(title_text=title, template="plotly_dark", showlegend=True)

    if show:
        fig.show()
    return fig
