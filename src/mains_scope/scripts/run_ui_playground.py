"""
Interactive Streamlit playground for the split-phase mains scope.
Run with: streamlit run src/mains_scope/scripts/run_ui_playground.py
"""

import time

import streamlit as st

from mains_scope.analytics import (
    calculate_readouts,
    measure_window,
    plot_scope_window,
    plot_transient_history,
    safety_alerts,
)
from mains_scope.config import DISPLAY, FAULTS, MAINS, SPEED_PRESETS, TRIGGER
from mains_scope.engine import FAULT_CATALOGUE, SimulationParameters, TriggerMode
from mains_scope.session import SimulationSession


def get_session() -> SimulationSession:
    """One session per browser tab, kept across reruns"""
    if "session" not in st.session_state:
        st.session_state.session = SimulationSession()
    return st.session_state.session


def reset_session():
    """Reset callback, runs before the widgets of the next rerun exist"""
    get_session().reset()
    st.session_state.dc_offset = 0
    st.session_state.grounded = True


def render_sidebar(session: SimulationSession):
    """Sidebar controls wired to session commands"""
    st.sidebar.header("Supply Parameters")

    split_phase = st.sidebar.checkbox("Split-phase mode", MAINS["split_phase_mode"])
    frequency = st.sidebar.slider("Frequency (Hz)", 40, 70, int(MAINS["frequency"]), 1)
    amplitude = st.sidebar.slider("Amplitude (V peak)", 50, 400, int(MAINS["amplitude"]), 5)
    dc_offset = st.sidebar.slider("DC Offset (V)", -100, 100, 0, 1, key="dc_offset")
    grounded = st.sidebar.checkbox("Chassis grounded", True, key="grounded")

    params = SimulationParameters(
        frequency=frequency,
        amplitude=amplitude,
        dc_offset=dc_offset,
        chassis_grounded=grounded,
        split_phase_mode=split_phase,
    )
    if params != session.params:
        session.configure(params)

    st.sidebar.header("Faults")
    fault_names = {spec.display_name: fault_type for fault_type, spec in FAULT_CATALOGUE.items()}
    selected = st.sidebar.selectbox("Fault type", list(fault_names))
    intensity = st.sidebar.slider(
        "Fault intensity (%)", 0, 100, int(FAULTS["default_intensity"] * 100), 5
    )
    session.set_fault_intensity(intensity / 100)

    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("Trigger Fault"):
            session.trigger_fault(fault_names[selected])
    with col2:
        if st.button("Clear Faults"):
            session.clear_all_faults()

    st.sidebar.header("Trigger")
    mode = st.sidebar.radio(
        "Trigger mode",
        [m.value for m in TriggerMode],
        index=[m.value for m in TriggerMode].index(TRIGGER["mode"]),
        horizontal=True,
    )
    level = None
    if mode != TriggerMode.NONE.value:
        level = st.sidebar.slider("Trigger voltage (V)", -200, 200, int(TRIGGER["level"]), 5)
    session.set_trigger_config(mode, level)

    st.sidebar.header("Time Base")
    preset = st.sidebar.radio("Speed", list(SPEED_PRESETS), index=2, horizontal=True)
    session.set_speed_preset(preset)

    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("Pause" if session.playing else "Play"):
            session.toggle_play()
    with col2:
        st.button("Reset", on_click=reset_session)


def render_scope_tab(session: SimulationSession):
    """Render waveform, readouts and alerts"""
    readouts = calculate_readouts(session.params, session.time, session.speed)
    stats = session.get_statistics_snapshot()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Peak-to-Peak", f"{readouts['peak_to_peak']:.0f} V")
        st.metric("RMS Voltage", f"{readouts['rms_voltage']:.1f} V")
    with col2:
        st.metric("Zero Crossing", f"{readouts['zero_crossing']:g} V")
        st.metric("Ground", readouts["ground_state"])
    with col3:
        st.metric("Peak High", f"{stats.peak_high:.1f} V")
        st.metric("Peak Low", f"{stats.peak_low:.1f} V")
    with col4:
        st.metric("Sim Time", f"{readouts['sim_time']:.2f} s")
        st.metric("Time Rate", f"{readouts['time_rate']:.2f}x")
    st.caption(readouts["voltage_standard"])

    trail_times = list(session.trail)[-10:]
    trail = [session.sample_window(t) for t in trail_times]
    fig = plot_scope_window(session.sample_legs(), session.params.effective_offset, trail=trail)
    st.plotly_chart(fig, width="stretch")

    measured = measure_window(session.sample_window(), session.params.frequency)
    st.write(
        f"**Measured L1 window:** {measured['true_rms']:.1f} V RMS, "
        f"crest factor {measured['crest_factor']:.3f}, THD {measured['thd'] * 100:.2f}%"
    )

    st.subheader("Safety Alerts")
    alerts = safety_alerts(session.params, session.registry)
    if not alerts:
        st.success("No alerts")
    for alert in alerts:
        if alert["severity"] == "danger":
            st.error(alert["message"])
        else:
            st.warning(alert["message"])

    st.subheader("Active Faults")
    faults = session.active_faults()
    if not faults:
        st.write("*No active faults*")
    else:
        st.table(
            [
                {
                    "Fault": f["name"],
                    "Status": f["status"],
                    "Intensity": f"{f['intensity'] * 100:.0f}%",
                }
                for f in faults
            ]
        )


def render_transient_tab(session: SimulationSession):
    """Render RMS history with sag/swell events"""
    timebase_ms = st.slider("Timebase (ms)", 500, 10000, 5000, 500)
    history = session.get_transient_history(timebase_ms)
    st.plotly_chart(plot_transient_history(history), width="stretch")

    stats = session.get_statistics_snapshot()
    st.write(f"- Max RMS: {stats.max_rms:.1f} V at t={stats.max_rms_time:.3f}s")
    st.write(f"- Min RMS: {stats.min_rms:.1f} V at t={stats.min_rms_time:.3f}s")
    st.write(f"- Sag/swell samples in window: {len(session.statistics.events(history))}")


def main():
    """Main Streamlit application"""
    st.set_page_config(page_title="Mains Scope Playground", layout="wide")
    st.title("Split-Phase Mains Scope")

    session = get_session()
    render_sidebar(session)
    session.tick()

    selected_tab = st.radio(
        "Select View:",
        ["Scope", "Transients"],
        horizontal=True,
        label_visibility="collapsed",
    )

    if selected_tab == "Scope":
        render_scope_tab(session)
    else:
        render_transient_tab(session)

    live = st.sidebar.checkbox("Live update", True)
    if live and session.playing:
        time.sleep(DISPLAY["frame_interval"] * 4)
        st.rerun()


if __name__ == "__main__":
    main()
