#!/usr/bin/env python3
"""
Streamlit web app for interactive simulated-annealing palette generation.
"""

import threading

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from palette_colors import calculate_luminance, contrast_ratio, parse_color, to_hex
from palette_fitness import split_roles
from palette_report import palette_swatches
from simulated_annealing import (
    AnnealingConfig, OracleError, RunState,
    SimulatedAnnealing, sleep_pacing,
)


PACE_SECONDS = 0.05
REFRESH_MS = 500


def _text_color(rgb):
    return 'white' if calculate_luminance(rgb) < 0.5 else '#333333'


def swatch_html(label, rgb):
    hex_code = to_hex(rgb)
    return f"""
    <div style="
        background-color: {hex_code};
        border: 2px solid #333;
        border-radius: 8px;
        padding: 12px;
        text-align: center;
        color: {_text_color(rgb)};
        font-family: monospace;
        box-shadow: 0 2px 8px rgba(0,0,0,0.2);
        min-height: 120px;
    ">
        <div style="font-size: 11px; font-weight: bold; margin-bottom: 8px; font-family: sans-serif;">{label}</div>
        <div style="font-size: 12px; font-weight: bold;">{hex_code}</div>
        <div style="font-size: 9px;">RGB({int(rgb[0])}, {int(rgb[1])}, {int(rgb[2])})</div>
    </div>
    """


def preview_html(anchor, solution):
    """Small mock page painted with the palette."""
    rgb_roles = split_roles(solution)
    roles = {name: to_hex(rgb) for name, rgb in rgb_roles.items()}
    primary = to_hex(anchor)
    readable = contrast_ratio(rgb_roles['main_text'], rgb_roles['background'])
    return f"""
    <div style="background: {roles['background']}; color: {roles['main_text']};
                padding: 24px; border-radius: 12px; font-family: sans-serif; max-width: 420px;">
        <div style="font-size: 20px; font-weight: 700; color: {primary}; margin-bottom: 12px;">Palette preview</div>
        <div style="background: {roles['surface']}; padding: 16px; border-radius: 8px; margin-bottom: 16px;">
            <div style="font-size: 14px; margin-bottom: 6px;">Card on the surface color</div>
            <div style="font-size: 12px; opacity: 0.85;">Main text contrast on the background: {readable:.2f}:1</div>
        </div>
        <span style="background: {primary}; color: {roles['button_text']}; padding: 8px 16px;
                     border-radius: 6px; font-weight: 600; margin-right: 8px;">Primary action</span>
        <span style="background: {roles['accent']}; color: {roles['button_text']}; padding: 8px 16px;
                     border-radius: 6px; font-weight: 600;">Accent action</span>
    </div>
    """


def _run_background(annealer, errors):
    # Runs off the script thread, so report failures through the shared list
    try:
        annealer.run()
    except OracleError as e:
        errors.append(str(e))


st.set_page_config(page_title="Simulated Annealing Palette Generator", layout="wide")
st.title("🎨 Simulated Annealing Palette Generator")
st.caption(
    "Simulated annealing is a probabilistic technique for finding an approximate solution to an "
    "optimization problem. Here it generates a color palette that complements a primary color."
)

if 'sa_annealer' not in st.session_state:
    st.session_state['sa_annealer'] = SimulatedAnnealing(pacing=sleep_pacing(PACE_SECONDS))
    st.session_state['sa_errors'] = []
annealer = st.session_state['sa_annealer']

input_cols = st.columns(4)
with input_cols[0]:
    primary_hex = st.color_picker(
        "Primary color",
        value="#3366CC",
        help="The base for the palette. The algorithm creates colors that complement it."
    )
with input_cols[1]:
    patience = st.number_input(
        "Patience", min_value=0, value=50, step=1,
        help="Iterations without a move the algorithm waits before declaring local convergence."
    )
with input_cols[2]:
    decay_rate = st.number_input(
        "Temperature Decay Rate (%)", min_value=0, max_value=100, value=90, step=1,
        help="Share of the temperature kept each iteration. Lower values cool faster and converge sooner."
    )
with input_cols[3]:
    max_iterations = st.number_input(
        "Iterations", min_value=1, value=1000, step=1,
        help="Maximum number of iterations before the search stops."
    )

config = AnnealingConfig(patience=int(patience), decay_rate=decay_rate, max_iterations=int(max_iterations))
config_error = None
try:
    config.validate()
    anchor = parse_color(primary_hex)
except ValueError as e:
    config_error = str(e)
    st.error(config_error)

running = annealer.state == RunState.RUNNING
if running:
    label = "Stop"
elif annealer.state == RunState.IDLE:
    label = "Run"
else:
    label = "Run again"

if st.button(label, disabled=config_error is not None and not running, type='primary'):
    if running:
        annealer.stop()
    else:
        st.session_state['sa_errors'].clear()
        annealer.start(config, anchor)
        thread = threading.Thread(target=_run_background,
                                  args=(annealer, st.session_state['sa_errors']), daemon=True)
        thread.start()
    st.rerun()

if annealer.state == RunState.RUNNING:
    st_autorefresh(REFRESH_MS, key="sa_autorefresh")

if st.session_state['sa_errors']:
    st.error(f"Search stopped: {st.session_state['sa_errors'][-1]}")

st.divider()

snapshot = annealer.snapshot()
if snapshot.solution:
    st.write(f"State: **{snapshot.state.value}** · iteration {snapshot.iteration} · "
             f"temperature {snapshot.temperature:.4f} · patience used {snapshot.patience_count}")

    left, right = st.columns(2)
    with left:
        swatches = palette_swatches(snapshot.anchor, snapshot.solution)
        cols = st.columns(len(swatches))
        for col, (swatch_label, rgb) in zip(cols, swatches):
            with col:
                st.markdown(swatch_html(swatch_label, rgb), unsafe_allow_html=True)

        if snapshot.metrics:
            st.subheader("Solution Fitness Over Time")
            st.line_chart({'Fitness': [m.fitness for m in snapshot.metrics]}, height=200)
            st.subheader("Temperature Over Time")
            st.line_chart({'Temperature': [m.temperature for m in snapshot.metrics]}, height=150)

    with right:
        st.markdown(preview_html(snapshot.anchor, snapshot.solution), unsafe_allow_html=True)
