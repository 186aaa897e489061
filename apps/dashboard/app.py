from __future__ import annotations

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from procsim.engine import build_visual_frame, simulate_clamped, simulate_over_time
from procsim.models.crystallization import CRYSTAL_HABITS, LIQUIDS
from procsim.registry import (
    STOCHASTIC_PROCESSES,
    ProcessKind,
    default_version,
    get_schema,
    list_processes,
    model_versions,
)

st.set_page_config(page_title="Unit Operations Simulator", layout="wide")

st.markdown(
    """
<style>
.stApp {
    background-color: #0b1220;
    color: #e5edf7;
    font-family: "JetBrains Mono", "SFMono-Regular", monospace;
}
[data-testid="stSidebar"] {
    background-color: #0e1627;
    border-right: 1px solid #1f2a3f;
}
[data-testid="stMetric"] {
    background-color: #111b2f;
    border: 1px solid #2a3b58;
    border-radius: 8px;
    padding: 10px 12px;
}
</style>
""",
    unsafe_allow_html=True,
)

PLOT_TEMPLATE = "plotly_dark"
ACCENT_COLORS = ["#4c8dff", "#33d17a", "#f6a04d", "#a371f7"]
SWEEP_POINTS = 41
TIME_STEPPED = {ProcessKind.FERMENTATION, ProcessKind.CRYSTALLIZATION}


@st.cache_data(show_spinner=False)
def _sweep(
    process: str, version: str, parameters: dict[str, float], name: str
) -> pd.DataFrame:
    spec = get_schema(process).get(name)
    rows = []
    for value in np.linspace(spec.minimum, spec.maximum, SWEEP_POINTS):
        results = simulate_clamped(process, {**parameters, name: float(value)}, version=version)
        scalars = {key: val for key, val in results.items() if not isinstance(val, list)}
        rows.append({name: float(value), **scalars})
    return pd.DataFrame(rows)


def _format_label(name: str, unit: str) -> str:
    return f"{name} ({unit})" if unit else name


with st.sidebar:
    st.header("Process")
    process = st.selectbox("Unit operation", [kind.value for kind in list_processes()])
    versions = list(model_versions(process))
    version = st.selectbox(
        "Model variant", versions, index=versions.index(default_version(process))
    )

    st.header("Parameters")
    parameters: dict[str, float] = {}
    for spec in get_schema(process):
        parameters[spec.name] = st.slider(
            _format_label(spec.name, spec.unit),
            min_value=float(spec.minimum),
            max_value=float(spec.maximum),
            value=float(spec.default),
            step=float(spec.step),
            key=f"{process}:{spec.name}",
        )

results = simulate_clamped(process, parameters, version=version)
frame = build_visual_frame(process, parameters, results)
scalars = {key: val for key, val in frame["results"].items() if not isinstance(val, list)}
profiles = {key: val for key, val in frame["results"].items() if isinstance(val, list)}

st.title("Unit Operations Simulator")
st.caption(f"{process} / {version} model")

tab_results, tab_sensitivity, tab_time = st.tabs(["Results", "Sensitivity", "Over Time"])

with tab_results:
    kpi_cols = st.columns(4)
    for idx, (key, value) in enumerate(scalars.items()):
        kpi_cols[idx % 4].metric(key, f"{value:,.4g}")

    if profiles:
        profile_fig = go.Figure()
        for idx, (key, values) in enumerate(profiles.items()):
            profile_fig.add_trace(
                go.Scatter(
                    x=list(range(1, len(values) + 1)),
                    y=values,
                    mode="lines+markers",
                    name=key,
                    yaxis="y2" if idx else "y",
                    line=dict(color=ACCENT_COLORS[idx % len(ACCENT_COLORS)], width=2.5),
                )
            )
        profile_fig.update_layout(
            template=PLOT_TEMPLATE,
            title="Column profiles (bottom to top)",
            xaxis_title="Plate",
            yaxis2=dict(overlaying="y", side="right"),
        )
        st.plotly_chart(profile_fig, width="stretch")

    st.json(frame)

with tab_sensitivity:
    sweep_name = st.selectbox("Swept parameter", list(parameters))
    sweep_df = _sweep(process, version, parameters, sweep_name)
    outputs = [column for column in sweep_df.columns if column != sweep_name]
    output_name = st.selectbox("Output", outputs)
    sweep_fig = go.Figure(
        go.Scatter(
            x=sweep_df[sweep_name],
            y=sweep_df[output_name],
            mode="lines",
            line=dict(color=ACCENT_COLORS[0], width=2.5),
        )
    )
    sweep_fig.add_vline(x=parameters[sweep_name], line_dash="dash", line_color=ACCENT_COLORS[2])
    sweep_fig.update_layout(
        template=PLOT_TEMPLATE, xaxis_title=sweep_name, yaxis_title=output_name
    )
    st.plotly_chart(sweep_fig, width="stretch")

with tab_time:
    kind = ProcessKind(process)
    if kind not in TIME_STEPPED:
        st.info("This process has a closed-form model only.")
    else:
        options: dict[str, object] = {}
        if kind in STOCHASTIC_PROCESSES:
            control_cols = st.columns(4)
            options["duration"] = control_cols[0].number_input(
                "Duration (s)", min_value=0.0, value=10.0, step=1.0
            )
            options["seed"] = int(
                control_cols[1].number_input("Seed", min_value=0, value=7, step=1)
            )
            options["liquid"] = control_cols[2].selectbox("Liquid", list(LIQUIDS))
            options["habit"] = control_cols[3].selectbox("Crystal habit", list(CRYSTAL_HABITS))
        trajectory = simulate_over_time(process, parameters, **options)
        time_df = trajectory.to_frame()
        series = [column for column in time_df.columns if column != "time"]
        time_fig = go.Figure()
        for idx, column in enumerate(series):
            time_fig.add_trace(
                go.Scatter(
                    x=time_df["time"],
                    y=time_df[column],
                    mode="lines",
                    name=column,
                    line=dict(color=ACCENT_COLORS[idx % len(ACCENT_COLORS)], width=2),
                )
            )
        time_fig.update_layout(template=PLOT_TEMPLATE, xaxis_title="time")
        st.plotly_chart(time_fig, width="stretch")
        st.dataframe(time_df, width="stretch")
