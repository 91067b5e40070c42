"""
Streamlit entry point — Critical and Emerging Technologies Index dashboard.

Wires the scoring pipeline into a single-page flow:
  1. Sidebar sector weights (sliders + allocation status)
  2. File upload (one .xlsx workbook of country sector scores)
  3. Validation diagnostics (blocking errors, non-blocking warnings)
  4. Ranked results: stacked bar chart, sector shares, data table

Contains NO business logic — only calls processing/analysis modules and
displays results.  Weights live in st.session_state and are passed into
each pipeline call; a weight change rescores the cached file without
validating it again.
"""

import logging

import pandas as pd
import streamlit as st

from analysis.rankings import (
    COUNTRY_LABEL,
    RANK_LABEL,
    TOTAL_LABEL,
    column_maxima,
    rank_countries,
    sector_averages,
    shading_styles,
)
from config.schema import (
    DEFAULT_SECTOR_WEIGHTS,
    SECTOR_COLORS,
    SECTOR_NAMES,
    SECTORS,
    WEIGHT_SLIDER_MAX_PERCENT,
    WEIGHT_SLIDER_STEP_PERCENT,
)
from processing.file_reader import read_excel_file
from processing.pipeline import PipelineState, ScoringSession
from processing.weights import (
    allocation_status,
    coerce_weights,
    weights_sum_to_one,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Page configuration
# ═══════════════════════════════════════════════════════════════════════════

st.set_page_config(
    page_title="Critical and Emerging Technologies Index",
    page_icon="🌐",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ═══════════════════════════════════════════════════════════════════════════
# Session state initialisation
# ═══════════════════════════════════════════════════════════════════════════

def _init_session_state() -> None:
    """Ensure all required session state keys exist with sensible defaults."""
    defaults: dict = {
        "scoring_session": ScoringSession(),
        "sector_weights": dict(DEFAULT_SECTOR_WEIGHTS),
        "read_warnings": [],
        "read_errors": [],
        "selected_country": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


_init_session_state()
session: ScoringSession = st.session_state["scoring_session"]


# ═══════════════════════════════════════════════════════════════════════════
# Sidebar — Sector weights
# ═══════════════════════════════════════════════════════════════════════════

st.sidebar.title("⚖️ Sector Weights")

new_weights: dict = {}
for sector in SECTORS:
    percent = st.sidebar.slider(
        SECTOR_NAMES[sector],
        min_value=0,
        max_value=WEIGHT_SLIDER_MAX_PERCENT,
        value=round(st.session_state["sector_weights"][sector] * 100),
        step=WEIGHT_SLIDER_STEP_PERCENT,
        format="%d%%",
        key=f"weight_{sector.value}",
    )
    new_weights[sector] = percent / 100
new_weights = coerce_weights(new_weights)

allocation = allocation_status(new_weights)
if allocation.state == "complete":
    st.sidebar.success(allocation.message)
elif allocation.state == "under":
    st.sidebar.warning(allocation.message)
else:
    st.sidebar.error(allocation.message)
st.sidebar.progress(min(allocation.percentage, 100) / 100)

if new_weights != st.session_state["sector_weights"]:
    st.session_state["sector_weights"] = new_weights
    session.rescore(new_weights)


# ═══════════════════════════════════════════════════════════════════════════
# Main area — Title
# ═══════════════════════════════════════════════════════════════════════════

st.title("🌐 Critical and Emerging Technologies Index")
st.caption(
    "Upload a workbook with one row per country and the columns "
    "Country, AI, Quantum, Semiconductors, Biotech, Space, Fintech."
)


# ═══════════════════════════════════════════════════════════════════════════
# Section 1: File upload
# ═══════════════════════════════════════════════════════════════════════════

uploaded_file = st.file_uploader(
    "Index workbook",
    type=["xlsx"],
    accept_multiple_files=False,
    help="Drag and drop the index .xlsx file, or click to select it.",
)

if uploaded_file is not None and uploaded_file.file_id != st.session_state.get("_loaded_file_id"):
    st.session_state["_loaded_file_id"] = uploaded_file.file_id
    st.session_state["selected_country"] = None

    read_result = read_excel_file(uploaded_file)
    st.session_state["read_errors"] = read_result.errors
    st.session_state["read_warnings"] = read_result.warnings

    if read_result.errors:
        session.reset()
    else:
        session.load(read_result.rows, st.session_state["sector_weights"])

elif uploaded_file is None and session.state is not PipelineState.EMPTY:
    session.reset()
    st.session_state.pop("_loaded_file_id", None)
    st.session_state["read_errors"] = []
    st.session_state["read_warnings"] = []


# ═══════════════════════════════════════════════════════════════════════════
# Section 2: Diagnostics
# ═══════════════════════════════════════════════════════════════════════════

read_errors: list[str] = st.session_state["read_errors"]
report = session.report

if read_errors:
    st.error(
        "Error reading file. Please ensure it is a valid Excel file with "
        "the correct format.\n\n" + "\n".join(f"- {e}" for e in read_errors)
    )
elif session.state is PipelineState.INVALID:
    st.error(
        "Failed to process data. Please check the file format and try again.\n\n"
        + "\n".join(f"- {e}" for e in report.errors)
    )

all_warnings = st.session_state["read_warnings"] + report.warnings
if all_warnings:
    with st.expander(f"⚠️ Warnings ({len(all_warnings)})"):
        for warning in all_warnings:
            st.text(warning)


# ═══════════════════════════════════════════════════════════════════════════
# Section 3: Results
# ═══════════════════════════════════════════════════════════════════════════

records = session.records

if session.state is PipelineState.READY and not records:
    st.info("The workbook contained no country rows.")

if records:
    header_col, reset_col = st.columns([4, 1])
    with header_col:
        st.header("📊 Global View")
    with reset_col:
        if st.button("Reset Selection", use_container_width=True):
            st.session_state["selected_country"] = None

    countries = [record.country for record in records]
    selected_country = st.selectbox(
        "Country",
        options=[None, *sorted(countries)],
        format_func=lambda name: "All countries" if name is None else name,
        key="selected_country",
    )

    if not weights_sum_to_one(st.session_state["sector_weights"]):
        st.caption(
            f"Scores use weights totalling {allocation.percentage}%, not 100%."
        )

    # ── Stacked bar chart (weighted contributions, leader first) ──────
    ranked = rank_countries(records)
    chart_df = ranked.drop(columns=[RANK_LABEL, TOTAL_LABEL]).set_index(COUNTRY_LABEL)
    st.bar_chart(
        chart_df,
        color=[SECTOR_COLORS[sector] for sector in SECTORS],
        horizontal=True,
    )

    # ── Sector shares ────────────────────────────────────────────────
    st.subheader(
        "Sector Scores" if selected_country is None
        else f"Sector Scores — {selected_country}"
    )
    averages = sector_averages(records, country=selected_country)
    shares_df = pd.DataFrame({
        "Sector": [SECTOR_NAMES[sector] for sector in averages],
        "Average Score": [round(value, 3) for value in averages.values()],
    })
    st.dataframe(shares_df, use_container_width=True, hide_index=True)

    # ── Data table ───────────────────────────────────────────────────
    st.subheader("Rankings")
    sort_options = ["total", *[sector.value for sector in SECTORS]]
    sort_by = st.selectbox(
        "Sort by",
        options=sort_options,
        format_func=lambda key: "Total Score" if key == "total" else SECTOR_NAMES[key],
    )
    table_df = rank_countries(records, sort_by=sort_by)
    if selected_country is not None:
        table_df = table_df[table_df[COUNTRY_LABEL] == selected_country]
    maxima = column_maxima(records)
    styled_table = table_df.round(3).style.apply(
        lambda frame: shading_styles(frame, maxima), axis=None
    )
    st.dataframe(styled_table, use_container_width=True, hide_index=True)

