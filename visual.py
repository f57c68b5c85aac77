# visual.py
# Streamlit dashboard: fatalities per manufacturer over time, with an
# optional OLS trendline for one manufacturer.
# Run: streamlit run visual.py

import os
from pathlib import Path

import pandas as pd
import streamlit as st

from analysis import NO_SELECTION, aggregate, manufacturers_of, series_frame, trend_for
from chart import ChartConfig, build_figure
from load_clean import read_incidents

# ---------------- Config ----------------
DATA_PATH = Path(os.getenv("INCIDENTS_CSV", "aircraft_incidents.csv"))
st.set_page_config(page_title="Aircraft Incident Fatalities", page_icon="✈️", layout="wide")

CONFIG = ChartConfig()


# -------------- Load helpers --------------
def load_incidents(path: Path) -> pd.DataFrame | None:
    if not path.exists():
        st.warning(f"Missing file: {path}")
        return None
    try:
        return read_incidents(str(path))
    except ValueError as exc:
        st.warning(str(exc))
        return None


# -------------- Load data --------------
raw = load_incidents(DATA_PATH)
if raw is None:
    st.error("No incident data. Set INCIDENTS_CSV or place aircraft_incidents.csv next to visual.py.")
    st.stop()

series = aggregate(raw)
makers = manufacturers_of(series)

# -------------- Header --------------
st.title("✈️ Fatal Injuries by Aircraft Manufacturer")
st.caption(f"{len(raw):,} incident records · {len(makers)} manufacturers · "
           "hover a line for details, pick a manufacturer to overlay its trend.")

# -------------- Chart --------------
selected = st.selectbox("Trendline", [NO_SELECTION] + makers)
trend = trend_for(series, selected)
if selected != NO_SELECTION and not trend:
    st.info(f"{selected} has fewer than two distinct years; no trendline to draw.")

st.plotly_chart(build_figure(series, trend, CONFIG), use_container_width=True)

with st.expander("Aggregated data"):
    st.dataframe(series_frame(series), use_container_width=True, hide_index=True)
