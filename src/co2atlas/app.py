"""Streamlit host page: ``streamlit run src/co2atlas/app.py``."""

import logging

import streamlit as st
from streamlit.components.v1 import html

from co2atlas.config import MapConfig
from co2atlas.errors import Co2AtlasError
from co2atlas.page import render_page
from co2atlas.session import Session

LOGGER = logging.getLogger("co2atlas.app")

st.set_page_config(page_title="CO₂ per capita", page_icon="🌍", layout="wide")
st.markdown("""
<style>
#MainMenu, footer { display:none !important; }
.block-container { padding-top:1rem !important; }
</style>
""", unsafe_allow_html=True)


@st.cache_data(show_spinner="Loading emissions data…")
def load_page(csv_source: str, geo_source: str) -> str:
    session = Session.load(MapConfig.from_env(csv_source=csv_source, geo_source=geo_source))
    return render_page(session)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    cfg = MapConfig.from_env()
    st.title("Per-capita CO₂ emissions by country")
    try:
        page = load_page(str(cfg.csv_source), str(cfg.geo_source))
    except Co2AtlasError as exc:
        LOGGER.exception("Error loading data")
        st.error(f"Could not load data: {exc}")
        st.stop()
    html(page, height=cfg.height + 80, scrolling=False)


main()
