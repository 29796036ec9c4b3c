"""tempscatter — Streamlit app for exploring daily temperature extremes."""

import html
import logging

import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv
from streamlit_js_eval import streamlit_js_eval

load_dotenv()

from tempscatter.chart import build_chart_model  # noqa: E402
from tempscatter.i18n import t  # noqa: E402
from tempscatter.loader import DataLoadError, load_records  # noqa: E402
from tempscatter.models import ChartConfig  # noqa: E402
from tempscatter.renderers.svg_2d import render_svg_html  # noqa: E402

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

_DATE_FORMATS = ("%Y-%m-%d", "%Y-%d-%m")

# --- Language detection (browser-first via streamlit-js-eval) ---
# navigator.language is read once and cached in session_state.
# The first run returns None; the rerun triggered by streamlit_js_eval fills it in.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ko" if _browser_lang.lower().startswith("ko") else "en"

_lang: str = st.session_state.get("lang", "en")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="✦",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# --- Session state initialization ---
if "model" not in st.session_state:
    st.session_state.model = None
if "error_msg" not in st.session_state:
    st.session_state.error_msg = None

_base_config = ChartConfig.from_env()

st.markdown(
    """
    <style>
    /* Hide streamlit_js_eval invisible iframe */
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    [data-testid="stHeader"], [data-testid="stToolbar"] { display: none !important; }
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #f8f9fa !important;
    }
    .overlay-box {
        border: 1px solid #e57373;
        border-radius: 6px;
        color: #c62828;
        padding: 0.8rem 1.2rem;
        margin-bottom: 0.5rem;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

st.title(t("page_title", _lang))

# --- Input row ---
col1, col2, col3, col4, col5 = st.columns([3, 3, 2, 2, 1.5])
with col1:
    source = st.text_input(
        t("label_source", _lang),
        value=st.session_state.get("source", ""),
    )
with col2:
    uploaded = st.file_uploader(t("label_upload", _lang), type=["csv"])
with col3:
    date_format = st.selectbox(
        t("label_date_format", _lang),
        _DATE_FORMATS,
        index=_DATE_FORMATS.index(_base_config.date_format)
        if _base_config.date_format in _DATE_FORMATS
        else 0,
    )
with col4:
    with_histograms = st.checkbox(t("label_histograms", _lang), value=True)
with col5:
    st.markdown("<div style='height:1.9rem'></div>", unsafe_allow_html=True)
    submitted = st.button(t("btn_render", _lang), key="submit_btn")

# --- Form submission handler ---
if submitted and (uploaded is not None or source):
    st.session_state.error_msg = None
    st.session_state.source = source
    config = ChartConfig.from_env(date_format=date_format, with_histograms=with_histograms)
    with st.spinner(t("loading", _lang)):
        try:
            data = load_records(uploaded if uploaded is not None else source, date_format, strict=True)
        except DataLoadError as e:
            st.session_state.model = None
            st.session_state.error_msg = t("error_load", _lang).format(error=html.escape(str(e)))
            st.rerun()
        if not data:
            st.session_state.error_msg = t("error_empty", _lang)
        st.session_state.model = build_chart_model(data, config)
    st.rerun()

# --- Error message ---
if st.session_state.error_msg:
    st.markdown(
        f"<div class='overlay-box'>{st.session_state.error_msg}</div>",
        unsafe_allow_html=True,
    )

# --- Chart area ---
if st.session_state.model is not None:
    model = st.session_state.model
    # Fixed geometry: the iframe is sized once from the config, never on resize.
    components.html(
        render_svg_html(model, lang=_lang),
        height=int(model.config.size) + 20,
        scrolling=False,
    )
else:
    st.markdown(
        f"<div style='height:60vh; display:flex; align-items:center; justify-content:center;"
        f" color:#8a96a3; font-size:1.2rem;'>{t('placeholder', _lang)}</div>",
        unsafe_allow_html=True,
    )
