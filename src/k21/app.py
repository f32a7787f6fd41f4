# app.py — Streamlit UI for the capture → process → consume OCR demo
# Run:  streamlit run src/k21/app.py

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Tuple

import altair as alt
import pandas as pd
import streamlit as st
from loguru import logger

from k21 import settings
from k21.frequency import analyze, chart_rows
from k21.records import fragments_from_response, has_result
from k21.samples import load_sample, sample_labels
from k21.upload import UploadError, submit_video

logger = logger.bind(name="app")

SOURCE_URL = "https://github.com/kontext21/k21-playground"

# ------------------------- session state -------------------------

if "response" not in st.session_state: st.session_state.response = None
if "error" not in st.session_state: st.session_state.error = None
if "word_frequencies" not in st.session_state: st.session_state.word_frequencies = None
if "uploader_key" not in st.session_state: st.session_state.uploader_key = 0   # bump to clear the file widget
if "analyzed_k" not in st.session_state: st.session_state.analyzed_k = settings.top_k()   # k the stored ranking was computed with


def _clear_file() -> None:
    st.session_state.uploader_key += 1


def _load_example(number: int) -> None:
    _clear_file()
    st.session_state.error = None
    st.session_state.word_frequencies = None
    st.session_state.response = load_sample(number)


def _reset() -> None:
    _clear_file()
    st.session_state.response = None
    st.session_state.word_frequencies = None
    st.session_state.error = None


def _submit(uploaded: Any, backend: str, url: Optional[str], delay_s: float) -> None:
    st.session_state.error = None
    try:
        st.session_state.response = submit_video(
            uploaded.getvalue(),
            uploaded.name,
            backend=backend,
            content_type=uploaded.type,
            url=url,
            delay_s=delay_s,
        )
        st.session_state.word_frequencies = None
    except UploadError as e:
        logger.warning(f"Upload rejected: {e}")
        st.session_state.error = str(e)


def _frequency_chart(ranked: List[Tuple[str, int]]) -> alt.Chart:
    df = pd.DataFrame(chart_rows(ranked))
    # sort=None keeps rank order on the category axis instead of alphabetical
    return (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopRight=4, cornerRadiusBottomRight=4)
        .encode(
            x=alt.X("count:Q", title=None),
            y=alt.Y("word:N", sort=None, title=None, axis=alt.Axis(labelFontSize=12, labelLimit=100)),
            tooltip=["word", "count"],
        )
        .properties(height=400)
    )


def _file_caption(uploaded: Any) -> str:
    return f"Selected: {uploaded.name} ({uploaded.size / (1024 * 1024):.2f} MB)"

# ------------------------- layout -------------------------

st.set_page_config(page_title="Kontext21 Playground", layout="wide")
st.markdown("<h1 style='text-align:center'>Kontext21 Playground</h1>", unsafe_allow_html=True)

with st.sidebar:
    st.header("Settings")
    backends = ["mock", "remote"]
    default_backend = settings.backend()
    backend = st.selectbox(
        "Processing backend", backends,
        index=backends.index(default_backend) if default_backend in backends else 0,
    )
    service_url = None
    if backend == "remote":
        service_url = st.text_input("Service URL", value=settings.upload_url() or "")
        if not service_url:
            st.caption("Set K21_UPLOAD_URL or enter the processing service URL.")
    top_k = st.number_input("Top words", value=settings.top_k(), min_value=1, max_value=50, step=1)
    mock_delay = st.slider("Simulated processing delay (s)", 0.0, 5.0, float(settings.mock_delay_s()), 0.5)

col_capture, col_process, col_consume = st.columns(3, gap="large")

with col_capture:
    with st.container(border=True, height=600):
        st.subheader("Capture")
        st.caption("Select source material to capture from.")

        st.markdown("**Choose from examples**")
        ex_cols = st.columns(2)
        for (number, label), col in zip(sample_labels(), ex_cols):
            with col:
                if st.button(label, key=f"example_{number}", width="stretch"):
                    _load_example(number)
                    st.rerun()

        st.markdown("<div style='text-align:center; color:#888; font-size:12px'>OR</div>", unsafe_allow_html=True)

        uploaded = st.file_uploader(
            "Select MP4 Video", type=["mp4"], key=f"video_{st.session_state.uploader_key}",
        )
        if st.button("⬆️ Upload", type="primary", disabled=uploaded is None, key="upload_btn"):
            with st.spinner("Uploading"):
                _submit(uploaded, backend, service_url or None, mock_delay)
        if uploaded is not None:
            st.caption(_file_caption(uploaded))
        if st.session_state.error:
            st.error(st.session_state.error)
        st.caption(f"Max file size: {settings.max_upload_mb()}MB")

with col_process:
    with st.container(border=True, height=600):
        st.subheader("Process")
        st.caption("Extract text from your video frames")

        can_process = uploaded is not None or st.session_state.response is not None
        if st.button("Process Video", disabled=not can_process, width="stretch", key="process_btn"):
            with st.spinner("Processing..."):
                if uploaded is not None and st.session_state.response is None:
                    _submit(uploaded, backend, service_url or None, mock_delay)
                else:
                    # example responses are already loaded; just simulate the wait
                    time.sleep(mock_delay)

        resp: Optional[Dict[str, Any]] = st.session_state.response
        if resp is not None:
            st.markdown("**Response:**")
            if resp.get("success") is False:
                st.warning(resp.get("message") or "Processing service reported a failure.")
            with st.container(height=400):
                st.json(resp)

with col_consume:
    with st.container(border=True, height=600):
        st.subheader("Consume")
        resp = st.session_state.response
        if resp is not None and has_result(resp):
            if st.button("Analyze Word Frequency", key="analyze_btn"):
                st.session_state.word_frequencies = analyze(fragments_from_response(resp), int(top_k))
                st.session_state.analyzed_k = int(top_k)

        ranked = st.session_state.word_frequencies
        if ranked is not None:
            st.markdown(f"**Top {st.session_state.analyzed_k} Most Frequent Words:**")
            if ranked:
                st.altair_chart(_frequency_chart(ranked), width="stretch")
            else:
                st.info("No words found in the OCR text.")

foot_link, foot_reset = st.columns([0.85, 0.15])
with foot_link:
    st.markdown(f"[View source code on GitHub]({SOURCE_URL})")
with foot_reset:
    if st.session_state.response is not None:
        if st.button("Reset", key="reset_btn"):
            _reset()
            st.rerun()
