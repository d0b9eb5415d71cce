import streamlit as st
import logging
import os
import sys

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from casrep.utils.config import load_settings
from casrep.utils.reports import REPORT_TEMPLATES, ReportStore

settings = load_settings()

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level),
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Set page configuration
st.set_page_config(
    page_title="CASRep",
    page_icon="✈️",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# Initialize session state variables if they don't exist
if 'store' not in st.session_state:
    st.session_state.store = ReportStore(settings)
if 'transcript_input' not in st.session_state:
    st.session_state.transcript_input = ""
if 'segment_input' not in st.session_state:
    st.session_state.segment_input = ""
if 'apply_correction' not in st.session_state:
    st.session_state.apply_correction = True


def main():
    store = st.session_state.store

    st.title("CASRep - JTAC Transcript Report Board")

    col1, col2 = st.columns([1, 1])

    with col1:
        # 1. Transcript entry
        st.markdown("### Transcript")

        st.checkbox("Apply ASR corrections", key="apply_correction",
                    help="Run the correction rules over the text before parsing")

        st.text_area("Full session transcript", key="transcript_input", height=240,
                     placeholder="Axeman two-one this is Hawg one-one checking in, 2x GBU-12, playtime fifteen.")

        if st.button("Reparse", use_container_width=True):
            text = st.session_state.transcript_input
            if st.session_state.apply_correction:
                text = store.correction_engine.quick_correct(text)
            store.reparse(text)

        st.text_input("Single segment", key="segment_input")

        if st.button("Append segment", use_container_width=True):
            segment = st.session_state.segment_input
            if st.session_state.apply_correction:
                segment = store.correction_engine.quick_correct(segment)
            store.process(segment)

        if st.button("Reset", use_container_width=True):
            store.reset()

        if store.running_transcript:
            with st.expander("Running transcript"):
                st.text(store.running_transcript)

    with col2:
        # 2. Report board, one expander per category
        st.markdown("### Report")

        if store.report.is_empty:
            st.info("No report data yet.")

        for category, template in REPORT_TEMPLATES.items():
            has_data = store.has_data(category)
            with st.expander(template["title"], expanded=has_data):
                if has_data:
                    st.code(store.content(category), language=None)
                else:
                    st.caption("Nothing heard yet.")


# Run the main app
if __name__ == "__main__":
    main()
