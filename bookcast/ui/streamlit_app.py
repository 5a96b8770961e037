#!/usr/bin/env python3
"""
Streamlit UI for the Bookcast content studio.
Flow: Book info → Outline → Story (or upload) → Review script → SEO → Video & thumbnail prompts

Run with: streamlit run bookcast/ui/streamlit_app.py
"""

import asyncio

import streamlit as st

from bookcast.config import get_settings
from bookcast.core.pipeline import GenerationPipeline, PipelineRunState, StageStatus
from bookcast.exporters.csv_export import export_prompts, export_script, export_story
from bookcast.storage.key_store import KeyStore
from bookcast.utils.key_pool import has_credentials

MODELS = [
    "gemini-3-pro-preview",
    "gemini-3-flash-preview",
    "gpt-4o",
    "gpt-4o-mini",
    "mock-offline",
]

FRAME_RATIOS = ["9:16", "16:9", "1:1"]

# Page configuration
st.set_page_config(
    page_title="🎧 Bookcast Content Studio",
    page_icon="🎧",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        text-align: center;
        padding: 20px;
        background: linear-gradient(90deg, #0ea5e9 0%, #2563eb 100%);
        color: white;
        border-radius: 10px;
        margin-bottom: 20px;
    }
    .chunk-progress {
        background: #e9ecef;
        border-radius: 10px;
        padding: 20px;
        margin: 15px 0;
    }
</style>
""", unsafe_allow_html=True)


def initialize_session_state():
    """Create the pipeline and load stored keys and preferences once per browser session."""
    if "pipeline" in st.session_state:
        return

    settings = get_settings()
    store = KeyStore()
    store.load()

    pipeline = GenerationPipeline(settings=settings)
    store.restore_into(pipeline.inputs)

    st.session_state.pipeline = pipeline
    st.session_state.key_store = store


def run_stage(label: str, stage_coro_fn):
    """Run one stage to completion, rendering progress as units finish."""
    pipeline: GenerationPipeline = st.session_state.pipeline
    placeholder = st.empty()

    def on_update(state: PipelineRunState):
        placeholder.markdown(
            f'<div class="chunk-progress">⏳ {label}: '
            f"{len(state.story_blocks)} story parts, {len(state.script_blocks)} script parts</div>",
            unsafe_allow_html=True
        )

    pipeline.on_update = on_update
    try:
        with st.spinner(f"{label}..."):
            asyncio.run(stage_coro_fn())
    finally:
        pipeline.on_update = None
        placeholder.empty()


def display_api_settings():
    """Sidebar: model choice and multi-key configuration."""
    pipeline: GenerationPipeline = st.session_state.pipeline
    store: KeyStore = st.session_state.key_store
    inputs = pipeline.inputs

    st.sidebar.title("🎛️ API & Model")
    inputs.model = st.sidebar.selectbox(
        "Service & Model",
        MODELS,
        index=MODELS.index(inputs.model) if inputs.model in MODELS else 0
    )

    gemini_ok = has_credentials(inputs.gemini_keys, "gemini")
    st.sidebar.caption("🟢 Gemini key ready" if gemini_ok else "🔴 No Gemini key")

    with st.sidebar.expander("🔑 API keys", expanded=not gemini_ok):
        # Typed keys are used right away; Save only persists them
        inputs.gemini_keys = st.text_area(
            "Google Gemini API Keys (one per line)", inputs.gemini_keys, key="gemini_keys_input"
        )
        inputs.openai_keys = st.text_area(
            "OpenAI API Keys (one per line)", inputs.openai_keys, key="openai_keys_input"
        )
        st.caption(
            "Keys are stored on this machine only. "
            "Enter several keys for automatic failover when one is rate limited."
        )
        if st.button("💾 Save config", key="save_config"):
            store.capture_from(inputs)
            if store.save():
                st.success("Saved")
            else:
                st.error("Could not save the key store")


def display_book_form():
    """Book info & settings."""
    pipeline: GenerationPipeline = st.session_state.pipeline
    inputs = pipeline.inputs

    st.subheader("1) Book info & settings")
    inputs.book_title = st.text_input("Book title / topic", inputs.book_title)
    inputs.book_idea = st.text_area("Idea / context (optional)", inputs.book_idea)

    col1, col2, col3 = st.columns(3)
    with col1:
        inputs.duration_min = int(st.number_input("Duration (min)", 1, 1440, inputs.duration_min))
    with col2:
        inputs.chapters_count = int(st.number_input("Chapters", 1, 50, inputs.chapters_count))
    with col3:
        inputs.language = st.selectbox("Language", ["vi", "en"], index=0 if inputs.language == "vi" else 1)

    st.caption(f"Target characters: {pipeline.target_chars:,}")

    uploaded = st.file_uploader("Upload story (review immediately)", type=["txt"])
    if uploaded is not None and st.button("📥 Use uploaded story"):
        text = uploaded.getvalue().decode("utf-8", errors="replace")
        count = pipeline.load_uploaded_story(text)
        if count:
            st.success(f"Uploaded {count} story parts. You can run 'Review story' now.")


def display_actions():
    """One button per stage; all disabled while any stage is running."""
    pipeline: GenerationPipeline = st.session_state.pipeline
    busy = pipeline.state.busy_stage() is not None

    st.subheader("2) Actions")
    cols = st.columns(5)
    actions = [
        ("🧭 Outline", "Generating outline", pipeline.run_outline),
        ("✍️ Write story", "Writing story", pipeline.run_story),
        ("🎙️ Review story", "Writing review script", pipeline.run_script),
        ("🔎 SEO", "Generating SEO", pipeline.run_seo),
        ("🎬 Prompts", "Generating prompts", pipeline.run_prompts),
    ]
    for col, (label, progress_label, coro_fn) in zip(cols, actions):
        with col:
            if st.button(label, disabled=busy, use_container_width=True):
                run_stage(progress_label, coro_fn)

    if pipeline.state.error:
        st.error(pipeline.state.error)


def display_download(result, label: str, key: str):
    if result is None:
        return
    filename, document = result
    st.download_button(label, document.encode("utf-8"), file_name=filename, mime="text/csv", key=key)


def display_results():
    pipeline: GenerationPipeline = st.session_state.pipeline
    state = pipeline.state
    title = pipeline.inputs.book_title

    st.subheader("3) Script outline")
    if not state.outline:
        st.info("No outline yet.")
    for item in state.outline:
        with st.expander(f"{item.index + 1}. {item.title}"):
            st.write(item.focus)
            for action in item.actions:
                st.markdown(f"- {action}")

    st.subheader("4) Story content")
    if not state.story_blocks:
        st.info("No story content yet. Write the story or upload a file.")
    for block in state.story_blocks:
        with st.expander(f"{block.index}. {block.title}"):
            st.write(block.content)
    display_download(export_story(state.story_blocks, title), "⬇️ Story CSV", "story_csv")

    st.subheader("5) Review script")
    if state.status["script"] == StageStatus.FAILED and state.script_blocks:
        st.warning("The review stopped early; the parts below were finished before the error.")
    for block in state.script_blocks:
        with st.expander(f"{block.chapter} ({block.chars:,} chars)"):
            st.write(block.text)
    if state.script_blocks:
        st.caption(f"Total: {state.script_chars:,} characters")
    display_download(export_script(state.script_blocks, title), "⬇️ Review CSV", "script_csv")

    st.subheader("6) SEO suggestions")
    if state.seo is None:
        st.info("No SEO data yet.")
    else:
        st.markdown("**Suggested titles**")
        for seo_title in state.seo.titles:
            st.markdown(f"- {seo_title}")
        st.markdown("**Hashtags**: " + " ".join(state.seo.hashtags))
        st.markdown("**Keywords**: " + ", ".join(state.seo.keywords))
        st.text_area("Video description", state.seo.description, height=150, disabled=True)

    st.subheader("7) Video & thumbnail prompts")
    inputs = pipeline.inputs
    inputs.frame_ratio = st.selectbox(
        "Ratio", FRAME_RATIOS,
        index=FRAME_RATIOS.index(inputs.frame_ratio) if inputs.frame_ratio in FRAME_RATIOS else 0
    )
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Video prompts**")
        for prompt in state.video_prompts:
            st.code(prompt, language=None)
        display_download(export_prompts(state.video_prompts, title), "⬇️ Prompts CSV", "prompts_csv")
    with col2:
        st.markdown("**Thumbnail text ideas**")
        for idea in state.thumbnail_ideas:
            st.markdown(f"- {idea}")


def main():
    """Main application."""
    initialize_session_state()

    st.markdown('<div class="main-header">', unsafe_allow_html=True)
    st.markdown("# 🎧 Bookcast Content Studio")
    st.markdown('</div>', unsafe_allow_html=True)

    display_api_settings()
    display_book_form()
    display_actions()
    display_results()


if __name__ == "__main__":
    main()
