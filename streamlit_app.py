"""AI Tool Advisor - Streamlit App with Chat UI."""

import os
import streamlit as st
from config.settings import Settings
from orchestrator import ToolAdvisorOrchestrator
from schemas.catalog import CatalogEntry
from schemas.conversation import ConversationMessage


SUGGESTIONS = [
    "Best AI tools for image generation",
    "Free AI coding assistants",
    "AI tools for video creation",
    "AI writing and marketing tools",
    "AI music generation tools",
    "Compare ChatGPT vs Claude vs Gemini",
]

st.set_page_config(
    page_title="AI Tool Advisor",
    page_icon="🧭",
    layout="wide"
)

# Initialize session state
if "messages" not in st.session_state:
    st.session_state.messages = []

if "orchestrator" not in st.session_state:
    st.session_state.orchestrator = None

if "pending_question" not in st.session_state:
    st.session_state.pending_question = None


def reset_conversation():
    """Reset conversation state."""
    st.session_state.messages = []
    st.session_state.pending_question = None


def get_orchestrator(settings: Settings) -> ToolAdvisorOrchestrator:
    """Get or create orchestrator instance."""
    if st.session_state.orchestrator is None:
        st.session_state.orchestrator = ToolAdvisorOrchestrator(settings=settings)
    return st.session_state.orchestrator


def render_tool_cards(cards: list[CatalogEntry]):
    """Show surfaced tools as a grid of cards."""
    if not cards:
        return
    columns = st.columns(min(len(cards), 3))
    for i, tool in enumerate(cards):
        with columns[i % len(columns)]:
            with st.container(border=True):
                price = "Free" if tool.pricing.free else tool.pricing.starting_price
                st.markdown(f"**{tool.name}** · {price}")
                st.caption(tool.company)
                st.write(tool.description)
                if tool.best_for:
                    st.caption(" · ".join(tool.best_for[:3]))
                st.link_button("Visit website", tool.url)


# Sidebar configuration
st.sidebar.header("Configuration")

llm_provider = st.sidebar.selectbox(
    "LLM Provider",
    options=["openai", "anthropic"],
    index=0,
    help="Select which LLM answers questions"
)

openai_api_key = st.sidebar.text_input(
    "OpenAI API Key",
    value=os.environ.get("OPENAI_API_KEY", ""),
    type="password"
)

anthropic_api_key = st.sidebar.text_input(
    "Anthropic API Key",
    value=os.environ.get("ANTHROPIC_API_KEY", ""),
    type="password"
)

catalog_path = st.sidebar.text_input(
    "Catalog Path",
    value=os.environ.get("TOOL_CATALOG_PATH", "data/tools.json"),
    help="JSON file containing the tool catalog"
)

if st.sidebar.button("Start New Conversation", type="secondary"):
    reset_conversation()
    st.session_state.orchestrator = None
    st.rerun()

# Main content
st.title("AI Tool Advisor")
st.markdown("Describe what you want to do and get matching AI tools.")

for message in st.session_state.messages:
    with st.chat_message(message["role"]):
        st.markdown(message["content"])
        render_tool_cards(message.get("tool_cards", []))

if not st.session_state.messages:
    columns = st.columns(2)
    for i, suggestion in enumerate(SUGGESTIONS):
        if columns[i % 2].button(suggestion, use_container_width=True):
            st.session_state.pending_question = suggestion
            st.rerun()

prompt = st.chat_input("Ask about AI tools...") or st.session_state.pending_question

if prompt:
    st.session_state.pending_question = None
    st.session_state.messages.append({"role": "user", "content": prompt})

    with st.chat_message("user"):
        st.markdown(prompt)

    with st.chat_message("assistant"):
        with st.status("Thinking...") as status:
            try:
                settings = Settings(
                    catalog_path=catalog_path,
                    llm_provider=llm_provider,
                    openai_api_key=openai_api_key or None,
                    anthropic_api_key=anthropic_api_key or None,
                )
                orchestrator = get_orchestrator(settings)
                history = [
                    ConversationMessage(role=m["role"], content=m["content"])
                    for m in st.session_state.messages
                ]
                result = orchestrator.chat(
                    history,
                    on_status=lambda text: status.update(label=text)
                )
                status.update(label="Done", state="complete")
            except Exception as e:
                status.update(label="Error", state="error")
                result = None
                st.error(f"Something went wrong. Please try again. ({e})")

        if result is not None:
            st.markdown(result.text)
            render_tool_cards(result.tool_cards)
            st.session_state.messages.append({
                "role": "assistant",
                "content": result.text,
                "tool_cards": result.tool_cards,
            })
