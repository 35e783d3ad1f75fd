"""HTML views."""

from __future__ import annotations

from .chat_bubble import ChatBubble, agent_display_name, build_chat_bubble
from .research_page import render_not_found, render_research_page

__all__ = [
    "ChatBubble",
    "agent_display_name",
    "build_chat_bubble",
    "render_not_found",
    "render_research_page",
]
