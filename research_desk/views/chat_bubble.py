"""Chat bubble view model for one deliberation message."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..db.models import DeliberationMessage, MessageRole

USER_AVATAR = "U"

AGENT_DISPLAY_NAMES = {
    MessageRole.USER.value: "You",
    MessageRole.ASSISTANT.value: "Assistant",
    MessageRole.GEMINI.value: "Gemini",
    MessageRole.CHATGPT.value: "ChatGPT",
    MessageRole.CLAUDE.value: "Claude",
}


@dataclass(frozen=True)
class ChatBubble:
    """What the template needs to draw a single message."""

    is_user: bool
    alignment: str  # "right" for the user, "left" for agents
    avatar: str
    content: str
    agent_name: str


def agent_display_name(role: str, agent_name: Optional[str] = None) -> str:
    """Name shown next to a message: the stored agent name, else one derived from the role."""
    if agent_name:
        return agent_name
    return AGENT_DISPLAY_NAMES.get(role, role.replace("_", " ").title())


def build_chat_bubble(message: DeliberationMessage, agent_name: str) -> ChatBubble:
    """Lay out one message.

    User messages sit on the right with a fixed ``U`` avatar; everything else
    sits on the left with the first character of ``agent_name`` (empty when
    the name is empty).
    """
    is_user = message.role == MessageRole.USER.value
    return ChatBubble(
        is_user=is_user,
        alignment="right" if is_user else "left",
        avatar=USER_AVATAR if is_user else agent_name[:1],
        content=message.content,
        agent_name=agent_name,
    )
