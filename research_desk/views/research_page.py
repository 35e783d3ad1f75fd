"""Server-rendered research session page."""

from __future__ import annotations

from typing import List, Sequence

import jinja2

from ..db.models import DeliberationMessage, ResearchSession, SimulatedTrade
from .chat_bubble import ChatBubble, agent_display_name, build_chat_bubble

jinja_env = jinja2.Environment(
    loader=jinja2.PackageLoader("research_desk", "templates"),
    autoescape=jinja2.select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def build_bubbles(messages: Sequence[DeliberationMessage]) -> List[ChatBubble]:
    """Bubbles in the order the messages were stored."""
    return [
        build_chat_bubble(message, agent_display_name(message.role, message.agent_name))
        for message in messages
    ]


def render_research_page(
    session: ResearchSession,
    messages: Sequence[DeliberationMessage],
    trades: Sequence[SimulatedTrade] = (),
) -> str:
    template = jinja_env.get_template("research_session.html")
    return template.render(
        session=session,
        bubbles=build_bubbles(messages),
        trades=list(trades),
    )


def render_not_found() -> str:
    return jinja_env.get_template("not_found.html").render()
