"""Markdown rendering for chat bubbles.

Hides the details of markdown parsing and the link/code tweaks applied to
model output before it reaches the page.
"""

from __future__ import annotations

from markdown_it import MarkdownIt
from markupsafe import Markup

from chat.models import Message


CODE_BLOCK_STYLE = "display: block; white-space: pre-wrap"


def _render_link_open(self, tokens, idx, options, env):
    # Links open in a new tab without a window.opener back-reference.
    token = tokens[idx]
    token.attrSet("target", "_blank")
    token.attrSet("rel", "noopener noreferrer")
    return self.renderToken(tokens, idx, options, env)


def _with_code_style(default_rule):
    def render(self, tokens, idx, options, env):
        tokens[idx].attrSet("style", CODE_BLOCK_STYLE)
        return default_rule(tokens, idx, options, env)

    return render


def build_markdown() -> MarkdownIt:
    """Commonmark with GitHub tables, strikethrough and bare-URL links; raw HTML is escaped."""
    md = MarkdownIt("commonmark", {"html": False, "linkify": True})
    md.enable(["table", "strikethrough", "linkify"])
    md.add_render_rule("link_open", _render_link_open)
    md.add_render_rule("fence", _with_code_style(md.renderer.rules["fence"]))
    md.add_render_rule("code_block", _with_code_style(md.renderer.rules["code_block"]))
    return md


_markdown = build_markdown()


def render_markdown(text: str) -> Markup:
    return Markup(_markdown.render(text))


def render_message(message: Message) -> Markup:
    role = "user" if message.is_user else "assistant"
    return Markup(
        '<div class="message-bubble {role}" data-message-id="{id}">'
        '<div class="markdown-content">{body}</div>'
        "</div>"
    ).format(role=role, id=message.id, body=render_markdown(message.text))
