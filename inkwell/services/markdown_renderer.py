"""
Markdown to HTML rendering.

markdown-it-py parses the body into a token stream. The stream is lowered
into a flat list of `Event`s (inline children spliced in after their
container) and walked with an explicit cursor. Headings and code blocks are
buffered until their end event, because the heading anchor needs the whole
heading text and the highlighter needs the whole code block.
"""

import html
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll
from markdown_it.rules_core import StateCore
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin

from inkwell.services.highlighter import SyntaxHighlighter, default_highlighter
from inkwell.utils import slugify

logger = logging.getLogger(__name__)

TABLE_OPEN = '<div class="table-container"><table>'
TABLE_CLOSE = "</table></div>"
TABLE_HEAD_OPEN = "<thead><tr>"
TABLE_HEAD_CLOSE = "</tr></thead><tbody>"
CHECKBOX_CHECKED = (
    '<input type="checkbox" checked disabled class="mr-2 h-4 w-4 rounded '
    'border-gray-300 text-indigo-600 bg-indigo-600 accent-indigo-600"> '
)
CHECKBOX_UNCHECKED = (
    '<input type="checkbox" disabled class="mr-2 h-4 w-4 rounded '
    'border-gray-300 bg-gray-100 dark:bg-gray-700"> '
)
STRIKETHROUGH_OPEN = '<del class="line-through text-gray-500">'
STRIKETHROUGH_CLOSE = "</del>"
BLOCKQUOTE_OPEN = (
    '<blockquote class="border-l-4 border-primary-500 pl-4 my-4 italic '
    'text-gray-600 dark:text-gray-400">'
)
BLOCKQUOTE_CLOSE = "</blockquote>"


class EventKind(str, Enum):
    HEADING_START = "heading_start"
    HEADING_END = "heading_end"
    CODE_BLOCK_START = "code_block_start"
    CODE_BLOCK_END = "code_block_end"
    TEXT = "text"
    INLINE_CODE = "inline_code"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    TABLE_START = "table_start"
    TABLE_END = "table_end"
    TABLE_HEAD_START = "table_head_start"
    TABLE_HEAD_END = "table_head_end"
    TABLE_CELL_START = "table_cell_start"
    TABLE_CELL_END = "table_cell_end"
    TASK_LIST_MARKER = "task_list_marker"
    FOOTNOTE_DEFINITION_START = "footnote_definition_start"
    FOOTNOTE_DEFINITION_END = "footnote_definition_end"
    FOOTNOTE_REFERENCE = "footnote_reference"
    STRIKETHROUGH_START = "strikethrough_start"
    STRIKETHROUGH_END = "strikethrough_end"
    BLOCKQUOTE_START = "blockquote_start"
    BLOCKQUOTE_END = "blockquote_end"
    OTHER = "other"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    # Position of the source token in the flat token list, -1 for synthetic events.
    index: int = -1
    level: int = 0
    text: str = ""
    language: str = ""
    name: str = ""
    checked: bool = False


_TOKEN_KINDS = {
    "heading_close": EventKind.HEADING_END,
    "text": EventKind.TEXT,
    "code_inline": EventKind.INLINE_CODE,
    "softbreak": EventKind.SOFT_BREAK,
    "hardbreak": EventKind.HARD_BREAK,
    "table_open": EventKind.TABLE_START,
    "table_close": EventKind.TABLE_END,
    "th_open": EventKind.TABLE_CELL_START,
    "td_open": EventKind.TABLE_CELL_START,
    "th_close": EventKind.TABLE_CELL_END,
    "td_close": EventKind.TABLE_CELL_END,
    "footnote_reference_close": EventKind.FOOTNOTE_DEFINITION_END,
    "s_open": EventKind.STRIKETHROUGH_START,
    "s_close": EventKind.STRIKETHROUGH_END,
    "blockquote_open": EventKind.BLOCKQUOTE_START,
    "blockquote_close": EventKind.BLOCKQUOTE_END,
}

# tbody_open is written by the table-head end event.
_DROPPED_TOKENS = {"tbody_open"}

_TASK_MARKERS = {"[ ] ": False, "[x] ": True, "[X] ": True}

# `## Title {#id .class}`
_HEADING_ATTRIBUTES_RE = re.compile(r"\s*\{[^{}]*\}$")

_ELLIPSIS_RE = re.compile(r"\.\.\.")
_DASH_RUN_RE = re.compile(r"-{2,}")
EN_DASH = "\u2013"
EM_DASH = "\u2014"
ELLIPSIS = "\u2026"


def _task_list_rule(state: StateCore) -> None:
    """Turn a leading `[ ]` / `[x]` in a list item into a task_list_marker token."""
    tokens = state.tokens
    for i in range(2, len(tokens)):
        token = tokens[i]
        if token.type != "inline" or not token.children:
            continue
        if tokens[i - 1].type != "paragraph_open" or tokens[i - 2].type != "list_item_open":
            continue
        first = token.children[0]
        if first.type != "text":
            continue
        marker = first.content[:4]
        if marker not in _TASK_MARKERS:
            continue
        first.content = first.content[4:]
        checkbox = Token("task_list_marker", "input", 0)
        checkbox.meta = {"checked": _TASK_MARKERS[marker]}
        token.children.insert(0, checkbox)


def task_list_plugin(md: MarkdownIt) -> None:
    md.core.ruler.after("inline", "task_list_marker", _task_list_rule)


def _heading_attributes_rule(state: StateCore) -> None:
    """Drop a trailing `{#id .class}` block from heading text."""
    tokens = state.tokens
    for i in range(len(tokens) - 1):
        if tokens[i].type != "heading_open":
            continue
        inline = tokens[i + 1]
        if inline.type != "inline" or not inline.children:
            continue
        last = inline.children[-1]
        if last.type != "text":
            continue
        stripped = _HEADING_ATTRIBUTES_RE.sub("", last.content)
        if stripped != last.content:
            last.content = stripped
            inline.content = _HEADING_ATTRIBUTES_RE.sub("", inline.content)


def heading_attributes_plugin(md: MarkdownIt) -> None:
    # after text_join, so escaped braces are already plain text
    md.core.ruler.push("heading_attributes", _heading_attributes_rule)


def _dash_run(match: re.Match) -> str:
    n = len(match.group(0))
    if n % 3 == 0:
        return EM_DASH * (n // 3)
    if n % 2 == 0:
        return EN_DASH * (n // 2)
    if n % 3 == 2:
        return EM_DASH * ((n - 2) // 3) + EN_DASH
    return EM_DASH * ((n - 4) // 3) + EN_DASH * 2


def _smart_dashes_rule(state: StateCore) -> None:
    """Dashes and ellipses only; `(c)`, `+-` and the like are left alone."""
    if not state.md.options.typographer:
        return
    for token in state.tokens:
        if token.type != "inline" or not token.children:
            continue
        inside_autolink = 0
        for child in token.children:
            if child.type == "text" and not inside_autolink:
                text = _ELLIPSIS_RE.sub(ELLIPSIS, child.content)
                child.content = _DASH_RUN_RE.sub(_dash_run, text)
            elif child.type == "link_open" and child.info == "auto":
                inside_autolink -= 1
            elif child.type == "link_close" and child.info == "auto":
                inside_autolink += 1


def smart_dashes_plugin(md: MarkdownIt) -> None:
    md.core.ruler.before("smartquotes", "smart_dashes", _smart_dashes_rule)


def build_markdown_parser() -> MarkdownIt:
    return (
        MarkdownIt("commonmark", {"typographer": True})
        .enable(["table", "strikethrough", "smartquotes"])
        .use(footnote_plugin, inline=False, move_to_end=False)
        .use(task_list_plugin)
        .use(smart_dashes_plugin)
        .use(heading_attributes_plugin)
    )


def _footnote_name(token: Token) -> str:
    meta = token.meta or {}
    label = meta.get("label")
    if label:
        return str(label)
    return str(meta.get("id", 0) + 1)


def lower_tokens(tokens: List[Token]) -> Tuple[List[Token], List[Event]]:
    """
    Flatten a markdown-it token tree into (flat_tokens, events).

    Every event backed by a real token records its position in flat_tokens
    so the default renderer can look at its neighbours.
    """
    flat: List[Token] = []
    events: List[Event] = []
    in_head = False

    def emit(kind: EventKind, token: Optional[Token] = None, **fields) -> None:
        index = -1
        if token is not None:
            flat.append(token)
            index = len(flat) - 1
        events.append(Event(kind=kind, index=index, **fields))

    def walk(stream: List[Token]) -> None:
        nonlocal in_head
        for token in stream:
            ttype = token.type
            if ttype in _DROPPED_TOKENS:
                continue
            if ttype == "inline":
                emit(EventKind.OTHER, token)
                walk(token.children or [])
            elif ttype == "heading_open":
                emit(EventKind.HEADING_START, token, level=int(token.tag[1:]))
            elif ttype in ("fence", "code_block"):
                language = ""
                if ttype == "fence" and token.info:
                    info = unescapeAll(token.info).strip()
                    language = info.split()[0] if info else ""
                emit(EventKind.CODE_BLOCK_START, token, language=language)
                emit(EventKind.TEXT, text=token.content)
                emit(EventKind.CODE_BLOCK_END)
            elif ttype == "thead_open":
                in_head = True
                emit(EventKind.TABLE_HEAD_START, token)
            elif ttype == "thead_close":
                in_head = False
                emit(EventKind.TABLE_HEAD_END, token)
            elif ttype in ("tr_open", "tr_close") and in_head:
                # the header row is opened and closed by the table-head events
                continue
            elif ttype == "task_list_marker":
                emit(EventKind.TASK_LIST_MARKER, token, checked=token.meta["checked"])
            elif ttype == "image":
                emit(EventKind.OTHER, token)
                # alt text is rendered by the image token itself
                for child in token.children or []:
                    if child.type in ("text", "code_inline"):
                        emit(EventKind.TEXT, text=child.content)
            elif ttype == "footnote_reference_open":
                emit(EventKind.FOOTNOTE_DEFINITION_START, token, name=_footnote_name(token))
            elif ttype == "footnote_ref":
                emit(EventKind.FOOTNOTE_REFERENCE, token, name=_footnote_name(token))
            elif ttype in _TOKEN_KINDS:
                emit(_TOKEN_KINDS[ttype], token, text=token.content)
            else:
                emit(EventKind.OTHER, token)

    walk(tokens)
    return flat, events


class MarkdownRenderer:
    def __init__(self, highlighter: SyntaxHighlighter = default_highlighter):
        self.md = build_markdown_parser()
        self.highlighter = highlighter

    def parse_events(self, markdown: str) -> Tuple[List[Token], List[Event], Dict]:
        env: Dict = {}
        tokens = self.md.parse(markdown, env)
        flat, events = lower_tokens(tokens)
        return flat, events, env

    def render(self, markdown: str) -> str:
        flat, events, env = self.parse_events(markdown)
        return self.transduce(flat, events, env)

    def transduce(self, flat: List[Token], events: List[Event], env: Dict) -> str:
        output: List[str] = []
        heading_level: Optional[int] = None
        heading_text: List[str] = []
        heading_inner: List[str] = []
        in_code_block = False
        code_lang = ""
        code_content: List[str] = []
        in_table_head = False

        i = 0
        while i < len(events):
            event = events[i]
            kind = event.kind
            i += 1

            if heading_level is not None:
                if kind is EventKind.HEADING_END:
                    anchor = slugify("".join(heading_text))
                    output.append(
                        f'<h{heading_level} id="{anchor}">'
                        f'{"".join(heading_inner)}</h{heading_level}>'
                    )
                    heading_level = None
                    heading_text.clear()
                    heading_inner.clear()
                    continue
                if kind in (EventKind.TEXT, EventKind.INLINE_CODE):
                    heading_text.append(event.text)
                elif kind in (EventKind.SOFT_BREAK, EventKind.HARD_BREAK):
                    heading_text.append(" ")
                heading_inner.append(self._render_default(flat, event, env))
                continue

            if in_code_block:
                if kind is EventKind.TEXT:
                    code_content.append(event.text)
                elif kind is EventKind.CODE_BLOCK_END:
                    in_code_block = False
                    output.append(
                        self.highlighter.highlight("".join(code_content), code_lang)
                    )
                continue

            if kind is EventKind.HEADING_START:
                heading_level = event.level
            elif kind is EventKind.CODE_BLOCK_START:
                in_code_block = True
                code_lang = event.language
                code_content.clear()
            elif kind is EventKind.TABLE_START:
                output.append(TABLE_OPEN)
            elif kind is EventKind.TABLE_END:
                output.append(TABLE_CLOSE)
            elif kind is EventKind.TABLE_HEAD_START:
                in_table_head = True
                output.append(TABLE_HEAD_OPEN)
            elif kind is EventKind.TABLE_HEAD_END:
                in_table_head = False
                output.append(TABLE_HEAD_CLOSE)
            elif kind is EventKind.TABLE_CELL_START:
                output.append("<th>" if in_table_head else "<td>")
            elif kind is EventKind.TABLE_CELL_END:
                output.append("</th>" if in_table_head else "</td>")
            elif kind is EventKind.TASK_LIST_MARKER:
                output.append(CHECKBOX_CHECKED if event.checked else CHECKBOX_UNCHECKED)
            elif kind is EventKind.FOOTNOTE_DEFINITION_START:
                name = html.escape(event.name)
                output.append(f'<div class="footnote" id="fn-{name}"><sup>{name}</sup> ')
            elif kind is EventKind.FOOTNOTE_DEFINITION_END:
                output.append("</div>")
            elif kind is EventKind.FOOTNOTE_REFERENCE:
                name = html.escape(event.name)
                output.append(
                    f'<sup><a href="#fn-{name}" class="footnote-ref">[{name}]</a></sup>'
                )
            elif kind is EventKind.STRIKETHROUGH_START:
                output.append(STRIKETHROUGH_OPEN)
            elif kind is EventKind.STRIKETHROUGH_END:
                output.append(STRIKETHROUGH_CLOSE)
            elif kind is EventKind.BLOCKQUOTE_START:
                output.append(BLOCKQUOTE_OPEN)
            elif kind is EventKind.BLOCKQUOTE_END:
                output.append(BLOCKQUOTE_CLOSE)
            else:
                output.append(self._render_default(flat, event, env))

        if heading_level is not None or in_code_block:
            logger.debug("Markdown event stream ended inside an unterminated block")
        return "".join(output)

    def _render_default(self, flat: List[Token], event: Event, env: Dict) -> str:
        """Render a single token with markdown-it's own HTML renderer."""
        if event.index < 0:
            return ""
        token = flat[event.index]
        if token.type == "inline":
            # children follow as their own events
            return ""
        renderer = self.md.renderer
        rule = renderer.rules.get(token.type)
        if rule is not None:
            return rule(flat, event.index, self.md.options, env)
        return renderer.renderToken(flat, event.index, self.md.options, env)


default_renderer = MarkdownRenderer()


def render_markdown(markdown: str) -> str:
    return default_renderer.render(markdown)
