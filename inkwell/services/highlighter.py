import html
import logging
from typing import Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from inkwell.settings import settings

logger = logging.getLogger(__name__)

COPY_ICON = (
    '<svg class="w-4 h-4" fill="none" stroke="currentColor" viewBox="0 0 24 24">'
    '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" '
    'd="M8 16H6a2 2 0 01-2-2V6a2 2 0 012-2h8a2 2 0 012 2v2m-6 12h8a2 2 0 002-2v-8'
    'a2 2 0 00-2-2h-8a2 2 0 00-2 2v8a2 2 0 002 2z"></path></svg>'
)

CODE_BLOCK_TEMPLATE = (
    '<div class="code-block relative my-4 rounded-lg overflow-hidden">'
    '<div class="code-header flex items-center justify-between px-4 py-2 '
    'bg-gray-800 text-gray-400 text-xs">'
    '<span class="code-lang font-mono">{label}</span>'
    '<button class="copy-btn hover:text-white transition-colors" '
    'onclick="copyCode(this)">{icon}</button>'
    "</div>"
    '<div class="code-content overflow-x-auto">{body}</div>'
    "</div>"
)


def resolve_lexer(language: str) -> Lexer:
    """Exact lexer name first, then file extension, then plain text."""
    language = language.strip()
    if language:
        try:
            return get_lexer_by_name(language)
        except ClassNotFound:
            pass
        try:
            return get_lexer_for_filename(f"snippet.{language}")
        except ClassNotFound:
            pass
    return TextLexer()


class SyntaxHighlighter:
    """
    Renders code blocks with Pygments inline styles.
    The style is resolved once and shared by every render.
    """

    def __init__(self, style_name: str = "monokai", formatter=None):
        if formatter is None:
            try:
                style = get_style_by_name(style_name)
            except ClassNotFound:
                logger.warning(f"Unknown highlight style {style_name}, using default")
                style = get_style_by_name("default")
            formatter = HtmlFormatter(style=style, noclasses=True)
        self.formatter = formatter

    def highlight(self, code: str, language: Optional[str] = "") -> str:
        language = language or ""
        try:
            lexer = resolve_lexer(language)
            highlighted = highlight(code, lexer, self.formatter)
            return CODE_BLOCK_TEMPLATE.format(
                label=html.escape(language or "text"),
                icon=COPY_ICON,
                body=highlighted,
            )
        except Exception as e:
            logger.debug(f"Highlighting failed for language '{language}': {e}")
            return plain_code_block(code, language)


def plain_code_block(code: str, language: str) -> str:
    return (
        f'<pre><code class="language-{html.escape(language)}">'
        f"{html.escape(code, quote=False)}</code></pre>"
    )


default_highlighter = SyntaxHighlighter(settings.HIGHLIGHT_STYLE)


def highlight_code(code: str, language: str = "") -> str:
    return default_highlighter.highlight(code, language)
