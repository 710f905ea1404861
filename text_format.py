# text_format.py
import html
import re

_LINK = re.compile(r"\[([^\]]+)\]\((https?://[^)\s]+)\)")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_UNDERLINE = re.compile(r"__(.+?)__")
_ITALIC = re.compile(r"\*(.+?)\*")
_STRIKE = re.compile(r"~~(.+?)~~")
_CODE = re.compile(r"`([^`]+)`")
_NEWLINE = re.compile(r"\r?\n")


def format_text_to_html(text) -> str:
    """
    Escapa el HTML y convierte un markdown mínimo a HTML seguro:
    [links](https://...), **negrita**, __subrayado__, *cursiva*,
    ~~tachado~~, `código` y saltos de línea.
    """
    if not text:
        return ""

    out = html.escape(text, quote=True).replace("&#x27;", "&#039;")

    out = _LINK.sub(r'<a href="\2" target="_blank" rel="noopener noreferrer">\1</a>', out)
    out = _BOLD.sub(r"<strong>\1</strong>", out)
    out = _UNDERLINE.sub(r"<u>\1</u>", out)
    # cursiva después de negrita
    out = _ITALIC.sub(r"<em>\1</em>", out)
    out = _STRIKE.sub(r"<del>\1</del>", out)
    out = _CODE.sub(r'<code class="bg-gray-100 px-1 rounded text-sm">\1</code>', out)
    out = _NEWLINE.sub("<br/>", out)
    return out
