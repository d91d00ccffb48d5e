"""Content sanitizer.

Blanks out the bodies of comments, string literals and CDATA sections so
the pattern-based extractors never match text that only appears inside
them. Every sanitized text has exactly the same length and the same
newline offsets as its input, so a (line, column) computed on sanitized
text is valid on the original.

Delimiters and line breaks are kept; every other character inside an
opaque span becomes a single space. Unterminated spans are blanked up to
the end of the input.
"""

# Characters that always pass through untouched
_LINE_BREAKS = "\r\n"

# Java scanner modes
_CODE = 0
_BLOCK_COMMENT = 1
_LINE_COMMENT = 2
_STRING = 3
_CHAR = 4
_TEXT_BLOCK = 5

# XML scanner modes
_XML_TEXT = 0
_XML_COMMENT = 1
_XML_CDATA = 2

_XML_COMMENT_OPEN = "<!--"
_XML_COMMENT_CLOSE = "-->"
_XML_CDATA_OPEN = "<![CDATA["
_XML_CDATA_CLOSE = "]]>"


def _blank(ch: str) -> str:
    return ch if ch in _LINE_BREAKS else " "


def sanitize_java_content(content: str) -> str:
    """Blank Java comments, string/char literals and text blocks.

    String and char literals end at the closing quote or at the end of the
    line, since Java literals cannot span lines. Backslash escapes are
    honoured inside literals and text blocks.
    """
    out: list[str] = []
    mode = _CODE
    i = 0
    n = len(content)

    while i < n:
        ch = content[i]
        nxt = content[i + 1] if i + 1 < n else ""

        if mode == _CODE:
            if ch == "/" and nxt == "*":
                out.append("/*")
                i += 2
                mode = _BLOCK_COMMENT
            elif ch == "/" and nxt == "/":
                out.append("//")
                i += 2
                mode = _LINE_COMMENT
            elif content.startswith('"""', i):
                out.append('"""')
                i += 3
                mode = _TEXT_BLOCK
            elif ch == '"':
                out.append(ch)
                i += 1
                mode = _STRING
            elif ch == "'":
                out.append(ch)
                i += 1
                mode = _CHAR
            else:
                out.append(ch)
                i += 1

        elif mode == _BLOCK_COMMENT:
            if ch == "*" and nxt == "/":
                out.append("*/")
                i += 2
                mode = _CODE
            else:
                out.append(_blank(ch))
                i += 1

        elif mode == _LINE_COMMENT:
            if ch == "\n":
                out.append(ch)
                mode = _CODE
            else:
                out.append(_blank(ch))
            i += 1

        elif mode == _TEXT_BLOCK:
            if content.startswith('"""', i):
                out.append('"""')
                i += 3
                mode = _CODE
            elif ch == "\\" and nxt and nxt not in _LINE_BREAKS:
                out.append("  ")
                i += 2
            else:
                out.append(_blank(ch))
                i += 1

        else:
            quote = '"' if mode == _STRING else "'"
            if ch == quote:
                out.append(ch)
                i += 1
                mode = _CODE
            elif ch == "\n":
                # unterminated literal: the line break closes it
                out.append(ch)
                i += 1
                mode = _CODE
            elif ch == "\\" and nxt and nxt not in _LINE_BREAKS:
                out.append("  ")
                i += 2
            else:
                out.append(_blank(ch))
                i += 1

    return "".join(out)


def sanitize_xml_content(content: str) -> str:
    """Blank the bodies of XML comments and CDATA sections.

    Attribute values are left alone; the XML extractors read namespaces and
    ids out of them.
    """
    out: list[str] = []
    mode = _XML_TEXT
    i = 0
    n = len(content)

    while i < n:
        if mode == _XML_TEXT:
            if content.startswith(_XML_COMMENT_OPEN, i):
                out.append(_XML_COMMENT_OPEN)
                i += len(_XML_COMMENT_OPEN)
                mode = _XML_COMMENT
            elif content.startswith(_XML_CDATA_OPEN, i):
                out.append(_XML_CDATA_OPEN)
                i += len(_XML_CDATA_OPEN)
                mode = _XML_CDATA
            else:
                out.append(content[i])
                i += 1
            continue

        close = _XML_COMMENT_CLOSE if mode == _XML_COMMENT else _XML_CDATA_CLOSE
        if content.startswith(close, i):
            out.append(close)
            i += len(close)
            mode = _XML_TEXT
        else:
            out.append(_blank(content[i]))
            i += 1

    return "".join(out)


_SANITIZERS = {
    "java": sanitize_java_content,
    "xml": sanitize_xml_content,
}


def sanitize(content: str, language: str) -> str:
    """Sanitize content for the given language ("java" or "xml")."""
    try:
        sanitizer = _SANITIZERS[language]
    except KeyError:
        raise ValueError(f"Unsupported language for sanitization: {language!r}") from None
    return sanitizer(content)
