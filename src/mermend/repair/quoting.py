"""Content classification and safe quoting for labels.

These predicates decide whether a piece of node or label text will break
the Mermaid parser, and `safe_quote` turns such text into a quoted literal
the parser accepts. All of them are pure and never raise.
"""

QUOTE_ENTITY = "&quot;"
RESERVED_CHARS = ("%", "#")


def is_fully_quoted(text: str) -> bool:
    """Check whether text is a single quoted literal.

    The trimmed text must start and end with the same quote character and
    contain exactly two of it.

    Examples:
        >>> is_fully_quoted('"Hello (World)"')
        True
        >>> is_fully_quoted('"a" and "b"')
        False
    """
    trimmed = text.strip()
    if len(trimmed) < 2:
        return False
    for quote in ('"', "'"):
        if trimmed.startswith(quote) and trimmed.endswith(quote):
            return trimmed.count(quote) == 2
    return False


def has_unquoted_paren(text: str) -> bool:
    """Check for a parenthesis outside of any quoted region.

    Single and double quotes both open quoted regions. A quote preceded by a
    backslash does not toggle the region.
    """
    if not text.strip() or is_fully_quoted(text):
        return False

    in_quote = False
    quote_char = ""
    previous = ""
    for char in text:
        if char in ('"', "'") and previous != "\\":
            if not in_quote:
                in_quote = True
                quote_char = char
            elif char == quote_char:
                in_quote = False
                quote_char = ""
        elif char in "()" and not in_quote:
            return True
        previous = char
    return False


def has_problematic_quotes(text: str) -> bool:
    """Check for a double quote inside text that is not fully quoted."""
    if not text.strip() or is_fully_quoted(text):
        return False
    return '"' in text


def has_problematic_content(text: str, reserved_chars: bool = True) -> bool:
    """Check whether text needs quoting to survive the Mermaid parser.

    Args:
        text: Node or label content, without its delimiters
        reserved_chars: Treat any "%" or "#" as problematic

    Returns:
        True if the content must be quoted
    """
    if not text.strip() or is_fully_quoted(text):
        return False
    if has_unquoted_paren(text) or has_problematic_quotes(text):
        return True
    if text.strip().startswith("-"):
        return True
    if reserved_chars and any(char in text for char in RESERVED_CHARS):
        return True
    return False


def safe_quote(text: str) -> str:
    """Wrap text in double quotes, escaping inner double quotes.

    Already fully quoted text is returned unchanged, so the function is
    idempotent.

    Examples:
        >>> safe_quote('Text "quote" (parens)')
        '"Text &quot;quote&quot; (parens)"'
    """
    if is_fully_quoted(text):
        return text
    return '"' + text.replace('"', QUOTE_ENTITY) + '"'


def unquote(text: str) -> str:
    """Strip the outer quotes of fully quoted text; other text is returned as-is."""
    if not is_fully_quoted(text):
        return text
    trimmed = text.strip()
    return trimmed[1:-1]
