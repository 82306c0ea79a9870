"""Post-processing of emitted Markdown/text: whitespace cleanup and de-duplication.

Responsive pages often ship the same content block several times (mobile and
desktop variants) and structural extraction keeps all of them. The passes here
collapse those repeats while leaving legitimately recurring content alone when
it appears far apart.
"""

import re

DEFAULT_LOOKBACK = 3

# A blank line may still carry spaces or tabs; it is a boundary all the same.
_PARAGRAPH_BREAK = re.compile(r"\n[^\S\n]*\n")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def _collapse(text: str) -> str:
    """Collapse all whitespace runs to single spaces and trim."""
    return " ".join(text.split())


def remove_duplicate_lines(block: str) -> str:
    """
    Remove consecutive duplicate lines within a single paragraph.

    A line is dropped only when its trimmed text equals the trimmed text of
    the line kept just before it, so ``"foo\\nbar\\nfoo"`` stays as is.

    Args:
        block: One paragraph (no blank lines inside)

    Returns:
        The paragraph with immediate repeats removed
    """
    kept: list[str] = []
    for line in block.split("\n"):
        trimmed = line.strip()
        if trimmed and kept and trimmed == kept[-1].strip():
            continue
        kept.append(line)
    return "\n".join(kept)


def remove_duplicate_paragraphs(text: str, lookback: int = DEFAULT_LOOKBACK) -> list[str]:
    """
    Split text into paragraphs and drop repeats within a lookback window.

    Each paragraph is first line-deduplicated, then compared (whitespace
    collapsed) against the last ``lookback`` paragraphs that were kept.
    Empty paragraphs are dropped.

    Args:
        text: Text with paragraphs separated by blank lines
        lookback: Number of previously kept paragraphs to compare against

    Returns:
        Kept paragraphs in their original order
    """
    kept: list[str] = []
    recent: list[str] = []

    for paragraph in _PARAGRAPH_BREAK.split(text):
        paragraph = remove_duplicate_lines(paragraph)
        collapsed = _collapse(paragraph)
        if not collapsed:
            continue
        if lookback > 0 and collapsed in recent[-lookback:]:
            continue
        kept.append(paragraph)
        recent.append(collapsed)

    return kept


def normalize(raw_text: str, lookback: int = DEFAULT_LOOKBACK) -> str:
    """
    Normalize emitted Markdown or plain text.

    Stages, in order: paragraph split, line dedup per paragraph, paragraph
    dedup over the last ``lookback`` kept paragraphs, blank paragraph removal,
    then final formatting (no trailing whitespace, at most one blank line in
    a row, trimmed).

    The result is stable: normalizing it again returns it unchanged.

    Example:
        >>> normalize("Menu\\n\\nMenu\\n\\nBody text")
        'Menu\\n\\nBody text'
    """
    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")

    paragraphs = remove_duplicate_paragraphs(text, lookback=lookback)

    result = "\n\n".join(paragraphs)
    result = "\n".join(line.rstrip() for line in result.split("\n"))
    result = _EXCESS_NEWLINES.sub("\n\n", result)
    return result.strip()
