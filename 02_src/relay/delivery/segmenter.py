"""Split an AI answer into chat-sized sentence chunks."""

import re

# URLs, emails and quoted text are never split. Single quotes only open or
# close a span at word boundaries so apostrophes ("don't") are left alone.
_ATOMIC_SPAN = re.compile(
    r"(?:https?://|www\.)\S+"
    r"|\S+@\S+\.\S+"
    r'|"[^"\n]*"'
    r"|(?<!\w)'[^'\n]*'(?!\w)"
)

# A run of text up to and including its terminators (plus a closing quote),
# or the unterminated tail.
_SENTENCE = re.compile(r"""[^.?!]*[.?!]+["']?|[^.?!]+\Z""")

# Stands in for every character of an atomic span; neither a terminator nor a quote
_FILLER = "_"


def _blank_spans(text: str) -> str:
    """Same-length copy of ``text`` with atomic spans overwritten by filler."""
    return _ATOMIC_SPAN.sub(lambda m: _FILLER * len(m.group(0)), text)


def segment(text: str) -> list[str]:
    """
    Split ``text`` into sentence-like parts.

    Sentence boundaries are found on a copy where URLs, emails and quotes
    are blanked out, then the parts are cut from ``text`` at the same
    offsets. Joining the parts gives back ``text`` unchanged; leading
    whitespace is kept on each part and trimmed at send time.

    Args:
        text: Answer returned by the AI backend.

    Returns:
        Ordered parts; empty for empty input.
    """
    if not text:
        return []

    blanked = _blank_spans(text)
    return [text[m.start() : m.end()] for m in _SENTENCE.finditer(blanked)]
