from __future__ import annotations

import logging
from typing import Tuple

logger = logging.getLogger(__name__)

# Printed by the generated program around the executing cell. A cell that
# prints either token itself will confuse extraction; that risk is accepted.
OPEN_MARKER = "gobook-output-start"
CLOSE_MARKER = "gobook-output-end"


def marker_statement(marker: str) -> str:
    """Go statement that prints ``marker`` (to stderr, followed by a newline)."""
    return f'println("{marker}")'


def extract(raw_output: bytes) -> Tuple[bytes, bool]:
    """Return the bytes printed between the two markers and whether both were seen.

    The newline ``println`` writes after the open marker belongs to the marker.
    """
    open_tok = (OPEN_MARKER + "\n").encode("utf-8")
    close_tok = CLOSE_MARKER.encode("utf-8")

    open_at = raw_output.find(open_tok)
    close_at = raw_output.find(close_tok)
    if open_at == -1 or close_at == -1:
        return b"", False

    start = open_at + len(open_tok)
    end = close_at
    if start > end or start > len(raw_output) or end > len(raw_output):
        logger.warning(
            "Output markers out of range (start=%d end=%d len=%d)",
            start,
            end,
            len(raw_output),
        )
        return b"", False
    return raw_output[start:end], True
