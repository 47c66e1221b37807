"""Deterministic post-processing for raw generation output.

The generation service may embed one reasoning segment delimited by a start
and an end marker (``<think>...</think>`` for deepseek-r1). It is never shown
to users, so it is removed before the answer leaves the synthesizer.
"""

from __future__ import annotations

import re

DEFAULT_START = "<think>"
DEFAULT_END = "</think>"


def strip_reasoning(
    text: str,
    start_marker: str = DEFAULT_START,
    end_marker: str = DEFAULT_END,
) -> str:
    """Remove the delimited reasoning segment and trim the result.

    - ``<think>...</think>answer`` -> ``answer``
    - ``<think>...`` (never closed, output cut off) -> ``""``
    - ``...</think>answer`` (start marker missing) -> ``answer``

    Markers are matched case-insensitively.
    """
    if not text:
        return ""

    start = re.escape(start_marker)
    end = re.escape(end_marker)

    cleaned = re.sub(rf"{start}[\s\S]*?{end}", "", text, flags=re.IGNORECASE)
    # Segment opened but never closed.
    cleaned = re.sub(rf"{start}[\s\S]*\Z", "", cleaned, flags=re.IGNORECASE)
    # Closing marker without its opening marker.
    cleaned = re.sub(rf"\A[\s\S]*?{end}", "", cleaned, flags=re.IGNORECASE)

    return cleaned.strip()
