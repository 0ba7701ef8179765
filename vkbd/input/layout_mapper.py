"""Layout coordinate mapper.

Turns a two-case layout (``default`` / ``shift`` rows of space separated
button names) into a fixed QWERTY-shaped grid and then into a table keyed
by canonical physical-key identifier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from vkbd.input.key_codes import QWERTY_ROWS, ROW_LENGTHS

logger = logging.getLogger(__name__)

# Grid cell with no button behind it
NO_KEY = -1

LAYOUT_CASES = ('default', 'shift')

PaddedLayout = dict[str, list[list]]


@dataclass(frozen=True)
class KeyMapping:
    normal: str = ''
    shift: str = ''


def _pad_rows(rows: Sequence[str]) -> list[list]:
    tokens = [row.split() for row in rows]
    padded: list[list] = []
    for i, length in enumerate(ROW_LENGTHS):
        row = list(tokens[i]) if i < len(tokens) else []
        if len(row) < length:
            row.extend([NO_KEY] * (length - len(row)))
        padded.append(row)
    return padded


def extract_and_pad_layout(layout: Mapping[str, Sequence[str]] | None) -> PaddedLayout:
    """Reshape every known case of *layout* to the canonical row lengths.

    A missing case yields rows made only of ``NO_KEY``. Rows longer than
    canonical keep their extra tokens; those never reach the code table.
    """
    layout = layout or {}
    processed: PaddedLayout = {}
    for case in LAYOUT_CASES:
        processed[case] = _pad_rows(layout.get(case) or [])
    return processed


def _cell(padded: PaddedLayout, case: str, row: int, col: int) -> str:
    try:
        value = padded[case][row][col]
    except (KeyError, IndexError):
        return ''
    return '' if value == NO_KEY else str(value)


def map_layout_to_event_codes(padded: PaddedLayout) -> dict[str, KeyMapping]:
    """Build ``{identifier: KeyMapping}`` from a padded layout."""
    mapped: dict[str, KeyMapping] = {}
    for row_index, codes in enumerate(QWERTY_ROWS):
        for col_index, code in enumerate(codes):
            mapped[code] = KeyMapping(
                normal=_cell(padded, 'default', row_index, col_index),
                shift=_cell(padded, 'shift', row_index, col_index),
            )
    return mapped


def build_mapping(layout: Mapping[str, Sequence[str]] | None) -> dict[str, KeyMapping]:
    """Pad *layout* and map it to canonical key identifiers."""
    mapping = map_layout_to_event_codes(extract_and_pad_layout(layout))
    logger.debug("Built key mapping for %d codes", len(mapping))
    return mapping
