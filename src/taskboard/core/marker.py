# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""The "[Added on: DD Mon YYYY]" marker embedded at the start of task descriptions."""

from __future__ import annotations

from datetime import date

MARKER_PREFIX = "[Added on:"

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_marker(day: date) -> str:
    # Month names fixed to English regardless of process locale.
    return f"{MARKER_PREFIX} {day.day:02d} {_MONTHS[day.month - 1]} {day.year}]"


def with_marker(day: date, description: str) -> str:
    return f"{format_marker(day)} {description}"


def splice_marker(old_description: str, new_description: str) -> str:
    """Carry the marker of ``old_description`` over to ``new_description``.

    Every copy of the marker already present in the new text is removed
    first (not only the first occurrence),
    so repeated edits keep exactly one marker. Without a marker in the old
    description the new one is returned as is.
    """
    old = old_description or ""
    new = new_description or ""
    if not old.startswith(MARKER_PREFIX):
        return new
    marker = old.split("]", 1)[0] + "]"
    cleaned = new.replace(marker, "").strip()
    return f"{marker} {cleaned}"
