"""
Document Number Generation Service
Builds order, tracking, invoice and truck-request numbers from segment formats.
"""
from datetime import datetime, timezone
from typing import List, Dict, Optional

from database import Store

# Segment types:
# - STATIC: Fixed text (e.g., "ORD", "TRK")
# - YEAR: Current year (2-digit or 4-digit)
# - SEQ: Counter scoped to the format and year, zero-padded
FORMATS: Dict[str, Dict] = {
    "order": {
        "segments": [
            {"type": "STATIC", "value": "ORD"},
            {"type": "YEAR", "digits": 4},
            {"type": "SEQ", "digits": 6},
        ],
        "separator": "-",
    },
    "tracking": {
        "segments": [
            {"type": "STATIC", "value": "TRK-FX"},
            {"type": "YEAR", "digits": 2, "join_next": True},
            {"type": "SEQ", "digits": 6},
        ],
        "separator": "-",
    },
    "invoice": {
        "segments": [
            {"type": "STATIC", "value": "INV"},
            {"type": "YEAR", "digits": 4},
            {"type": "SEQ", "digits": 6},
        ],
        "separator": "-",
    },
    "truck_request": {
        "segments": [
            {"type": "STATIC", "value": "TRQ"},
            {"type": "YEAR", "digits": 4},
            {"type": "SEQ", "digits": 6},
        ],
        "separator": "-",
    },
}


def _render(segments: List[Dict], separator: str, year: int, seq: Optional[int]) -> str:
    parts = []
    glue_next = False
    for segment in segments:
        seg_type = segment["type"]

        if seg_type == "STATIC":
            text = segment["value"]
        elif seg_type == "YEAR":
            text = str(year)[-2:] if segment.get("digits", 4) == 2 else str(year)
        elif seg_type == "SEQ":
            digits = segment.get("digits", 6)
            text = str(seq).zfill(digits) if seq is not None else "X" * digits
        else:
            raise ValueError(f"Unknown segment type: {seg_type}")

        if glue_next and parts:
            parts[-1] += text
        else:
            parts.append(text)
        glue_next = segment.get("join_next", False)

    return separator.join(parts)


class NumberService:
    """Generate document numbers from an atomic per-year counter."""

    @staticmethod
    async def generate(store: Store, kind: str, now: Optional[datetime] = None) -> str:
        """
        Generate the next number for `kind` (order, tracking, invoice, truck_request).

        The counter is incremented atomically by the store, so two concurrent
        creations never receive the same number.

        Example: order in 2026 -> ORD-2026-000001, tracking -> TRK-FX-26000001
        """
        fmt = FORMATS[kind]
        year = (now or datetime.now(timezone.utc)).year
        seq = await store.next_sequence(f"{kind}_seq_{year}")
        return _render(fmt["segments"], fmt["separator"], year, seq)

    @staticmethod
    def preview_format(kind: str) -> str:
        """Show what a number of this kind looks like, e.g. ORD-2026-XXXXXX."""
        fmt = FORMATS[kind]
        return _render(fmt["segments"], fmt["separator"], datetime.now(timezone.utc).year, None)
