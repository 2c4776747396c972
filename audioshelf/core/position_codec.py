"""Encode and decode persisted playback entries ("id|seconds").

Entries are split on the first "|". Values are written with exactly two
decimals using half-up rounding of the float's shortest decimal form, so
12.345 is stored as "12.35" and 12.344 as "12.34".
"""
import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

SEPARATOR = "|"
_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class PositionRecord:
    item_id: str
    seconds: float


def round_seconds(seconds: float) -> Decimal:
    value = Decimal(repr(float(seconds)))
    # Precision must cover every integer digit plus the two decimals
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def encode_record(record: PositionRecord) -> str:
    return f"{record.item_id}{SEPARATOR}{round_seconds(record.seconds)}"


def _parse_seconds(raw: str) -> float:
    try:
        value = float(raw.strip())
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def decode_entry(entry: str) -> Optional[PositionRecord]:
    """Parse one entry. Returns None when the separator is missing."""
    item_id, sep, raw = entry.partition(SEPARATOR)
    if not sep:
        return None
    return PositionRecord(item_id=item_id, seconds=_parse_seconds(raw))


def encode_positions(positions: Mapping[str, float]) -> List[str]:
    """Encode a mapping as persisted entries, sorted by id."""
    return [encode_record(PositionRecord(k, v)) for k, v in sorted(positions.items())]


def decode_positions(entries: Iterable[str]) -> Dict[str, float]:
    """Decode persisted entries; malformed entries are skipped, later ids win."""
    out: Dict[str, float] = {}
    for entry in entries:
        record = decode_entry(entry)
        if record is None:
            logger.warning("Skipping malformed playback entry %r", entry)
            continue
        out[record.item_id] = record.seconds
    return out
