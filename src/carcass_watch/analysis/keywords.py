"""Keyword-based relevance filtering of observation records.

A record is relevant when, across the rule's text fields (compared in lower
case):

  1. at least one inclusion keyword appears as a substring,
  2. no exclusion keyword appears as a substring, and
  3. it was observed on or after the cutoff date.

The three predicates commute; ``filter_records`` applies them in that order so
the per-stage counts read naturally, with the date cutoff last.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any

import pandas as pd

from carcass_watch.schemas import KeywordRule

logger = logging.getLogger(__name__)

__all__ = [
    "FilterCounts",
    "KeywordRule",
    "LexicalFilterResult",
    "filter_records",
    "record_passes",
    "text_matches",
]


# =============================================================================
# Single-record predicates
# =============================================================================


def _normalise_text(value: object) -> str:
    """Lower-case text; missing values read as empty."""
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value).lower()


def _as_date(value: object) -> date | None:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def text_matches(texts: Iterable[object], keywords: Iterable[str]) -> bool:
    """True if any keyword is a case-insensitive substring of any text."""
    lowered = [_normalise_text(t) for t in texts]
    return any(kw.lower() in text for kw in keywords for text in lowered)


def record_passes(
    record: Mapping[str, Any],
    rule: KeywordRule,
    cutoff: date,
    date_field: str = "observed_on",
) -> bool:
    """Apply the rule and cutoff to one record (a row mapping)."""
    texts = [record.get(field) for field in rule.fields]
    if not text_matches(texts, rule.include):
        return False
    if text_matches(texts, rule.exclude):
        return False
    observed = _as_date(record.get(date_field))
    return observed is not None and observed >= cutoff


# =============================================================================
# Table filtering
# =============================================================================


@dataclass(frozen=True)
class FilterCounts:
    """Records remaining after each stage of the lexical filter."""

    input: int
    after_include: int
    after_exclude: int
    after_cutoff: int

    @property
    def dropped_by_include(self) -> int:
        return self.input - self.after_include

    @property
    def dropped_by_exclude(self) -> int:
        return self.after_include - self.after_exclude

    @property
    def dropped_by_cutoff(self) -> int:
        return self.after_exclude - self.after_cutoff

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class LexicalFilterResult:
    """Filtered records plus the per-stage counts that produced them."""

    records: pd.DataFrame
    counts: FilterCounts


def _field_text(frame: pd.DataFrame, field: str) -> pd.Series:
    if field not in frame.columns:
        return pd.Series("", index=frame.index, dtype=object)
    return frame[field].map(_normalise_text)


def _contains_any(frame: pd.DataFrame, fields: Iterable[str], keywords: Iterable[str]) -> pd.Series:
    keywords = sorted(keywords)
    mask = pd.Series(False, index=frame.index, dtype=bool)
    for field in fields:
        text = _field_text(frame, field)
        for kw in keywords:
            mask |= text.map(lambda t, kw=kw: kw in t).astype(bool)
    return mask


def filter_records(
    frame: pd.DataFrame,
    rule: KeywordRule,
    cutoff: date,
    date_field: str = "observed_on",
) -> LexicalFilterResult:
    """
    Keep the rows of ``frame`` that satisfy ``rule`` and ``cutoff``.

    Input order is preserved.  The returned frame is a copy with a fresh
    ``RangeIndex``; ``frame`` is not modified.
    """
    n_input = len(frame)

    included = frame[_contains_any(frame, rule.fields, rule.include)]
    n_include = len(included)

    kept = included[~_contains_any(included, rule.fields, rule.exclude)]
    n_exclude = len(kept)

    if date_field in kept.columns:
        # Per-value parsing, same as record_passes: mixed ISO layouts and
        # tz-aware timestamps all reduce to a calendar date.
        dates = kept[date_field].map(_as_date)
        on_or_after = dates.map(lambda d: d is not None and d >= cutoff).astype(bool)
        kept = kept[on_or_after]
    else:
        kept = kept.iloc[0:0]

    counts = FilterCounts(
        input=n_input,
        after_include=n_include,
        after_exclude=n_exclude,
        after_cutoff=len(kept),
    )
    logger.info(
        "Lexical filter: %d in, %d dropped (no keyword), %d dropped (excluded), "
        "%d dropped (before %s), %d kept",
        counts.input,
        counts.dropped_by_include,
        counts.dropped_by_exclude,
        counts.dropped_by_cutoff,
        cutoff.isoformat(),
        counts.after_cutoff,
    )
    return LexicalFilterResult(records=kept.reset_index(drop=True).copy(), counts=counts)
