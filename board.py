"""
Dartboard Model - Segment catalog and finishing rules

This module describes every scoring region of a standard dartboard and the
house rules that decide which regions may legally end a leg. It has no
frontend dependencies: everything is immutable and built once at import time.
"""
import argparse
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class SegmentType(Enum):
    """Kind of scoring region a dart can land in"""
    SINGLE = "S"
    DOUBLE = "D"
    TREBLE = "T"
    BULL = "B"            # outer bull, 25
    DOUBLE_BULL = "DB"    # inner bull, 50


class FinishingRule(Enum):
    """House rule constraining the final dart of a checkout"""
    SINGLE_OUT = "single_out"
    MASTER_OUT = "master_out"
    DOUBLE_OUT = "double_out"


@dataclass(frozen=True)
class Segment:
    """One throw outcome on the board - immutable"""
    base: int  # 1-20, or 25 for both bull rings
    multiplier: int  # 1-3; double bull counts as 2
    category: SegmentType
    label: str
    value: int  # points removed from the score

    def __str__(self):
        return self.label


BULL_BASE = 25
NUMBERS = range(1, 21)


def build_catalog():
    """
    Build the 62 possible throw outcomes in catalog order.

    Order is singles 1-20, doubles 1-20, trebles 1-20, outer bull, double bull.
    Path enumeration walks this order, so it also fixes the order of paths
    that the ranker cannot tell apart.

    Returns:
        Tuple of Segment
    """
    segments = []
    for n in NUMBERS:
        segments.append(Segment(n, 1, SegmentType.SINGLE, f"{n}", n))
    for n in NUMBERS:
        segments.append(Segment(n, 2, SegmentType.DOUBLE, f"D{n}", n * 2))
    for n in NUMBERS:
        segments.append(Segment(n, 3, SegmentType.TREBLE, f"T{n}", n * 3))
    segments.append(Segment(BULL_BASE, 1, SegmentType.BULL, "25", 25))
    segments.append(Segment(BULL_BASE, 2, SegmentType.DOUBLE_BULL, "BULL", 50))
    return tuple(segments)


ALL_SEGMENTS: Tuple[Segment, ...] = build_catalog()

MAX_THROW_VALUE = max(s.value for s in ALL_SEGMENTS)  # T20

_SEGMENTS_BY_LABEL = {s.label: s for s in ALL_SEGMENTS}


# ── Finishing rules ──────────────────────────────────────────────────────────

_MAX_SCORES = {
    FinishingRule.SINGLE_OUT: 180,
    FinishingRule.MASTER_OUT: 180,
    FinishingRule.DOUBLE_OUT: 170,
}

_RULE_DESCRIPTIONS = {
    FinishingRule.SINGLE_OUT: "Single Out (finish on any segment)",
    FinishingRule.MASTER_OUT: "Master Out (finish on Treble, Double, or Bull)",
    FinishingRule.DOUBLE_OUT: "Double Out (finish on Double or Double Bull)",
}


def is_finisher(segment, rule):
    """
    Check if a segment may be the last dart of a checkout under a rule

    Args:
        segment: Segment to check
        rule: FinishingRule in play

    Returns:
        True if the segment legally ends the leg
    """
    if rule == FinishingRule.DOUBLE_OUT:
        return segment.category in (SegmentType.DOUBLE, SegmentType.DOUBLE_BULL)
    if rule == FinishingRule.MASTER_OUT:
        return segment.category != SegmentType.SINGLE
    return True


_FINISHERS = {
    rule: tuple(s for s in ALL_SEGMENTS if is_finisher(s, rule))
    for rule in FinishingRule
}


def _index_by_value(segments):
    """Group segments by the points they remove, keeping catalog order."""
    by_value = {}
    for seg in segments:
        by_value.setdefault(seg.value, []).append(seg)
    return {value: tuple(segs) for value, segs in by_value.items()}


_FINISHERS_BY_VALUE = {rule: _index_by_value(segs) for rule, segs in _FINISHERS.items()}


def finishers_for(rule: FinishingRule) -> Tuple[Segment, ...]:
    """Return the catalog segments that may end a checkout, in catalog order."""
    return _FINISHERS[rule]


def finishers_worth(value: int, rule: FinishingRule) -> Tuple[Segment, ...]:
    """Return the legal finishers worth exactly `value` points (may be empty)."""
    return _FINISHERS_BY_VALUE[rule].get(value, ())


def max_score(rule: FinishingRule) -> int:
    """Highest score that can be checked out in three darts under a rule."""
    return _MAX_SCORES[rule]


def min_remainder(rule: FinishingRule) -> int:
    """Smallest score a legal finisher can remove (S1 under single out, D1 otherwise)."""
    return min(s.value for s in _FINISHERS[rule])


def describe_rule(rule: FinishingRule) -> str:
    return _RULE_DESCRIPTIONS[rule]


def parse_rule(name):
    """
    Look up a FinishingRule by name

    Accepts the enum value ("double_out"), the member name ("DOUBLE_OUT")
    or a dashed form ("double-out"), case-insensitively.

    Args:
        name: Rule name string, or a FinishingRule (returned as is)

    Returns:
        FinishingRule, or None if the name is not recognised
    """
    if isinstance(name, FinishingRule):
        return name
    if not isinstance(name, str):
        return None
    key = name.strip().lower().replace("-", "_")
    for rule in FinishingRule:
        if rule.value == key:
            return rule
    return None


def rule_arg(value):
    """argparse type for a finishing rule name."""
    rule = parse_rule(value)
    if rule is None:
        raise argparse.ArgumentTypeError(
            f"unknown mode {value!r} (choose single_out, master_out or double_out)"
        )
    return rule


def segment_by_label(label):
    """Look up a catalog segment by its label ("T20", "25", "BULL"), or None."""
    if not isinstance(label, str):
        return None
    return _SEGMENTS_BY_LABEL.get(label.strip().upper())
