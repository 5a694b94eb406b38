"""
Checkout Resolver - every way to finish a score in three darts, best first

find_checkouts() enumerates all 1-, 2- and 3-dart sequences that bring a score
to exactly zero under a finishing rule, then orders them with RANKING_TIERS.
Pure functions over the immutable board catalog; safe to call from any thread.
"""
import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Tuple

from board import (
    ALL_SEGMENTS,
    MAX_THROW_VALUE,
    FinishingRule,
    Segment,
    SegmentType,
    finishers_worth,
    max_score,
    min_remainder,
    parse_rule,
)

logger = logging.getLogger(__name__)

MAX_DARTS = 3

# Most two darts can remove (T20, T20); a remainder above this needs a fourth dart.
MAX_TWO_THROW_SCORE = 2 * MAX_THROW_VALUE

# Most that n darts can remove, for pruning remainders out of reach.
_REACH = {1: MAX_THROW_VALUE, 2: MAX_TWO_THROW_SCORE, 3: 3 * MAX_THROW_VALUE}

# Scores no three darts can check out under double out.
DOUBLE_OUT_BOGEYS = frozenset({169, 168, 166, 165, 163, 162, 159})

BULL_WINDOW = (51, 70)
D16_VALUE = 32
DOUBLE_BULL_VALUE = 50


@dataclass(frozen=True)
class CheckoutPath:
    """Ordered darts that finish a score - immutable"""
    throws: Tuple[Segment, ...]
    total_throws: int

    @staticmethod
    def of(*throws):
        """Build a path from segments in throw order."""
        return CheckoutPath(throws=tuple(throws), total_throws=len(throws))

    @property
    def total(self):
        return sum(t.value for t in self.throws)

    @property
    def first(self):
        return self.throws[0]

    @property
    def last(self):
        return self.throws[-1]

    @property
    def labels(self):
        return [t.label for t in self.throws]


# ── Enumeration ──────────────────────────────────────────────────────────────

def _extend(prefix, remaining, darts_left, rule, floor):
    """Yield paths that finish `remaining` with exactly `darts_left` more darts."""
    if darts_left == 1:
        for finisher in finishers_worth(remaining, rule):
            yield CheckoutPath.of(*prefix, finisher)
        return

    for seg in ALL_SEGMENTS:
        rest = remaining - seg.value
        if rest < floor:
            continue
        if rest > _REACH[darts_left - 1]:
            continue
        yield from _extend(prefix + (seg,), rest, darts_left - 1, rule, floor)


def enumerate_paths(target, rule):
    """
    Enumerate every legal checkout path for a score, unranked

    Paths come out grouped by dart count (1, 2, then 3) and, inside a group,
    in catalog order of each position. Every ordering of the same darts is a
    separate path. No bogey shortcut is taken here.

    Args:
        target: Score to check out
        rule: FinishingRule, or its name ("double_out")

    Returns:
        List of CheckoutPath
    """
    rule = parse_rule(rule)
    if rule is None or target < 1 or target > max_score(rule):
        return []

    floor = min_remainder(rule)
    paths = []
    for darts in range(1, MAX_DARTS + 1):
        if target > _REACH[darts]:
            continue
        paths.extend(_extend((), target, darts, rule, floor))
    return paths


# ── Ranking ──────────────────────────────────────────────────────────────────
#
# Each tier compares two paths for the same (target, rule) and returns a
# negative number if `a` is the better checkout, positive if `b` is, 0 to
# defer to the next tier.

def _prefer(a_flag, b_flag):
    """-1 if only a has the property, 1 if only b has it, else 0."""
    if a_flag and not b_flag:
        return -1
    if b_flag and not a_flag:
        return 1
    return 0


def fewest_darts(a, b, target, rule):
    return a.total_throws - b.total_throws


def in_bull_window(target, rule):
    """Whether "single into bull" lines are preferred for this score and rule."""
    if rule not in (FinishingRule.MASTER_OUT, FinishingRule.SINGLE_OUT):
        return False
    low, high = BULL_WINDOW
    return low <= target <= high


def bull_finish(a, b, target, rule):
    """Between 51 and 70 (single/master out), finish on the bull, set up with a single."""
    if not in_bull_window(target, rule):
        return 0
    a_bull = a.last.value == DOUBLE_BULL_VALUE
    b_bull = b.last.value == DOUBLE_BULL_VALUE
    order = _prefer(a_bull, b_bull)
    if order or not a_bull:
        return order
    return _prefer(a.first.category == SegmentType.SINGLE,
                   b.first.category == SegmentType.SINGLE)


def is_d16_finish(path):
    return path.last.category == SegmentType.DOUBLE and path.last.value == D16_VALUE


def d16_finish(a, b, target, rule):
    return _prefer(is_d16_finish(a), is_d16_finish(b))


def is_uniform(path):
    """True if every dart shares one base number (e.g. 20, D20, T20)."""
    base = path.first.base
    return all(t.base == base for t in path.throws)


def uniform_number(a, b, target, rule):
    return _prefer(is_uniform(a), is_uniform(b))


def big_first(a, b, target, rule):
    """Higher-value darts first, compared position by position."""
    for a_throw, b_throw in zip(a.throws, b.throws):
        if a_throw.value != b_throw.value:
            return b_throw.value - a_throw.value
    return 0


def high_multiplier_first(a, b, target, rule):
    return b.first.multiplier - a.first.multiplier


RANKING_TIERS = (
    fewest_darts,
    bull_finish,
    d16_finish,
    uniform_number,
    big_first,
    high_multiplier_first,
)


def compare_paths(a, b, target, rule):
    """
    Compare two checkout paths for the same score

    Tiers are tried in RANKING_TIERS order; the first one that can tell the
    paths apart decides. A bull finish ordered by the bull tier is never
    re-ordered by the D16 tier.

    Args:
        a, b: CheckoutPath to compare
        target: Score both paths check out
        rule: FinishingRule in play

    Returns:
        Negative if a ranks first, positive if b does, 0 if tied
    """
    rule = parse_rule(rule)
    for tier in RANKING_TIERS:
        order = tier(a, b, target, rule)
        if order:
            return order
    return 0


def rank_paths(paths, target, rule):
    """Sort paths best first. Stable, so ties keep enumeration order."""
    rule = parse_rule(rule)
    return sorted(paths, key=cmp_to_key(lambda a, b: compare_paths(a, b, target, rule)))


def find_checkouts(target, rule):
    """
    Find every checkout for a score, best first

    Out-of-range scores and bogey numbers give an empty list; "no checkout"
    is a normal answer, not an error, and so is an unknown rule name.

    Args:
        target: Remaining score
        rule: FinishingRule, or its name ("double_out")

    Returns:
        List of CheckoutPath, best checkout first
    """
    rule = parse_rule(rule)
    if rule is None or target < 1 or target > max_score(rule):
        return []
    if rule == FinishingRule.DOUBLE_OUT and target in DOUBLE_OUT_BOGEYS:
        return []

    paths = enumerate_paths(target, rule)
    logger.debug("%d checkout paths for %d (%s)", len(paths), target, rule.value)
    return rank_paths(paths, target, rule)


# ── Formatting ───────────────────────────────────────────────────────────────

def format_path(path, sep=" → "):
    """Render a path as dart labels, e.g. "T20 → T20 → BULL"."""
    return sep.join(path.labels)


def path_to_dict(path):
    """JSON-friendly representation of a path."""
    return {
        "throws": [
            {
                "label": t.label,
                "value": t.value,
                "base": t.base,
                "multiplier": t.multiplier,
                "category": t.category.value,
            }
            for t in path.throws
        ],
        "total_throws": path.total_throws,
    }
