"""
Checkout Tables — Reachable scores and cached checkout lookups per rule.

Constants are computed at import time (a few set unions, no path building).
No randomness involved.

Constants:
    REACHABLE        — Dict: FinishingRule → {darts: frozenset of scores finishable in that many darts}
    BOGEY_NUMBERS    — Dict: FinishingRule → sorted scores (1..max) with no checkout

Functions:
    checkouts_for(target, rule) — Ranked paths, cached per (target, rule)
    best_checkout(target, rule) — Top-ranked path, or None
    min_throws(target, rule)    — Fewest darts needed, or None
    path_count(target, rule)    — Number of distinct checkout paths
    is_bogey(target, rule)      — In-range score with no checkout
"""
from functools import lru_cache

from board import ALL_SEGMENTS, FinishingRule, finishers_for, max_score, parse_rule
from checkout import MAX_DARTS, find_checkouts


# ── REACHABLE: scores that n darts can finish ────────────────────────────────

def _build_reachable(rule):
    """Scores finishable in exactly 1, 2 and 3 darts under a rule.

    The last dart must be a legal finisher; earlier darts can be anything.
    Built by adding one unrestricted dart in front of the previous set.
    """
    values = {s.value for s in ALL_SEGMENTS}
    reachable = {1: frozenset(s.value for s in finishers_for(rule))}
    for darts in range(2, MAX_DARTS + 1):
        reachable[darts] = frozenset(v + r for v in values for r in reachable[darts - 1])
    return reachable

REACHABLE = {rule: _build_reachable(rule) for rule in FinishingRule}


# ── BOGEY_NUMBERS: in-range scores nobody can check out ──────────────────────

def _build_bogeys(rule):
    finishable = frozenset().union(*REACHABLE[rule].values())
    return tuple(s for s in range(1, max_score(rule) + 1) if s not in finishable)

BOGEY_NUMBERS = {rule: _build_bogeys(rule) for rule in FinishingRule}


# ── Lookups ──────────────────────────────────────────────────────────────────

def checkouts_for(target, rule):
    """Ranked paths for a score, as a tuple. Accepts a rule name; unknown names give ()."""
    rule = parse_rule(rule)
    if rule is None:
        return ()
    return _ranked(target, rule)


@lru_cache(maxsize=1024)
def _ranked(target, rule):
    # keyed on the enum member so "double_out" and DOUBLE_OUT share an entry
    return tuple(find_checkouts(target, rule))


def best_checkout(target, rule):
    """
    Return the top-ranked checkout for a score.

    Args:
        target: Remaining score
        rule: FinishingRule in play

    Returns:
        CheckoutPath, or None for a bogey or out-of-range score
    """
    paths = checkouts_for(target, rule)
    return paths[0] if paths else None


def min_throws(target, rule):
    """Fewest darts that check out a score, or None if it can't be done."""
    rule = parse_rule(rule)
    if rule is None or target < 1 or target > max_score(rule):
        return None
    for darts in range(1, MAX_DARTS + 1):
        if target in REACHABLE[rule][darts]:
            return darts
    return None


def path_count(target, rule):
    """Number of distinct checkout paths (every dart order counted)."""
    return len(checkouts_for(target, rule))


def is_bogey(target, rule):
    """True for an in-range score with no checkout under the rule."""
    rule = parse_rule(rule)
    return rule is not None and target in BOGEY_NUMBERS[rule]
