"""
Round-Robin Generator

Deterministic circle-method schedule for a league roster:
- Odd rosters get a BYE placeholder so every round is a perfect matching
- Position 0 is fixed; the rest rotate one step per round (last moves to second)
- Round r pairs position i with position n-1-i for i in [0, n/2)

For an even roster of n members this yields n-1 rounds; an odd roster of n
yields n rounds with exactly one bye per round. Across one cycle every
unordered pair of members meets exactly once.

A four-member roster yields 1v4, 2v3 / 1v3, 4v2 / 1v2, 3v4.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from league_app.errors import InvalidCadence, ValidationError


@dataclass(frozen=True)
class Member:
    """A league member as seen by the scheduler."""

    id: int
    display_name: str
    active: bool = True


@dataclass(frozen=True)
class Pairing:
    """Oriented pairing within a round (home = lower circle position)."""

    sequence: int
    home: Member
    away: Member

    @property
    def member_ids(self) -> Tuple[int, int]:
        return (self.home.id, self.away.id)

    def key(self) -> frozenset:
        return frozenset(self.member_ids)


@dataclass(frozen=True)
class Round:
    index: int  # 1-based across the whole schedule
    pairings: Tuple[Pairing, ...]
    bye: Optional[Member] = None

    def member_ids(self) -> List[int]:
        ids: List[int] = []
        for pairing in self.pairings:
            ids.extend(pairing.member_ids)
        if self.bye is not None:
            ids.append(self.bye.id)
        return ids


# Placeholder that pads odd rosters; never leaks out of this module
_BYE = object()


def round_count(member_count: int, cycles: int = 1) -> int:
    """
    Return number of rounds for a roster of n eligible members.
    Even n: n-1 rounds per cycle. Odd n: n rounds per cycle (with BYE).
    """
    if member_count < 2:
        return 0
    per_cycle = member_count - 1 if member_count % 2 == 0 else member_count
    return per_cycle * cycles


def eligible_members(members: Sequence[Member]) -> List[Member]:
    """Active members in input order; rejects duplicate ids."""
    seen = set()
    eligible: List[Member] = []
    for member in members:
        if member.id in seen:
            raise ValidationError(f"Member {member.id} appears more than once in the roster")
        seen.add(member.id)
        if member.active:
            eligible.append(member)
    return eligible


def _single_cycle(members: List[Member]) -> List[Tuple[List[Tuple[Member, Member]], Optional[Member]]]:
    positions: list = list(members)
    if len(positions) % 2 == 1:
        positions.append(_BYE)

    n = len(positions)
    half = n // 2
    cycle = []

    for _ in range(n - 1):
        pairs: List[Tuple[Member, Member]] = []
        bye: Optional[Member] = None
        for i in range(half):
            a, b = positions[i], positions[n - 1 - i]
            if a is _BYE:
                bye = b
                continue
            if b is _BYE:
                bye = a
                continue
            pairs.append((a, b))
        cycle.append((pairs, bye))
        # Rotate: keep 0, move last to second, shift others
        positions = [positions[0]] + [positions[-1]] + positions[1:-1]

    return cycle


def generate(members: Sequence[Member], cycles: int = 1) -> List[Round]:
    """
    Generate the ordered rounds of a round-robin schedule.

    Args:
        members: Roster in a stable order (the order fixes the pairing layout)
        cycles: 1 for a single round-robin, 2 to add return fixtures
                (home/away swapped on every even cycle)

    Returns:
        Rounds indexed 1..N. Empty when fewer than 2 members are eligible;
        callers decide how to surface that.
    """
    if cycles < 1:
        raise InvalidCadence(f"cycles must be >= 1 (got {cycles})")

    eligible = eligible_members(members)
    if len(eligible) < 2:
        return []

    cycle = _single_cycle(eligible)
    rounds: List[Round] = []
    index = 0

    for cycle_number in range(cycles):
        swap = cycle_number % 2 == 1
        for pairs, bye in cycle:
            index += 1
            pairings = tuple(
                Pairing(sequence=seq, home=b if swap else a, away=a if swap else b)
                for seq, (a, b) in enumerate(pairs, start=1)
            )
            rounds.append(Round(index=index, pairings=pairings, bye=bye))

    return rounds
