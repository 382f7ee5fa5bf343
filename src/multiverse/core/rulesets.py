"""Enumeration of the four-threshold neighbor-count ruleset family."""

from dataclasses import dataclass
from typing import Iterator, Tuple

# One beyond the largest possible neighbor count: an overpopulation threshold
# of 9 never triggers.
MAX_THRESHOLD = 9


class RulesetError(ValueError):
    """Base class for ruleset lookup failures."""


class InvalidRuleset(RulesetError):
    """Raised when a ruleset is not a member of the valid family."""


class InvalidRulesetId(RulesetError):
    """Raised when a ruleset id is outside the catalog range."""


@dataclass(frozen=True)
class Ruleset:
    """A neighbor-count rule with four thresholds.

    - count <= underpop_end: the cell dies
    - count >= overpop_start: the cell dies
    - birth_start <= count <= birth_end: the cell lives
    - otherwise the cell keeps its state
    """

    underpop_end: int
    birth_start: int
    birth_end: int
    overpop_start: int

    def is_valid(self) -> bool:
        """Whether 0 <= u < b0 <= b1 < o <= 9 holds."""
        return (
            0 <= self.underpop_end < self.birth_start <= self.birth_end < self.overpop_start <= MAX_THRESHOLD
        )

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.underpop_end, self.birth_start, self.birth_end, self.overpop_start)

    def next_state(self, alive: bool, neighbors: int) -> bool:
        """Apply the rule to a single cell."""
        if neighbors <= self.underpop_end or neighbors >= self.overpop_start:
            return False
        if self.birth_start <= neighbors <= self.birth_end:
            return True
        return alive

    def __str__(self) -> str:
        return f"{self.underpop_end}/{self.birth_start}-{self.birth_end}/{self.overpop_start}"


# The classic birth-on-3, survive-on-2-or-3 rule expressed in this family.
CONWAY = Ruleset(1, 3, 3, 4)


class RulesetCatalog:
    """The fixed, ordered family of valid rulesets.

    Rulesets are listed in increasing lexicographic (u, b0, b1, o) order and
    indexed 0..N-1. The order is the only meaning a ruleset id has, so a
    catalog is built once and shared by everything that stores or reads ids.
    """

    def __init__(self) -> None:
        rulesets = []
        for u in range(0, MAX_THRESHOLD - 1):
            for b0 in range(u + 1, MAX_THRESHOLD):
                for b1 in range(b0, MAX_THRESHOLD):
                    for o in range(b1 + 1, MAX_THRESHOLD + 1):
                        rulesets.append(Ruleset(u, b0, b1, o))
        self._rulesets: Tuple[Ruleset, ...] = tuple(rulesets)

    def enumerate(self) -> Tuple[Ruleset, ...]:
        """All rulesets in canonical order."""
        return self._rulesets

    def count(self) -> int:
        """Number of rulesets in the catalog."""
        return len(self._rulesets)

    def to_id(self, ruleset: Ruleset) -> int:
        """Get the id of a ruleset.

        Raises:
            InvalidRuleset: If the ruleset is not in the catalog
        """
        for index, candidate in enumerate(self._rulesets):
            if candidate == ruleset:
                return index
        raise InvalidRuleset(f"Invalid ruleset: {ruleset}")

    def from_id(self, ruleset_id: int) -> Ruleset:
        """Get the ruleset with a given id.

        Raises:
            InvalidRulesetId: If the id is outside [0, count)
        """
        if not 0 <= ruleset_id < len(self._rulesets):
            raise InvalidRulesetId(f"Invalid ruleset ID {ruleset_id} (valid: 0-{len(self._rulesets) - 1})")
        return self._rulesets[ruleset_id]

    def __len__(self) -> int:
        return len(self._rulesets)

    def __iter__(self) -> Iterator[Ruleset]:
        return iter(self._rulesets)
