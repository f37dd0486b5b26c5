"""Isoform generation: every distinct placement of modifications on a polymer.

Three cases, chosen by the shape of the modification list:

1. No modifications: the unmodified polymer (as a copy).
2. One distinct modification repeated k times: with m eligible sites there
   are exactly C(m, k) isoforms. Isoform i is decoded directly from its rank
   with the combinatorial number system, so no search or deduplication is
   needed and rank ranges can be generated independently.
3. Several distinct modifications: depth-first search placing one
   modification per level on a free eligible site. Different traversal
   orders can reach the same final placement when kinds share sites, so
   complete placements are deduplicated on a canonical key.

Isoforms are copies of the input polymer. Modifications already present on
the input are kept, and their slots are not eligible for new placements.

Examples
--------
>>> peptide = Peptide("SPTSK")
>>> phospho = get_modification("Phospho")
>>> [str(p) for p in generate_isoforms(peptide, phospho, phospho)]
['S[Phospho]PT[Phospho]SK', 'S[Phospho]PTS[Phospho]K', 'SPT[Phospho]S[Phospho]K']
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from ..exceptions import InvalidArgumentError
from ..modifications import Modification
from .combinatorics import binomial_coefficient, unrank_combinations

logger = logging.getLogger(__name__)

# Ranks decoded per batch in the closed-form path
_RANK_BATCH_SIZE = 4096

# Canonical placement: sorted (slot, kind index) pairs
Placement = Tuple[Tuple[int, int], ...]


def _eligible_sites(polymer, modification: Modification) -> List[int]:
    """Sites allowed by the modification mask that are still free."""
    return [
        slot for slot in modification.get_sites(polymer)
        if polymer.get_modification(slot) is None
    ]


def _place(isoform, modification: Modification, slot: int) -> None:
    if slot == 0:
        isoform.n_terminus_modification = modification
    elif slot == len(isoform) + 1:
        isoform.c_terminus_modification = modification
    else:
        isoform.set_modification(modification, slot)


# =============================================================================
# Single Modification Kind (Closed Form)
# =============================================================================

def count_isoforms(polymer, modification: Modification, multiplicity: int = 1) -> int:
    """Number of isoforms for ``multiplicity`` copies of one modification: C(m, k)."""
    if multiplicity < 0:
        raise InvalidArgumentError(f"Multiplicity must be non-negative, got {multiplicity}")
    return binomial_coefficient(len(_eligible_sites(polymer, modification)), multiplicity)


def generate_isoforms_range(
    polymer,
    modification: Modification,
    multiplicity: int = 1,
    start: int = 0,
    stop: Optional[int] = None,
) -> Iterator:
    """Generate isoforms with ranks in [start, stop).

    Each rank decodes independently, so disjoint ranges can be handed to
    separate workers and concatenated.

    Parameters
    ----------
    polymer : AminoAcidPolymer
        Polymer to modify (left untouched)
    modification : Modification
        Modification to place
    multiplicity : int
        Number of copies to place
    start, stop : int
        Rank range within [0, count_isoforms(...)]; stop=None means the end

    Yields
    ------
    isoform : AminoAcidPolymer
        Copy of ``polymer`` with ``multiplicity`` copies placed
    """
    if multiplicity < 0:
        raise InvalidArgumentError(f"Multiplicity must be non-negative, got {multiplicity}")

    sites = _eligible_sites(polymer, modification)
    total = binomial_coefficient(len(sites), multiplicity)
    if stop is None:
        stop = total
    if not 0 <= start <= stop <= total:
        raise InvalidArgumentError(f"Rank range [{start}, {stop}) outside [0, {total}]")

    logger.debug(
        f"{modification.name} x{multiplicity}: {len(sites)} sites, "
        f"{total:,} isoforms, generating ranks [{start:,}, {stop:,})"
    )

    for batch_start in range(start, stop, _RANK_BATCH_SIZE):
        batch_stop = min(batch_start + _RANK_BATCH_SIZE, stop)
        chosen = unrank_combinations(batch_start, batch_stop, len(sites), multiplicity)
        for row in chosen:
            isoform = polymer.copy()
            for site_index in row:
                _place(isoform, modification, sites[site_index])
            yield isoform


def generate_isoforms_of(polymer, modification: Modification, multiplicity: int = 1) -> Iterator:
    """All C(m, k) isoforms for ``multiplicity`` copies of one modification.

    A modification with no eligible site produces no isoforms at all.
    """
    return generate_isoforms_range(polymer, modification, multiplicity)


# =============================================================================
# Several Modification Kinds (Backtracking)
# =============================================================================

def _search_placements(
    levels: List[Modification],
    allowed: Dict[Modification, List[int]],
    kind_index: Dict[Modification, int],
) -> Dict[Placement, None]:
    """Depth-first search over placements, one level per modification.

    The partial placement is passed down as immutable values, so nothing
    needs undoing on the way back up. Copies of one kind sit on consecutive
    levels and take increasing slots, so each set of slots for a kind is
    visited once instead of in every order.

    Returns
    -------
    placements : Dict[Placement, None]
        Distinct complete placements in discovery order
    """
    levels = sorted(levels, key=kind_index.__getitem__)
    placements: Dict[Placement, None] = {}
    depth = len(levels)

    def place(level: int, previous_slot: int, occupied: frozenset, assignment: Placement) -> None:
        if level == depth:
            placements.setdefault(tuple(sorted(assignment)), None)
            return
        modification = levels[level]
        kind = kind_index[modification]
        # Same kind as the level above: continue after its slot
        lowest = previous_slot + 1 if level > 0 and levels[level - 1] == modification else 0
        for slot in allowed[modification]:
            if slot >= lowest and slot not in occupied:
                place(level + 1, slot, occupied | {slot}, assignment + ((slot, kind),))

    place(0, -1, frozenset(), ())
    return placements


def generate_isoforms(polymer, *modifications: Modification) -> Iterator:
    """Every distinct placement of ``modifications`` on ``polymer``.

    Parameters
    ----------
    polymer : AminoAcidPolymer
        Polymer to modify (left untouched)
    *modifications : Modification
        Modifications to place; repeats place several copies

    Yields
    ------
    isoform : AminoAcidPolymer
        One copy of ``polymer`` per distinct slot assignment

    Notes
    -----
    With a single distinct modification and no eligible site the result is
    empty. With several distinct modifications, kinds that have no eligible
    site are dropped and the others are still placed.
    """
    if not modifications:
        yield polymer.copy()
        return

    kinds = list(dict.fromkeys(modifications))
    if len(kinds) == 1:
        yield from generate_isoforms_of(polymer, kinds[0], len(modifications))
        return

    allowed = {modification: _eligible_sites(polymer, modification) for modification in kinds}
    levels = [modification for modification in modifications if allowed[modification]]
    placeable = list(dict.fromkeys(levels))

    skipped = [modification.name for modification in kinds if not allowed[modification]]
    if skipped:
        logger.debug(f"No eligible site on {polymer.sequence} for: {', '.join(skipped)}")

    if not placeable:
        yield polymer.copy()
        return
    if len(placeable) == 1:
        yield from generate_isoforms_of(polymer, placeable[0], len(levels))
        return

    kind_index = {modification: i for i, modification in enumerate(placeable)}
    placements = _search_placements(levels, allowed, kind_index)

    logger.debug(
        f"{polymer.sequence}: {len(levels)} modifications of {len(placeable)} kinds, "
        f"{len(placements):,} distinct isoforms"
    )

    for placement in placements:
        isoform = polymer.copy()
        for slot, kind in placement:
            _place(isoform, placeable[kind], slot)
        yield isoform
