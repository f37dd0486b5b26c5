"""Protein digestion into peptides.

In silico digestion of protein sequences with support for:
- Any combination of cleavage rules (trypsin, Lys-C, Glu-C, ...)
- Missed cleavages (minimum and maximum)
- Peptide length filtering
- Optional initiator methionine variants

Design principles:
1. One scan per protease, union of sites, sorted once
2. Windows enumerated by missed-cleavage count, then start position
3. Peptides keep their parent and residue range
4. Compatible with AlphaPolymer constants

Examples
--------
>>> digest_sequence("AAKAA", TRYPSIN)
['AAK', 'AA']
>>> [p.start_residue for p in digest(AminoAcidPolymer("AAKAA"), TRYPSIN)]
[0, 3]
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from ..constants import (
    DATABASE_MAX_LENGTH,
    DATABASE_MIN_LENGTH,
    DATABASE_MISSED_CLEAVAGES,
    DEFAULT_MAX_MISSED_CLEAVAGES,
    DEFAULT_MIN_LENGTH,
)
from ..exceptions import InvalidArgumentError
from ..proteomics.peptide import Peptide
from ..proteomics.polymer import AminoAcidPolymer
from .proteases import TRYPSIN, Protease

logger = logging.getLogger(__name__)


# =============================================================================
# Parameters
# =============================================================================

@dataclass
class DigestionParams:
    """Parameters for in silico digestion.

    Attributes
    ----------
    max_missed_cleavages : int
        Largest number of internal sites a peptide may span
    min_missed_cleavages : int
        Smallest number of internal sites a peptide must span
    min_length : int
        Minimum peptide length (residues)
    max_length : int, optional
        Maximum peptide length (None = unbounded)
    initiator_methionine_variants : bool
        Also emit N-terminal peptides without a leading Met
    """

    max_missed_cleavages: int = DEFAULT_MAX_MISSED_CLEAVAGES
    min_missed_cleavages: int = 0
    min_length: int = DEFAULT_MIN_LENGTH
    max_length: Optional[int] = None
    initiator_methionine_variants: bool = False

    def __post_init__(self):
        if self.max_missed_cleavages < 0:
            raise InvalidArgumentError(
                f"max_missed_cleavages must be >= 0, got {self.max_missed_cleavages}"
            )
        if self.min_missed_cleavages < 0:
            raise InvalidArgumentError(
                f"min_missed_cleavages must be >= 0, got {self.min_missed_cleavages}"
            )
        if self.max_length is not None and self.max_length < self.min_length:
            raise InvalidArgumentError(
                f"max_length ({self.max_length}) must be >= min_length ({self.min_length})"
            )

    @classmethod
    def for_database(cls) -> 'DigestionParams':
        """Typical settings for enumerating tryptic peptides of a proteome.

        Returns
        -------
        DigestionParams with 7-35 residues and up to 2 missed cleavages
        """
        return cls(
            max_missed_cleavages=DATABASE_MISSED_CLEAVAGES,
            min_length=DATABASE_MIN_LENGTH,
            max_length=DATABASE_MAX_LENGTH,
        )


# =============================================================================
# Cleavage Windows
# =============================================================================

def _as_proteases(proteases: Union[Protease, Iterable[Protease]]) -> List[Protease]:
    if isinstance(proteases, Protease):
        return [proteases]
    return list(proteases)


def get_cleavage_indices(sequence: str, proteases: Union[Protease, Iterable[Protease]]) -> List[int]:
    """Sorted cleavage positions including the -1 and N-1 boundaries.

    Parameters
    ----------
    sequence : str
        Bare sequence
    proteases : Protease or iterable of Protease
        Cleavage rules; sites from all rules are merged

    Returns
    -------
    indices : List[int]
        Ascending, unique; each value is the residue index just before a cut
    """
    locations = {-1, len(sequence) - 1}
    for protease in _as_proteases(proteases):
        locations.update(protease.get_digestion_sites(sequence))
    return sorted(locations)


def iter_digestion_windows(
    sequence: str,
    proteases: Union[Protease, Iterable[Protease]],
    params: DigestionParams,
) -> Iterator[Tuple[int, int]]:
    """Yield (first_residue, length) for every peptide of a digestion.

    Ordered by missed-cleavage count, then start position. A peptide
    spanning m missed cleavages covers m + 1 consecutive cleavage intervals.
    """
    indices = get_cleavage_indices(sequence, proteases)
    max_length = params.max_length
    methionine_variants = params.initiator_methionine_variants and sequence[:1] == 'M'

    logger.debug(f"{len(indices) - 2} cleavage sites in {len(sequence)}-residue sequence")

    for missed in range(params.min_missed_cleavages, params.max_missed_cleavages + 1):
        for i in range(len(indices) - missed - 1):
            length = indices[i + missed + 1] - indices[i]
            if length < params.min_length or (max_length is not None and length > max_length):
                continue
            begin = indices[i] + 1
            yield begin, length

            if methionine_variants and begin == 0 and length - 1 >= params.min_length:
                yield 1, length - 1


def _resolve_params(
    params: Optional[DigestionParams],
    max_missed_cleavages: int,
    min_length: int,
    max_length: Optional[int],
) -> DigestionParams:
    if params is not None:
        return params
    return DigestionParams(
        max_missed_cleavages=max_missed_cleavages,
        min_length=min_length,
        max_length=max_length,
    )


# =============================================================================
# Digestion
# =============================================================================

def digest(
    polymer: Union[AminoAcidPolymer, str],
    proteases: Union[Protease, Iterable[Protease]] = TRYPSIN,
    max_missed_cleavages: int = DEFAULT_MAX_MISSED_CLEAVAGES,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: Optional[int] = None,
    params: Optional[DigestionParams] = None,
) -> List[Peptide]:
    """Digest a polymer (or sequence notation) into peptides.

    Parameters
    ----------
    polymer : AminoAcidPolymer or str
        Polymer to digest; strings are parsed first
    proteases : Protease or iterable of Protease
        Cleavage rules (default: trypsin)
    max_missed_cleavages : int
        Missed cleavages allowed (default: 0)
    min_length : int
        Minimum peptide length (default: 1)
    max_length : int, optional
        Maximum peptide length (default: unbounded)
    params : DigestionParams, optional
        Full parameter set; overrides the three keyword arguments above

    Returns
    -------
    peptides : List[Peptide]
        Peptides carrying the polymer's modifications, with ``parent`` and
        residue range set

    Raises
    ------
    InvalidArgumentError
        If ``max_missed_cleavages`` < 0

    Examples
    --------
    >>> peptides = digest("PEPTIDEKSAMPLEK", TRYPSIN, max_missed_cleavages=1)
    >>> [p.sequence for p in peptides]
    ['PEPTIDEK', 'SAMPLEK', 'PEPTIDEKSAMPLEK']
    """
    params = _resolve_params(params, max_missed_cleavages, min_length, max_length)
    if isinstance(polymer, str):
        polymer = AminoAcidPolymer(polymer)

    return [
        Peptide.from_polymer(polymer, begin, length)
        for begin, length in iter_digestion_windows(polymer.sequence, proteases, params)
    ]


def digest_sequence(
    sequence: str,
    proteases: Union[Protease, Iterable[Protease]] = TRYPSIN,
    max_missed_cleavages: int = DEFAULT_MAX_MISSED_CLEAVAGES,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: Optional[int] = None,
    params: Optional[DigestionParams] = None,
) -> List[str]:
    """Digest a bare sequence string into peptide strings.

    Same windows as ``digest`` without building polymers.
    """
    params = _resolve_params(params, max_missed_cleavages, min_length, max_length)
    return [
        sequence[begin:begin + length]
        for begin, length in iter_digestion_windows(sequence, proteases, params)
    ]

