"""Cleavage rules for in silico digestion.

A protease cuts next to its trigger residues: after them for C-terminal
specificity (trypsin cuts after K/R) or before them for N-terminal
specificity (Lys-N cuts before K). A no-cut residue on the other side of the
bond blocks the cut (trypsin does not cut K-P or R-P bonds).

Design principles:
1. Single scan per protease over an ord()-encoded sequence
2. ord()-indexed boolean lookup tables (no string operations in Numba)
3. Sites reported as the index of the residue just before the cut
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List

import numba
import numpy as np

from ..exceptions import InvalidArgumentError
from ..modifications import Terminus


def _lookup_table(letters: FrozenSet[str]) -> np.ndarray:
    table = np.zeros(256, dtype=np.bool_)
    for letter in letters:
        table[ord(letter)] = True
    return table


@numba.jit(nopython=True, cache=True)
def find_cleavage_sites_numba(
    sequence_ord: np.ndarray,
    cut_table: np.ndarray,
    nocut_table: np.ndarray,
    cut_after: bool,
) -> np.ndarray:
    """Indices of the residue immediately before each cut (Numba-compiled).

    Parameters
    ----------
    sequence_ord : np.ndarray (uint8)
        Sequence as ord() values
    cut_table : np.ndarray (bool)
        ord()-indexed trigger residues
    nocut_table : np.ndarray (bool)
        ord()-indexed blocking residues
    cut_after : bool
        True to cut after the trigger (C-terminal), False to cut before it

    Returns
    -------
    sites : np.ndarray (int64)
        Ascending site indices
    """
    n = len(sequence_ord)
    sites = np.empty(n, dtype=np.int64)
    count = 0

    for i in range(n):
        if not cut_table[sequence_ord[i]]:
            continue
        if cut_after:
            if i < n - 1 and nocut_table[sequence_ord[i + 1]]:
                continue
            sites[count] = i
            count += 1
        else:
            # A cut before the first residue is the sequence start anyway
            if i == 0 or nocut_table[sequence_ord[i - 1]]:
                continue
            sites[count] = i - 1
            count += 1

    return sites[:count]


@dataclass(frozen=True)
class Protease:
    """Immutable cleavage rule.

    Attributes
    ----------
    name : str
        Enzyme name
    terminus : Terminus
        Terminus.C cuts after trigger residues, Terminus.N cuts before them
    cut_residues : FrozenSet[str]
        Residues that trigger a cut
    nocut_residues : FrozenSet[str]
        Residues that block the cut when on the other side of the bond

    Examples
    --------
    >>> trypsin = Protease("Trypsin", Terminus.C, frozenset("KR"), frozenset("P"))
    >>> trypsin.get_digestion_sites("PEPTIDEKSAMPLEKPEPR")
    [7, 18]
    """
    name: str
    terminus: Terminus
    cut_residues: FrozenSet[str]
    nocut_residues: FrozenSet[str] = frozenset()
    _cut_table: np.ndarray = field(init=False, repr=False, compare=False, hash=False)
    _nocut_table: np.ndarray = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        if self.terminus not in (Terminus.N, Terminus.C):
            raise InvalidArgumentError(f"Protease terminus must be N or C, got {self.terminus!r}")
        object.__setattr__(self, 'cut_residues', frozenset(self.cut_residues))
        object.__setattr__(self, 'nocut_residues', frozenset(self.nocut_residues))
        object.__setattr__(self, '_cut_table', _lookup_table(self.cut_residues))
        object.__setattr__(self, '_nocut_table', _lookup_table(self.nocut_residues))

    def get_digestion_sites(self, sequence: str) -> List[int]:
        """Index of the residue immediately before each cut in ``sequence``."""
        sequence_ord = np.array([ord(c) if ord(c) < 256 else 0 for c in sequence], dtype=np.uint8)
        sites = find_cleavage_sites_numba(
            sequence_ord,
            self._cut_table,
            self._nocut_table,
            self.terminus == Terminus.C,
        )
        return sites.tolist()

    def __str__(self) -> str:
        return self.name


# =============================================================================
# Common Proteases
# =============================================================================

TRYPSIN = Protease("Trypsin", Terminus.C, frozenset("KR"), frozenset("P"))
TRYPSIN_P = Protease("Trypsin/P", Terminus.C, frozenset("KR"))
LYS_C = Protease("LysC", Terminus.C, frozenset("K"), frozenset("P"))
LYS_N = Protease("LysN", Terminus.N, frozenset("K"))
ARG_C = Protease("ArgC", Terminus.C, frozenset("R"), frozenset("P"))
GLU_C = Protease("GluC", Terminus.C, frozenset("E"), frozenset("P"))
ASP_N = Protease("AspN", Terminus.N, frozenset("D"))
CHYMOTRYPSIN = Protease("Chymotrypsin", Terminus.C, frozenset("FWY"), frozenset("P"))
CNBR = Protease("CNBr", Terminus.C, frozenset("M"))

_PROTEASES: Dict[str, Protease] = {
    protease.name.lower(): protease
    for protease in (TRYPSIN, TRYPSIN_P, LYS_C, LYS_N, ARG_C, GLU_C, ASP_N, CHYMOTRYPSIN, CNBR)
}


def register_protease(protease: Protease) -> None:
    """Add a protease to the registry (name lookup is case-insensitive)."""
    _PROTEASES[protease.name.lower()] = protease


def get_protease(name: str) -> Protease:
    """Look up a registered protease by name (case-insensitive)."""
    protease = _PROTEASES.get(name.lower())
    if protease is None:
        raise InvalidArgumentError(
            f"Unknown protease: {name}. Must be one of: {', '.join(sorted(_PROTEASES))}"
        )
    return protease
