"""Peptide: a polymer that remembers where it came from.

A peptide records the 0-based, inclusive residue range it occupies in its
parent polymer, so positions can be mapped back to the parent numbering.
The parent reference is for provenance only and is never mutated.
"""

from __future__ import annotations

from typing import Iterator, Optional

from ..modifications import Modification
from .isoforms import generate_isoforms
from .polymer import DEFAULT_C_TERMINUS, DEFAULT_N_TERMINUS, AminoAcidPolymer


class Peptide(AminoAcidPolymer):
    """Sub-sequence view of a parent polymer.

    Parameters
    ----------
    sequence : str
        Sequence notation
    parent : AminoAcidPolymer, optional
        Polymer this peptide was taken from
    start_residue : int
        0-based index of the first residue in ``parent``

    Attributes
    ----------
    start_residue : int
        First residue, parent numbering (0-based)
    end_residue : int
        Last residue, parent numbering (0-based, inclusive)
    parent : AminoAcidPolymer or None
        Originating polymer

    Examples
    --------
    >>> protein = AminoAcidPolymer("MAAKPEPTIDER")
    >>> peptide = Peptide.from_polymer(protein, 4, 8)
    >>> peptide.sequence, peptide.start_residue, peptide.end_residue
    ('PEPTIDER', 4, 11)
    """

    def __init__(
        self,
        sequence: str = "",
        parent: Optional[AminoAcidPolymer] = None,
        start_residue: int = 0,
        n_terminus: Modification = DEFAULT_N_TERMINUS,
        c_terminus: Modification = DEFAULT_C_TERMINUS,
    ):
        super().__init__(sequence, n_terminus, c_terminus)
        self._set_provenance(parent, start_residue)

    def _set_provenance(self, parent: Optional[AminoAcidPolymer], start_residue: int) -> None:
        self.parent = parent
        self.start_residue = start_residue
        self.end_residue = start_residue + len(self) - 1

    @classmethod
    def from_polymer(
        cls,
        polymer: AminoAcidPolymer,
        first_residue: int = 0,
        length: Optional[int] = None,
        include_modifications: bool = True,
    ) -> "Peptide":
        peptide = super().from_polymer(polymer, first_residue, length, include_modifications)
        peptide._set_provenance(polymer, first_residue)
        return peptide

    def copy(self, include_modifications: bool = True) -> "Peptide":
        """Copy keeping the same parent and residue range."""
        peptide = super().copy(include_modifications)
        peptide._set_provenance(self.parent, self.start_residue)
        return peptide

    @property
    def is_protein_n_terminal(self) -> bool:
        if self.parent is None:
            return True
        return self.start_residue == 0 and self.parent.is_protein_n_terminal

    @property
    def is_protein_c_terminal(self) -> bool:
        if self.parent is None:
            return True
        return self.end_residue == len(self.parent) - 1 and self.parent.is_protein_c_terminal

    def get_sub_peptide(self, first_residue: int, length: int) -> "Peptide":
        """Peptide covering ``length`` residues of this one, starting at ``first_residue``."""
        return Peptide.from_polymer(self, first_residue, length)

    def generate_isoforms(self, *modifications: Modification) -> Iterator[AminoAcidPolymer]:
        """Every distinct placement of ``modifications`` on this peptide."""
        return generate_isoforms(self, *modifications)


def subrange(
    polymer: AminoAcidPolymer,
    first_residue: int,
    length: Optional[int] = None,
    include_modifications: bool = True,
) -> Peptide:
    """Peptide view over ``length`` residues of ``polymer`` starting at ``first_residue``."""
    return Peptide.from_polymer(polymer, first_residue, length, include_modifications)
