"""Backbone fragment ions: types, terminal caps and the Fragment value.

A fragment of ``number`` residues is the N-terminal (a/b/c) or C-terminal
(x/y/z) stretch of a polymer plus that end's terminal group, its terminal
modification, every residue modification in the stretch and a per-type cap.
The ``dot`` variants are the radical forms differing by one hydrogen.

With the default H/OH termini, the neutral fragment masses reduce to the
familiar ion offsets:

- a: residues - CO
- b: residues
- c: residues + NH3
- y: residues + H2O

Fragments are computed by ``AminoAcidPolymer.calculate_fragment`` and
``AminoAcidPolymer.calculate_fragments``.

Examples
--------
>>> b2 = AminoAcidPolymer("PEPTIDE").calculate_fragment(FragmentType.b, 2)
>>> str(b2), b2.chemical_formula
('b2', 'C10H14N2O4')
>>> round(b2.mz(1), 4)
227.1026
"""

from enum import IntFlag
from typing import NamedTuple, Optional

from pyteomics import mass

from ..chemistry import composition_to_formula
from ..constants import PROTON_MASS
from ..exceptions import InvalidArgumentError
from ..modifications import Modification


class FragmentType(IntFlag):
    """Backbone cleavage products; combine with ``|`` to request several."""
    NONE = 0
    a = 1 << 0
    adot = 1 << 1
    b = 1 << 2
    bdot = 1 << 3
    c = 1 << 4
    cdot = 1 << 5
    x = 1 << 6
    xdot = 1 << 7
    y = 1 << 8
    ydot = 1 << 9
    z = 1 << 10
    zdot = 1 << 11

    N_TERMINAL = a | adot | b | bdot | c | cdot
    C_TERMINAL = x | xdot | y | ydot | z | zdot
    ALL = N_TERMINAL | C_TERMINAL


# Single types in generation order
FRAGMENT_TYPES = (
    FragmentType.a, FragmentType.adot,
    FragmentType.b, FragmentType.bdot,
    FragmentType.c, FragmentType.cdot,
    FragmentType.x, FragmentType.xdot,
    FragmentType.y, FragmentType.ydot,
    FragmentType.z, FragmentType.zdot,
)

# Formula added on top of terminus + residues for each fragment type
FRAGMENT_CAPS = {
    FragmentType.a: Modification.from_formula("C-1H-1O-1", name="a"),
    FragmentType.adot: Modification.from_formula("C-1O-1", name="adot"),
    FragmentType.b: Modification.from_formula("H-1", name="b"),
    FragmentType.bdot: Modification("bdot", 0.0, ""),
    FragmentType.c: Modification.from_formula("NH2", name="c"),
    FragmentType.cdot: Modification.from_formula("NH3", name="cdot"),
    FragmentType.x: Modification.from_formula("COH-1", name="x"),
    FragmentType.xdot: Modification.from_formula("CO", name="xdot"),
    FragmentType.y: Modification.from_formula("H", name="y"),
    FragmentType.ydot: Modification.from_formula("H2", name="ydot"),
    FragmentType.z: Modification.from_formula("N-1H-2", name="z"),
    FragmentType.zdot: Modification.from_formula("N-1H-1", name="zdot"),
}


def fragment_cap(fragment_type: FragmentType) -> Modification:
    """Cap of a single fragment type.

    Raises
    ------
    InvalidArgumentError
        If ``fragment_type`` is NONE or a combination of types
    """
    cap = FRAGMENT_CAPS.get(fragment_type)
    if cap is None:
        raise InvalidArgumentError(f"Not a single fragment type: {fragment_type!r}")
    return cap


def is_c_terminal(fragment_type: FragmentType) -> bool:
    return bool(fragment_type & FragmentType.C_TERMINAL)


class Fragment(NamedTuple):
    """Neutral backbone fragment of a polymer.

    Attributes
    ----------
    fragment_type : FragmentType
        Single ion type
    number : int
        Residues in the fragment, counted from its own terminus
    monoisotopic_mass : float
        Neutral monoisotopic mass
    composition : mass.Composition, optional
        Elemental composition, None if a modification in range is mass-only
    parent : AminoAcidPolymer
        Polymer the fragment was cut from
    """
    fragment_type: FragmentType
    number: int
    monoisotopic_mass: float
    composition: Optional[mass.Composition]
    parent: object

    @property
    def chemical_formula(self) -> Optional[str]:
        if self.composition is None:
            return None
        return composition_to_formula(self.composition)

    def mz(self, charge: int = 1) -> float:
        """m/z of the fragment carrying ``charge`` protons."""
        if charge == 0:
            raise InvalidArgumentError("Charge must be non-zero")
        return (self.monoisotopic_mass + charge * PROTON_MASS) / abs(charge)

    def __str__(self) -> str:
        return f"{self.fragment_type.name}{self.number}"
