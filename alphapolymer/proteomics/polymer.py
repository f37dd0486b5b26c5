"""Amino acid polymer: residues plus per-site modification slots.

A polymer of N residues owns N+2 modification slots: slot 0 is the
N-terminus, slots 1..N belong to the residues and slot N+1 is the
C-terminus. Aggregate mass, composition and the text forms are computed
lazily from that state and cached until the next effective mutation.

Sequence notation
-----------------
``[Acetyl]-PEPC[Carbamidomethyl]TM[O]IDEK[#]-[Amidated]``

- Uppercase letters are residues, spaces are ignored
- ``[...]`` after a letter modifies that residue
- A leading ``[...]`` (optionally followed by ``-``) modifies the N-terminus
- ``-[...]`` after the last letter modifies the C-terminus
- Bracket tokens are resolved in order as: heavy marker ``#`` (13C/15N
  labelling of the preceding residue), registered modification name,
  chemical formula, bare mass

Examples
--------
>>> polymer = AminoAcidPolymer("PEPM[Oxidation]TIDE")
>>> polymer.sequence
'PEPMTIDE'
>>> polymer.set_modification(get_modification("Phospho"), 5)
>>> str(polymer)
'PEPM[Oxidation]T[Phospho]IDE'
"""

from __future__ import annotations

import math
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

import numba
import numpy as np
from pyteomics import mass

from ..chemistry import composition_to_formula, heavy_delta, try_parse_formula, formula_mass
from ..constants import (
    AA_MASSES,
    DEFAULT_C_TERMINUS_FORMULA,
    DEFAULT_N_TERMINUS_FORMULA,
    H2O_MASS,
    HEAVY_MARKER,
)
from ..exceptions import (
    InvalidArgumentError,
    InvalidResidueError,
    PositionOutOfRangeError,
    UnresolvedModificationError,
    UnterminatedModificationError,
)
from ..modifications import Modification, Terminus, try_get_modification
from ..residues import Residue, try_get_residue
from .fragments import FRAGMENT_TYPES, Fragment, FragmentType, fragment_cap, is_c_terminal


DEFAULT_N_TERMINUS = Modification.from_formula(DEFAULT_N_TERMINUS_FORMULA)
DEFAULT_C_TERMINUS = Modification.from_formula(DEFAULT_C_TERMINUS_FORMULA)


# =============================================================================
# Plain-String Mass (Numba-Compiled)
# =============================================================================

def encode_sequence_to_ord(sequence: str) -> np.ndarray:
    """Encode a bare sequence to a uint8 ord() array (non-ASCII dropped)."""
    return np.array([ord(c) for c in sequence if ord(c) < 256], dtype=np.uint8)


@numba.jit(nopython=True, cache=True)
def calculate_neutral_mass(sequence_ord: np.ndarray) -> float:
    """Neutral mass of an unmodified sequence from its ord() array.

    Letters outside the residue catalog contribute nothing.
    """
    total = 0.0
    for i in range(len(sequence_ord)):
        total += AA_MASSES[sequence_ord[i]]
    return total + H2O_MASS


# =============================================================================
# Bracket Token Resolution
# =============================================================================

def _resolve_heavy(token: str, residue: Optional[Residue]) -> Optional[Modification]:
    if token != HEAVY_MARKER or residue is None:
        return None
    delta = heavy_delta(residue.composition)
    return Modification.from_formula(composition_to_formula(delta), name=HEAVY_MARKER, sites=residue.site)


def _resolve_named(token: str, residue: Optional[Residue]) -> Optional[Modification]:
    return try_get_modification(token)


def _resolve_formula(token: str, residue: Optional[Residue]) -> Optional[Modification]:
    composition = try_parse_formula(token)
    if composition is None:
        return None
    return Modification(
        name=token,
        monoisotopic_mass=formula_mass(composition),
        formula=composition_to_formula(composition),
    )


def _resolve_mass(token: str, residue: Optional[Residue]) -> Optional[Modification]:
    try:
        value = float(token)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return Modification.from_mass(value)


# First resolver returning a modification wins
_TOKEN_RESOLVERS = (_resolve_heavy, _resolve_named, _resolve_formula, _resolve_mass)


def resolve_modification_token(token: str, residue: Optional[Residue] = None) -> Optional[Modification]:
    """Interpret the content of a ``[...]`` token, None if nothing matches.

    Parameters
    ----------
    token : str
        Text between the brackets
    residue : Residue, optional
        Residue the token follows (needed for the heavy marker)
    """
    for resolver in _TOKEN_RESOLVERS:
        modification = resolver(token, residue)
        if modification is not None:
            return modification
    return None


def _read_token(text: str, start: int) -> Tuple[str, int]:
    """Return the token opened at ``text[start] == '['`` and the index after ']'."""
    close = text.find(']', start + 1)
    if close == -1:
        raise UnterminatedModificationError(start)
    return text[start + 1:close], close + 1


def _skip_spaces(text: str, i: int) -> int:
    while i < len(text) and text[i] == ' ':
        i += 1
    return i


def _parse_sequence(text: str) -> Tuple[List[Residue], List[Optional[Modification]]]:
    """Parse sequence notation into residues and N+2 modification slots."""
    residues: List[Residue] = []
    residue_mods = {}
    n_terminal = None
    c_terminal = None

    i = 0
    length = len(text)
    while i < length:
        char = text[i]

        if char == ' ':
            i += 1

        elif char == '[':
            token, next_i = _read_token(text, i)
            preceding = residues[-1] if residues else None
            modification = resolve_modification_token(token, preceding)
            if modification is None:
                raise UnresolvedModificationError(token, i)
            if residues:
                residue_mods[len(residues)] = modification
                i = next_i
            else:
                n_terminal = modification
                i = _skip_spaces(text, next_i)
                if i < length and text[i] == '-':
                    i += 1

        elif char == '-':
            # Only valid as the C-terminal "-[...]" suffix
            j = _skip_spaces(text, i + 1)
            if not residues or j >= length or text[j] != '[':
                raise InvalidResidueError(char, i)
            token, next_i = _read_token(text, j)
            c_terminal = resolve_modification_token(token)
            if c_terminal is None:
                raise UnresolvedModificationError(token, j)
            trailing = _skip_spaces(text, next_i)
            if trailing < length:
                raise InvalidResidueError(text[trailing], trailing)
            i = trailing

        else:
            residue = try_get_residue(char)
            if residue is None:
                raise InvalidResidueError(char, i)
            residues.append(residue)
            i += 1

    slots: List[Optional[Modification]] = [None] * (len(residues) + 2)
    slots[0] = n_terminal
    slots[-1] = c_terminal
    for position, modification in residue_mods.items():
        slots[position] = modification
    return residues, slots


# =============================================================================
# Cached State
# =============================================================================

class _Computed(NamedTuple):
    """Snapshot of every derived value of a polymer."""
    monoisotopic_mass: float
    composition: Optional[mass.Composition]
    sequence: str
    sequence_with_modifications: str


def _accumulate(items: Iterable) -> Tuple[float, Optional[mass.Composition]]:
    """Sum masses and compositions; the composition is None if any item lacks one."""
    total_mass = 0.0
    composition = mass.Composition()
    has_formula = True
    for item in items:
        total_mass += item.monoisotopic_mass
        if has_formula:
            if item.composition is None:
                has_formula = False
            else:
                composition = composition + item.composition
    return total_mass, composition if has_formula else None


def _compute(
    residues: Tuple[Residue, ...],
    slots: List[Optional[Modification]],
    n_terminus: Modification,
    c_terminus: Modification,
) -> _Computed:
    """Walk N-terminus, residues, C-terminus and derive mass, formula and text."""
    items = [n_terminus]
    bare = []
    annotated = []

    # N-terminus
    modification = slots[0]
    if modification is not None:
        items.append(modification)
        annotated.append(f"[{modification.name}]-")

    # Residues
    for position, residue in enumerate(residues, start=1):
        items.append(residue)
        bare.append(residue.letter)
        annotated.append(residue.letter)
        modification = slots[position]
        if modification is not None:
            items.append(modification)
            annotated.append(f"[{modification.name}]")

    # C-terminus
    modification = slots[-1]
    if modification is not None:
        items.append(modification)
        annotated.append(f"-[{modification.name}]")
    items.append(c_terminus)

    total_mass, composition = _accumulate(items)
    return _Computed(
        monoisotopic_mass=total_mass,
        composition=composition,
        sequence="".join(bare),
        sequence_with_modifications="".join(annotated),
    )


# =============================================================================
# Amino Acid Polymer
# =============================================================================

class AminoAcidPolymer:
    """Ordered residues with one modification slot per residue and terminus.

    Parameters
    ----------
    sequence : str
        Sequence notation (see module docstring)
    n_terminus : Modification
        N-terminal group (default: H)
    c_terminus : Modification
        C-terminal group (default: OH)

    Raises
    ------
    InvalidResidueError, UnterminatedModificationError, UnresolvedModificationError
        If ``sequence`` cannot be parsed

    Notes
    -----
    Not safe for concurrent mutation; readers are safe while no mutator runs.
    """

    def __init__(
        self,
        sequence: str = "",
        n_terminus: Modification = DEFAULT_N_TERMINUS,
        c_terminus: Modification = DEFAULT_C_TERMINUS,
    ):
        residues, slots = _parse_sequence(sequence)
        self._initialize(residues, slots, n_terminus, c_terminus)

    def _initialize(
        self,
        residues: Iterable[Residue],
        slots: List[Optional[Modification]],
        n_terminus: Modification,
        c_terminus: Modification,
    ) -> None:
        self._residues = tuple(residues)
        self._modifications = slots
        self._n_terminus = n_terminus
        self._c_terminus = c_terminus
        self._computed: Optional[_Computed] = None

    @classmethod
    def from_polymer(
        cls,
        polymer: "AminoAcidPolymer",
        first_residue: int = 0,
        length: Optional[int] = None,
        include_modifications: bool = True,
    ):
        """Copy a contiguous range of residues out of ``polymer``.

        Parameters
        ----------
        polymer : AminoAcidPolymer
            Source polymer
        first_residue : int
            0-based index of the first residue to copy, in [0, N]
        length : int, optional
            Number of residues (clamped to the end of ``polymer``; None = to the end)
        include_modifications : bool
            Copy residue modifications; terminal modifications and groups are
            inherited only when the range touches that end of ``polymer``

        Raises
        ------
        PositionOutOfRangeError
            If ``first_residue`` is outside [0, N]
        """
        parent_length = len(polymer)
        if first_residue < 0 or first_residue > parent_length:
            raise PositionOutOfRangeError(first_residue, 0, parent_length)
        if length is None or first_residue + length > parent_length:
            length = parent_length - first_residue
        if length < 0:
            raise InvalidArgumentError(f"Length must be non-negative, got {length}")

        last = first_residue + length
        residues = polymer._residues[first_residue:last]
        slots: List[Optional[Modification]] = [None] * (length + 2)
        n_terminus, c_terminus = DEFAULT_N_TERMINUS, DEFAULT_C_TERMINUS

        if include_modifications:
            slots[1:length + 1] = polymer._modifications[first_residue + 1:last + 1]
            if first_residue == 0:
                slots[0] = polymer._modifications[0]
                n_terminus = polymer._n_terminus
            if last == parent_length:
                slots[-1] = polymer._modifications[-1]
                c_terminus = polymer._c_terminus

        new = cls.__new__(cls)
        new._initialize(residues, slots, n_terminus, c_terminus)
        return new

    def copy(self, include_modifications: bool = True):
        """Independent copy of the whole polymer."""
        return type(self).from_polymer(self, 0, len(self), include_modifications)

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    def _state(self) -> _Computed:
        if self._computed is None:
            self._computed = _compute(self._residues, self._modifications, self._n_terminus, self._c_terminus)
        return self._computed

    @property
    def monoisotopic_mass(self) -> float:
        """Neutral monoisotopic mass including termini and modifications."""
        return self._state().monoisotopic_mass

    @property
    def composition(self) -> Optional[mass.Composition]:
        """Elemental composition, None if any modification is mass-only."""
        composition = self._state().composition
        return None if composition is None else mass.Composition(composition)

    @property
    def chemical_formula(self) -> Optional[str]:
        composition = self._state().composition
        return None if composition is None else composition_to_formula(composition)

    @property
    def sequence(self) -> str:
        """Bare residue letters."""
        return self._state().sequence

    @property
    def sequence_with_modifications(self) -> str:
        return self._state().sequence_with_modifications

    # -------------------------------------------------------------------------
    # Residues
    # -------------------------------------------------------------------------

    @property
    def residues(self) -> Tuple[Residue, ...]:
        return self._residues

    def __len__(self) -> int:
        return len(self._residues)

    def __iter__(self) -> Iterator[Residue]:
        return iter(self._residues)

    def get_residue(self, position: int) -> Residue:
        """Residue at 1-based ``position``."""
        self._check_position(position)
        return self._residues[position - 1]

    def residue_count(self, residue: Union[str, Residue, None] = None) -> int:
        """Count residues matching a letter or residue (all residues if None)."""
        if residue is None:
            return len(self._residues)
        if isinstance(residue, str):
            return sum(1 for aa in self._residues if aa.letter == residue)
        return sum(1 for aa in self._residues if aa == residue)

    @property
    def is_protein_n_terminal(self) -> bool:
        """Whether the N-terminus is also a protein N-terminus."""
        return True

    @property
    def is_protein_c_terminal(self) -> bool:
        """Whether the C-terminus is also a protein C-terminus."""
        return True

    # -------------------------------------------------------------------------
    # Termini
    # -------------------------------------------------------------------------

    @property
    def n_terminus(self) -> Modification:
        """N-terminal group (default: H)."""
        return self._n_terminus

    @n_terminus.setter
    def n_terminus(self, group: Modification) -> None:
        if group != self._n_terminus:
            self._n_terminus = group
            self._computed = None

    @property
    def c_terminus(self) -> Modification:
        """C-terminal group (default: OH)."""
        return self._c_terminus

    @c_terminus.setter
    def c_terminus(self, group: Modification) -> None:
        if group != self._c_terminus:
            self._c_terminus = group
            self._computed = None

    @property
    def n_terminus_modification(self) -> Optional[Modification]:
        return self._modifications[0]

    @n_terminus_modification.setter
    def n_terminus_modification(self, modification: Optional[Modification]) -> None:
        self._write_slot(0, modification)

    @property
    def c_terminus_modification(self) -> Optional[Modification]:
        return self._modifications[-1]

    @c_terminus_modification.setter
    def c_terminus_modification(self, modification: Optional[Modification]) -> None:
        self._write_slot(len(self._modifications) - 1, modification)

    def set_terminus_modification(self, modification: Optional[Modification], terminus: Terminus = Terminus.N) -> None:
        """Set the modification at one or both termini."""
        if terminus & Terminus.N:
            self.n_terminus_modification = modification
        if terminus & Terminus.C:
            self.c_terminus_modification = modification

    def clear_terminus_modification(self, terminus: Terminus = Terminus.BOTH) -> None:
        self.set_terminus_modification(None, terminus)

    # -------------------------------------------------------------------------
    # Residue modifications
    # -------------------------------------------------------------------------

    @property
    def modifications(self) -> Tuple[Optional[Modification], ...]:
        """All N+2 slots, termini included."""
        return tuple(self._modifications)

    def get_modification(self, slot: int) -> Optional[Modification]:
        """Modification in slot ``slot`` (0 = N-terminus, N+1 = C-terminus)."""
        upper = len(self._modifications) - 1
        if slot < 0 or slot > upper:
            raise PositionOutOfRangeError(slot, 0, upper)
        return self._modifications[slot]

    def set_modification(self, modification: Optional[Modification], position: int) -> None:
        """Set (or clear with None) the modification on 1-based residue ``position``."""
        self._check_position(position)
        self._write_slot(position, modification)

    def set_modification_at_letter(self, modification: Optional[Modification], letter: str) -> int:
        """Set the modification on every residue with ``letter``.

        Returns
        -------
        count : int
            Number of matching residues
        """
        count = 0
        for position, residue in enumerate(self._residues, start=1):
            if residue.letter == letter:
                self._write_slot(position, modification)
                count += 1
        return count

    def set_modification_at_residue(self, modification: Optional[Modification], residue: Residue) -> int:
        """Set the modification on every residue equal to ``residue``."""
        count = 0
        for position, aa in enumerate(self._residues, start=1):
            if aa == residue:
                self._write_slot(position, modification)
                count += 1
        return count

    def set_modification_at_positions(self, modification: Optional[Modification], positions: Iterable[int]) -> int:
        """Set the modification on explicit 1-based positions.

        All positions are validated before anything is written.
        """
        positions = list(positions)
        for position in positions:
            self._check_position(position)
        for position in positions:
            self._write_slot(position, modification)
        return len(positions)

    def clear_modifications(self) -> None:
        """Remove every modification, termini included."""
        for slot in range(len(self._modifications)):
            self._write_slot(slot, None)

    def contains_modification(self, modification: Modification) -> bool:
        return any(mod == modification for mod in self._modifications)

    def _check_position(self, position: int) -> None:
        if position < 1 or position > len(self._residues):
            raise PositionOutOfRangeError(position, 1, len(self._residues))

    def _write_slot(self, slot: int, modification: Optional[Modification]) -> None:
        if self._modifications[slot] == modification:
            return
        self._modifications[slot] = modification
        self._computed = None

    # -------------------------------------------------------------------------
    # Fragments
    # -------------------------------------------------------------------------

    def calculate_fragment(self, fragment_type: FragmentType, number: int) -> Fragment:
        """Neutral fragment of ``number`` residues counted from its terminus.

        N-terminal types (a/b/c) cover residues 1..number with the N-terminal
        group and modification; C-terminal types (x/y/z) cover the last
        ``number`` residues with the C-terminal group and modification.

        Parameters
        ----------
        fragment_type : FragmentType
            Single fragment type
        number : int
            Fragment length in [1, N]

        Raises
        ------
        PositionOutOfRangeError
            If ``number`` is outside [1, N]
        InvalidArgumentError
            If ``fragment_type`` is NONE or a combination of types
        """
        length = len(self._residues)
        if number < 1 or number > length:
            raise PositionOutOfRangeError(number, 1, length)
        items = [fragment_cap(fragment_type)]

        if is_c_terminal(fragment_type):
            start, end = length - number, length
            items.append(self._c_terminus)
            if self._modifications[-1] is not None:
                items.append(self._modifications[-1])
        else:
            start, end = 0, number
            items.append(self._n_terminus)
            if self._modifications[0] is not None:
                items.append(self._modifications[0])

        for i in range(start, end):
            items.append(self._residues[i])
            if self._modifications[i + 1] is not None:
                items.append(self._modifications[i + 1])

        total_mass, composition = _accumulate(items)
        return Fragment(fragment_type, number, total_mass, composition, self)

    def calculate_fragments(
        self,
        fragment_types: FragmentType,
        min_number: int = 1,
        max_number: Optional[int] = None,
    ) -> Iterator[Fragment]:
        """Generate fragments of every requested type for lengths in [min, max].

        The range is clamped to [1, N-1], so the full-length fragment is never
        produced. Types are generated in a, adot, b, ... zdot order.
        """
        if max_number is None:
            max_number = len(self._residues) - 1
        max_number = min(len(self._residues) - 1, max_number)
        min_number = max(1, min_number)
        for fragment_type in FRAGMENT_TYPES:
            if fragment_types & fragment_type:
                for number in range(min_number, max_number + 1):
                    yield self.calculate_fragment(fragment_type, number)

    # -------------------------------------------------------------------------
    # Comparison and display
    # -------------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if not isinstance(other, AminoAcidPolymer):
            return NotImplemented
        return (
            self._residues == other._residues
            and self._modifications == other._modifications
            and self._n_terminus == other._n_terminus
            and self._c_terminus == other._c_terminus
        )

    __hash__ = None

    def __str__(self) -> str:
        return self.sequence_with_modifications

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.sequence_with_modifications}')"

    @staticmethod
    def get_mass(sequence: str) -> float:
        """Neutral mass of a bare sequence string (unknown letters ignored)."""
        return calculate_neutral_mass(encode_sequence_to_ord(sequence))


def parse(text: str) -> AminoAcidPolymer:
    """Parse sequence notation into a new polymer."""
    return AminoAcidPolymer(text)
