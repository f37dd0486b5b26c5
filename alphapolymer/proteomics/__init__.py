"""Polymer model, peptide views, fragment ions and isoform generation.

- AminoAcidPolymer: residues + N+2 modification slots, lazily derived mass,
  formula and sequence text
- Peptide: polymer with parent provenance (start/end residue)
- Fragments: a/b/c and x/y/z backbone ions with terminal caps
- Isoforms: closed-form unranking for one modification kind, deduplicated
  backtracking for several
"""

from .polymer import (
    AminoAcidPolymer,
    DEFAULT_C_TERMINUS,
    DEFAULT_N_TERMINUS,
    calculate_neutral_mass,
    encode_sequence_to_ord,
    parse,
    resolve_modification_token,
)

from .fragments import (
    FRAGMENT_TYPES,
    Fragment,
    FragmentType,
)

from .peptide import (
    Peptide,
    subrange,
)

from .isoforms import (
    count_isoforms,
    generate_isoforms,
    generate_isoforms_of,
    generate_isoforms_range,
)

from .combinatorics import (
    binomial_coefficient,
    largest_v,
    unrank_combination,
    unrank_combinations,
)

__all__ = [
    # Polymer model
    'AminoAcidPolymer',
    'DEFAULT_N_TERMINUS',
    'DEFAULT_C_TERMINUS',
    'parse',
    'resolve_modification_token',
    'encode_sequence_to_ord',
    'calculate_neutral_mass',

    # Fragments
    'Fragment',
    'FragmentType',
    'FRAGMENT_TYPES',

    # Peptides
    'Peptide',
    'subrange',

    # Isoforms
    'generate_isoforms',
    'generate_isoforms_of',
    'generate_isoforms_range',
    'count_isoforms',

    # Combinatorics
    'binomial_coefficient',
    'largest_v',
    'unrank_combination',
    'unrank_combinations',
]
