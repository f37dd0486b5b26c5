"""In silico digestion with configurable cleavage rules.

Provides:
- Cleavage rules (trypsin, Lys-C, Lys-N, Arg-C, Glu-C, Asp-N, ...)
- Digestion of polymers into Peptide views with missed cleavages
"""

from .proteases import (
    Protease,
    TRYPSIN,
    TRYPSIN_P,
    LYS_C,
    LYS_N,
    ARG_C,
    GLU_C,
    ASP_N,
    CHYMOTRYPSIN,
    CNBR,
    get_protease,
    register_protease,
    find_cleavage_sites_numba,
)

from .digestion import (
    DigestionParams,
    digest,
    digest_sequence,
    get_cleavage_indices,
    iter_digestion_windows,
)

__all__ = [
    # Cleavage rules
    'Protease',
    'TRYPSIN',
    'TRYPSIN_P',
    'LYS_C',
    'LYS_N',
    'ARG_C',
    'GLU_C',
    'ASP_N',
    'CHYMOTRYPSIN',
    'CNBR',
    'get_protease',
    'register_protease',
    'find_cleavage_sites_numba',

    # Digestion
    'DigestionParams',
    'digest',
    'digest_sequence',
    'get_cleavage_indices',
    'iter_digestion_windows',
]
