"""
pairbuilder - Select candidate image pairs for multi-view feature matching.

Two pairing policies are available:
1. Exhaustive: every view is paired with every other view
2. Contiguous: each view is paired with the next ``overlap`` views by id

Example:
    from pairbuilder import contiguous_with_overlap, load_pairs, save_pairs

    pairs = contiguous_with_overlap({12: view_a, 54: view_b, 65: view_c}, overlap=1)
    save_pairs("pairs.txt", pairs)

    for pair in load_pairs("pairs.txt"):
        print(pair.first, pair.second)
"""

from .builder import PairBuilderConfig, build_pairs, contiguous_with_overlap, exhaustive_pairs
from .models import PairPolicy, PairSet
from .pairs import Pair, make_pair
from .storage import (
    PairSetError,
    PairSetIOError,
    PairSetParseError,
    format_pairs,
    load_pairs,
    parse_pairs,
    save_pairs,
)
from .views import ViewSourceError, read_view_ids

try:
    from ._version import __version__, __version_tuple__
except ImportError:
    __version__ = "0.0.0+unknown"
    __version_tuple__ = (0, 0, 0, "+unknown")

__all__ = [
    "Pair",
    "PairBuilderConfig",
    "PairPolicy",
    "PairSet",
    "PairSetError",
    "PairSetIOError",
    "PairSetParseError",
    "ViewSourceError",
    "__version__",
    "__version_tuple__",
    "build_pairs",
    "contiguous_with_overlap",
    "exhaustive_pairs",
    "format_pairs",
    "load_pairs",
    "make_pair",
    "parse_pairs",
    "read_view_ids",
    "save_pairs",
]
