"""Candidate pair generation policies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Any, Iterable, Mapping, cast

from pairbuilder.constants import DEFAULT_OVERLAP, DEFAULT_POLICY, PAIR_POLICY_CHOICES
from pairbuilder.models import PairPolicy, PairSet
from pairbuilder.pairs import make_pair

logger = logging.getLogger(__name__)

ViewSource = Mapping[int, Any] | Iterable[int]


def _sorted_view_ids(views: ViewSource) -> list[int]:
    """Collect distinct view ids in ascending order.

    :param views: Mapping keyed by view id (values are ignored) or an iterable of ids.
    :return: Sorted, de-duplicated view ids.
    """
    ids = views.keys() if isinstance(views, Mapping) else views
    return sorted(set(ids))


def exhaustive_pairs(views: ViewSource) -> PairSet:
    """Pair every view with every other view.

    :param views: Mapping keyed by view id or an iterable of view ids.
    :return: ``N * (N - 1) / 2`` pairs for ``N`` distinct ids.
    """
    view_ids = _sorted_view_ids(views)
    pair_set = PairSet(make_pair(view_a, view_b) for view_a, view_b in combinations(view_ids, 2))
    logger.debug(f"Exhaustive pairing: {len(view_ids)} views -> {len(pair_set)} pairs")
    return pair_set


def contiguous_with_overlap(views: ViewSource, overlap: int) -> PairSet:
    """Pair each view with the next ``overlap`` views in ascending id order.

    Windows are clipped at the end of the sequence and never wrap around.

    :param views: Mapping keyed by view id or an iterable of view ids.
    :param overlap: Number of following views paired with each view. ``<= 0``
        yields an empty set.
    :return: Pairs between views at most ``overlap`` positions apart.
    """
    view_ids = _sorted_view_ids(views)
    if overlap <= 0:
        logger.debug(f"Contiguous pairing with overlap={overlap}: no pairs")
        return PairSet()

    pairs = []
    for i, view_a in enumerate(view_ids):
        for view_b in view_ids[i + 1 : i + 1 + overlap]:
            pairs.append(make_pair(view_a, view_b))
    pair_set = PairSet(pairs)
    logger.debug(
        f"Contiguous pairing with overlap={overlap}: "
        f"{len(view_ids)} views -> {len(pair_set)} pairs"
    )
    return pair_set


@dataclass
class PairBuilderConfig:
    """Configuration for candidate pair generation."""

    policy: PairPolicy = DEFAULT_POLICY
    # Only used by the contiguous policy
    overlap: int = DEFAULT_OVERLAP

    def __post_init__(self) -> None:
        policy = self.policy.strip().lower()
        if policy not in PAIR_POLICY_CHOICES:
            allowed = ", ".join(PAIR_POLICY_CHOICES)
            raise ValueError(f"Invalid policy: {self.policy!r}. Allowed values: {allowed}")
        self.policy = cast(PairPolicy, policy)

        if isinstance(self.overlap, bool) or not isinstance(self.overlap, int):
            raise TypeError("overlap must be an int")


def build_pairs(views: ViewSource, config: PairBuilderConfig | None = None) -> PairSet:
    """Generate candidate pairs using the configured policy.

    :param views: Mapping keyed by view id or an iterable of view ids.
    :param config: Pairing configuration, defaults to exhaustive pairing.
    :return: Canonical pair set.
    """
    config = config or PairBuilderConfig()
    if config.policy == "contiguous":
        logger.info(f"Using contiguous pairing with overlap {config.overlap}")
        pair_set = contiguous_with_overlap(views, config.overlap)
    else:
        logger.info("Using exhaustive pairing")
        pair_set = exhaustive_pairs(views)

    logger.info(f"Generated {len(pair_set)} candidate pairs")
    return pair_set
