"""Test matrix generation.

For every declared toolchain the eligible features are those without a
minimum toolchain, or whose minimum is satisfied by that toolchain.  The
matrix entry is the full power set of the eligible features, ordered by
subset size and then by declaration order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import chain, combinations
from typing import TypeVar

from semver import Version

from cratematrix.core.versions import ToolchainId, versions_geq
from cratematrix.models.config import Feature, MatrixConfig
from cratematrix.models.versioning import ToolchainVersion

T = TypeVar("T")

FeatureSet = tuple[Feature, ...]
Matrix = dict[ToolchainVersion, list[FeatureSet]]


def powerset(items: Sequence[T]) -> list[tuple[T, ...]]:
    """Every subset of ``items``, including the empty one (``2**n`` entries)."""
    return list(
        chain.from_iterable(combinations(items, size) for size in range(len(items) + 1))
    )


def eligible_features(
    toolchain: ToolchainVersion, features: Iterable[Feature], stable: Version
) -> list[Feature]:
    return [
        feature
        for feature in features
        if feature.min_rust is None or versions_geq(toolchain.name, feature.min_rust, stable)
    ]


def generate_matrix(config: MatrixConfig, stable: Version) -> Matrix:
    """Build the toolchain -> feature combinations mapping.

    Raises ``VersionParseError`` if any toolchain or ``min_rust`` value is
    malformed; feature eligibility cannot be decided safely in that case.
    """
    for toolchain in config.rust:
        ToolchainId.parse(toolchain.name)
    for feature in config.features:
        if feature.min_rust is not None:
            ToolchainId.parse(feature.min_rust)

    return {
        toolchain: powerset(eligible_features(toolchain, config.features, stable))
        for toolchain in config.rust
    }
