"""Partition a numeric sample into ordered bins.

Two strategies produce the upper boundary of each bin:

* quantile: type-7 (linear interpolation between order statistics) quantiles at
  ``(i + 1) / n``. Fast, but repeated values can leave bins empty.
* ckmeans: optimal 1-D clustering minimising the within-cluster sum of squares,
  solved by dynamic programming. A bin boundary is the largest value in its cluster.

Colors are attached by the caller; this module only deals in floats.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Iterable, Sequence

import numpy as np

from tablelegend.config.defaults import BIN_METHODS, DEFAULT_QUANTILE_SAMPLE_THRESHOLD

logger = logging.getLogger(__name__)

# Relative slack when comparing partition costs, so float noise in the prefix
# sums does not break ties between equally good splits.
_TIE_TOLERANCE = 1e-10


def numeric_values(values: Iterable[Any]) -> list[float]:
    """Finite real numbers from ``values``; strings, None and bools are dropped."""
    out: list[float] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            continue
        number = float(value)
        if math.isfinite(number):
            out.append(number)
    return out


def quantile_boundaries(values: Sequence[float], bin_count: int) -> list[float]:
    if bin_count <= 0 or not values:
        return []
    probabilities = [(i + 1) / bin_count for i in range(bin_count)]
    quantiles = np.quantile(np.asarray(values, dtype=np.float64), probabilities, method="linear")
    return [float(q) for q in quantiles]


def ckmeans(values: Sequence[float], cluster_count: int) -> list[list[float]]:
    """Split ``values`` into at most ``cluster_count`` sorted, contiguous clusters.

    Where several splits are equally good, later clusters are kept as short as
    possible, so runs of a repeated value end up in the earliest cluster and the
    leftovers show up as singletons.
    """
    if cluster_count <= 0 or not values:
        return []
    data = np.sort(np.asarray(values, dtype=np.float64))
    n = len(data)
    if cluster_count > n:
        raise ValueError(f"cannot split {n} values into {cluster_count} clusters")
    if data[0] == data[-1]:
        return [data.tolist()]

    shifted = data - data[n // 2]
    sums = np.concatenate(([0.0], np.cumsum(shifted)))
    sums_sq = np.concatenate(([0.0], np.cumsum(shifted * shifted)))
    tolerance = _TIE_TOLERANCE * max(float(sums_sq[-1]), 1.0)

    def ssq(starts: np.ndarray, end: int) -> np.ndarray:
        size = end - starts + 1
        total = sums[end + 1] - sums[starts]
        total_sq = sums_sq[end + 1] - sums_sq[starts]
        return np.maximum(total_sq - total * total / size, 0.0)

    cost = np.full((cluster_count, n), np.inf)
    backtrack = np.zeros((cluster_count, n), dtype=np.int64)
    ends = np.arange(n)
    size = ends + 1
    cost[0] = np.maximum(sums_sq[1:] - sums[1:] * sums[1:] / size, 0.0)

    for cluster in range(1, cluster_count):
        # Only the full sample matters for the last cluster.
        first_end = cluster if cluster < cluster_count - 1 else n - 1
        _fill_cluster_row(cluster, first_end, n - 1, cost, backtrack, ssq, tolerance)

    clusters: list[list[float]] = [[] for _ in range(cluster_count)]
    right = n - 1
    for cluster in range(cluster_count - 1, -1, -1):
        left = int(backtrack[cluster, right])
        clusters[cluster] = data[left:right + 1].tolist()
        right = left - 1
    return clusters


def _fill_cluster_row(
    cluster: int,
    first_end: int,
    last_end: int,
    cost: np.ndarray,
    backtrack: np.ndarray,
    ssq,
    tolerance: float,
) -> None:
    """Fill ``cost[cluster, first_end:last_end + 1]`` by divide and conquer.

    The chosen cluster start never decreases as the end moves right, so the
    best start for the middle end bounds the search on either side of it.
    """
    pending = [(first_end, last_end, cluster, last_end)]
    while pending:
        end_lo, end_hi, start_lo, start_hi = pending.pop()
        if end_lo > end_hi:
            continue
        end = (end_lo + end_hi) // 2
        hi = min(end, start_hi)
        lo = min(max(cluster, start_lo), hi)
        starts = np.arange(lo, hi + 1)
        candidates = cost[cluster - 1, starts - 1] + ssq(starts, end)
        best = candidates.min()
        pick = int(starts[np.flatnonzero(candidates <= best + tolerance)[-1]])
        cost[cluster, end] = candidates[pick - lo]
        backtrack[cluster, end] = pick
        pending.append((end_lo, end - 1, start_lo, pick))
        pending.append((end + 1, end_hi, pick, start_hi))


def collapse_degenerate_clusters(clusters: Sequence[Sequence[float]]) -> list[list[float]]:
    """Drop single-value clusters that repeat the previous cluster's last value.

    With few distinct values ckmeans can return e.g. [1], [2], [2], [2], [3].
    """
    kept: list[list[float]] = []
    for i, cluster in enumerate(clusters):
        if i > 0 and len(cluster) == 1 and cluster[0] == clusters[i - 1][-1]:
            continue
        kept.append(list(cluster))
    return kept


def natural_boundaries(values: Sequence[float], bin_count: int) -> list[float]:
    clusters = collapse_degenerate_clusters(ckmeans(values, bin_count))
    return [cluster[-1] for cluster in clusters]


def use_quantiles(method: str, sample_size: int, threshold: int = DEFAULT_QUANTILE_SAMPLE_THRESHOLD) -> bool:
    return method == "quantile" or (method == "auto" and sample_size > threshold)


def compute_bins(
    values: Iterable[Any],
    requested_bin_count: int,
    method: str = "auto",
    *,
    quantile_threshold: int = DEFAULT_QUANTILE_SAMPLE_THRESHOLD,
) -> list[float]:
    """Upper boundaries of the bins for ``values``; empty means "don't bin".

    ``method`` is one of auto, quantile, ckmeans or none. Auto uses quantiles for
    samples larger than ``quantile_threshold`` and ckmeans otherwise.
    """
    method_norm = str(method or "").strip().lower()
    if method_norm not in BIN_METHODS:
        raise ValueError(f"Unsupported bin method: {method!r}")
    if method_norm == "none" or requested_bin_count <= 0:
        return []

    numbers_only = numeric_values(values)
    bin_count = min(int(requested_bin_count), len(numbers_only))
    if bin_count < 1:
        return []

    if use_quantiles(method_norm, len(numbers_only), quantile_threshold):
        strategy = "quantile"
        boundaries = quantile_boundaries(numbers_only, bin_count)
    else:
        strategy = "ckmeans"
        boundaries = natural_boundaries(numbers_only, bin_count)

    logger.debug(
        "Computed %d %s bins from %d values (requested=%d)",
        len(boundaries),
        strategy,
        len(numbers_only),
        requested_bin_count,
    )
    return boundaries
