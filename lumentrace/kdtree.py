"""Point kd-tree supporting fixed-radius and k-nearest-neighbour queries."""

from __future__ import annotations

import enum
import heapq
import math
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .common import RenderError


class Heuristic(enum.Enum):
    """Tree construction heuristics."""

    BALANCED = 0
    """Split along the median of the largest bounding-box axis."""

    SLIDING_MIDPOINT = 1
    """Split near the spatial midpoint so that cells do not get elongated."""


@dataclass(eq=False)
class KDNode:
    """A tree node: a point, an attached data record and the split layout.

    The left child of the node stored at index ``i`` is always at ``i + 1``;
    ``right`` holds the index of the right child, or 0 when there is none.
    """

    position: np.ndarray
    data: Any = None
    right: int = 0
    leaf: bool = False
    axis: int = 0

    def left_index(self, own_index: int) -> int:
        """Return the index of the left child given this node's index."""
        return own_index + 1


@dataclass(frozen=True)
class SearchResult:
    """One k-nn query result: squared distance and node index."""

    dist_squared: float
    index: int

    def __str__(self) -> str:
        return f"SearchResult[distance={math.sqrt(self.dist_squared)}, index={self.index}]"


def permute_inplace(data: list, perm: list[int]) -> None:
    """Apply ``perm`` to ``data`` in place so that ``data[j]`` becomes the old ``data[perm[j]]``.

    Works cycle by cycle in linear time; afterwards ``perm`` is the identity.
    """
    if len(data) != len(perm):
        raise ValueError("data and permutation must have the same length")
    for i in range(len(perm)):
        if perm[i] == i:
            continue
        j = i
        saved = data[i]
        while True:
            k = perm[j]
            data[j] = data[k]
            perm[j] = j
            j = k
            if perm[j] == i:
                break
        data[j] = saved
        perm[j] = j


class PointKDTree:
    """A kd-tree over points of any fixed dimension."""

    def __init__(self, heuristic: Heuristic = Heuristic.SLIDING_MIDPOINT) -> None:
        self.heuristic = heuristic
        self.depth = 0
        self._nodes: list[KDNode] = []
        self._bbox_min: Optional[np.ndarray] = None
        self._bbox_max: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index: int) -> KDNode:
        return self._nodes[index]

    @property
    def dimension(self) -> Optional[int]:
        """Dimension of the stored points, or None while the tree is empty."""
        return None if self._bbox_min is None else len(self._bbox_min)

    @property
    def bounding_box(self) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(min_corner, max_corner)`` of the stored points."""
        if self._bbox_min is None or self._bbox_max is None:
            raise RenderError("kd-tree is empty")
        return self._bbox_min.copy(), self._bbox_max.copy()

    def _reset_bbox(self, dimension: int) -> None:
        self._bbox_min = np.full(dimension, math.inf)
        self._bbox_max = np.full(dimension, -math.inf)

    def _expand_bbox(self, position: np.ndarray) -> None:
        self._bbox_min = np.minimum(self._bbox_min, position)
        self._bbox_max = np.maximum(self._bbox_max, position)

    def append(self, position, data=None) -> int:
        """Add a point with an optional data record; return its node index."""
        point = np.asarray(position, dtype=float).reshape(-1)
        if self._bbox_min is None:
            self._reset_bbox(len(point))
        elif len(point) != len(self._bbox_min):
            raise RenderError(
                f"point has dimension {len(point)}, expected {len(self._bbox_min)}"
            )
        self._nodes.append(KDNode(point, data))
        self._expand_bbox(point)
        return len(self._nodes) - 1

    def clear(self) -> None:
        """Remove all points."""
        self._nodes.clear()
        self._bbox_min = None
        self._bbox_max = None
        self.depth = 0

    def build(self, recompute_bounding_box: bool = False) -> None:
        """Construct the hierarchy; node indices change to tree order."""
        if not self._nodes:
            raise RenderError("kd-tree is empty")
        if recompute_bounding_box:
            self._reset_bbox(len(self._nodes[0].position))
            for node in self._nodes:
                self._expand_bbox(node.position)

        indirection = list(range(len(self._nodes)))
        self.depth = 0
        tasks = [(1, 0, len(indirection), self._bbox_min.copy(), self._bbox_max.copy())]
        while tasks:
            depth, start, end, bmin, bmax = tasks.pop()
            self._build_range(indirection, depth, start, end, bmin, bmax, tasks)
        permute_inplace(self._nodes, indirection)

    def _build_range(self, ind, depth, start, end, bmin, bmax, tasks) -> None:
        if end <= start:
            raise RenderError("internal error while building kd-tree")
        self.depth = max(depth, self.depth)
        count = end - start
        if count == 1:
            self._nodes[ind[start]].leaf = True
            return

        axis = int(np.argmax(bmax - bmin))
        if self.heuristic is Heuristic.BALANCED:
            split = start + count // 2
        else:
            midpoint = 0.5 * (bmax[axis] + bmin[axis])
            below = sum(
                1 for i in ind[start:end] if self._nodes[i].position[axis] <= midpoint
            )
            split = start + below
            if split == start:
                split += 1
            elif split == end:
                split -= 1

        ind[start:end] = sorted(ind[start:end], key=lambda i: self._nodes[i].position[axis])

        split_node = self._nodes[ind[split]]
        split_node.axis = axis
        split_node.leaf = False
        split_node.right = split + 1 if split + 1 != end else 0
        ind[start], ind[split] = ind[split], ind[start]

        split_pos = split_node.position[axis]
        left_max = bmax.copy()
        left_max[axis] = split_pos
        tasks.append((depth + 1, start + 1, split + 1, bmin.copy(), left_max))
        if split + 1 != end:
            right_min = bmin.copy()
            right_min[axis] = split_pos
            tasks.append((depth + 1, split + 1, end, right_min, bmax.copy()))

    def _has_right_child(self, index: int) -> bool:
        return self._nodes[index].right != 0

    def _traverse(self, p: np.ndarray, radius_sq):
        """Yield ``(index, squared distance)`` for visited nodes.

        ``radius_sq`` is a callable so that the pruning radius may shrink
        while the traversal runs.
        """
        index = 0
        stack = [0]
        while stack:
            node = self._nodes[index]
            if not node.leaf:
                dist_to_plane = p[node.axis] - node.position[node.axis]
                search_both = dist_to_plane * dist_to_plane <= radius_sq()
                if dist_to_plane > 0:
                    if self._has_right_child(index):
                        if search_both:
                            stack.append(node.left_index(index))
                        next_index = node.right
                    elif search_both:
                        next_index = node.left_index(index)
                    else:
                        next_index = stack.pop()
                else:
                    if search_both and self._has_right_child(index):
                        stack.append(node.right)
                    next_index = node.left_index(index)
            else:
                next_index = stack.pop()

            diff = node.position - p
            yield index, float(diff @ diff)
            index = next_index

    def _query_point(self, p) -> np.ndarray:
        point = np.asarray(p, dtype=float).reshape(-1)
        if len(point) != len(self._nodes[0].position):
            raise RenderError("query point has the wrong dimension")
        return point

    def search(self, p, search_radius: float) -> list[int]:
        """Return the indices of all points strictly closer than ``search_radius``."""
        if not self._nodes:
            return []
        point = self._query_point(p)
        dist_sq = search_radius * search_radius
        return [
            index
            for index, d in self._traverse(point, lambda: dist_sq)
            if d < dist_sq
        ]

    def nn_search(
        self, p, k: int, sqr_search_radius: float = math.inf
    ) -> tuple[list[SearchResult], float]:
        """Find up to ``k`` nearest points within ``sqr_search_radius`` (squared).

        Returns the results sorted by distance and the squared radius that
        was needed to keep the result count at most ``k``.
        """
        if k < 0:
            raise ValueError("k must be non-negative")
        if not self._nodes or k == 0:
            return [], sqr_search_radius
        point = self._query_point(p)
        radius_sq = sqr_search_radius
        results: list[tuple[float, int]] = []
        heap: Optional[list[tuple[float, int]]] = None

        for index, d in self._traverse(point, lambda: radius_sq):
            if d >= radius_sq:
                continue
            if len(results) < k:
                results.append((d, index))
                continue
            if heap is None:
                heap = [(-dist, -idx) for dist, idx in results]
                heapq.heapify(heap)
            heapq.heappushpop(heap, (-d, -index))
            radius_sq = -heap[0][0]

        if heap is not None:
            results = [(-neg_d, -neg_i) for neg_d, neg_i in heap]
        results.sort()
        return [SearchResult(d, index) for d, index in results], radius_sq