"""Spatial partition — Voronoi cells over projected points, used for pointer hit-testing.

Cells are the duals of a scipy Delaunay triangulation: each site's cell is the
bounding rectangle clipped by the perpendicular bisector to every Delaunay
neighbour. Hit-testing uses a KD-tree nearest-site query, which is equivalent
to finding the cell that contains the pointer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from scipy.spatial import Delaunay, QhullError, cKDTree

from tempscatter.models import Accessor, DataPoint
from tempscatter.scales import LinearScale

logger = logging.getLogger(__name__)

Point = tuple[float, float]
Polygon = tuple[Point, ...]


class EmptyPartition(Exception):
    """Hit-test against a partition with no locatable sites."""


def _clip_half_plane(polygon: list[Point], site: Point, other: Point) -> list[Point]:
    """Keep the part of a convex polygon closer to `site` than to `other` (Sutherland–Hodgman)."""
    nx = other[0] - site[0]
    ny = other[1] - site[1]
    c = (nx * (site[0] + other[0]) + ny * (site[1] + other[1])) / 2
    clipped: list[Point] = []
    for k, p in enumerate(polygon):
        q = polygon[(k + 1) % len(polygon)]
        sp = nx * p[0] + ny * p[1] - c
        sq = nx * q[0] + ny * q[1] - c
        if sp <= 0:
            clipped.append(p)
        if (sp < 0 < sq) or (sq < 0 < sp):
            t = sp / (sp - sq)
            clipped.append((p[0] + t * (q[0] - p[0]), p[1] + t * (q[1] - p[1])))
    return clipped if len(clipped) >= 3 else []


def _line_neighbours(sites: np.ndarray, tolerance: float = 1e-9) -> list[np.ndarray] | None:
    """Adjacent sites along the line when all sites are collinear, else None."""
    centred = sites - sites.mean(axis=0)
    _, singular, vt = np.linalg.svd(centred, full_matrices=False)
    if singular[0] == 0 or singular[-1] > tolerance * singular[0]:
        return None
    order = np.argsort(centred @ vt[0], kind="stable")
    neighbours: list[np.ndarray] = [np.empty(0, dtype=int)] * len(sites)
    for pos, k in enumerate(order):
        neighbours[k] = np.concatenate([order[max(0, pos - 1) : pos], order[pos + 1 : pos + 2]])
    return neighbours


def _delaunay_neighbours(sites: np.ndarray) -> tuple[list[np.ndarray], np.ndarray]:
    """Delaunay neighbours per site, and a mask of the sites that get a cell.

    Collinear sites only neighbour the sites next to them along the line.
    Sites Qhull leaves out of the triangulation (nearly coincident with a
    vertex) are dropped from the mask and handled like exact duplicates.
    When no triangulation exists for other reasons every other site is a
    neighbour, which yields the same cells at quadratic cost.
    """
    n = len(sites)
    kept = np.ones(n, dtype=bool)
    if n < 3:
        return [np.delete(np.arange(n), k) for k in range(n)], kept
    try:
        tri = Delaunay(sites)
    except QhullError:
        line = _line_neighbours(sites)
        if line is not None:
            logger.debug("%d collinear sites; neighbours taken along the line", n)
            return line, kept
        logger.debug("Delaunay triangulation failed for %d sites; using all pairs", n)
        return [np.delete(np.arange(n), k) for k in range(n)], kept
    indptr, indices = tri.vertex_neighbor_vertices
    neighbours = [indices[indptr[k] : indptr[k + 1]] for k in range(n)]
    for k, _, vertex in tri.coplanar:
        logger.debug("Site %d coincides with vertex %d within precision; no cell", k, vertex)
        kept[k] = False
    return neighbours, kept


class VoronoiPartition:
    """Voronoi cells of the projected data points, clipped to [0, width] × [0, height].

    Cells are indexed like the data. A record whose projection is not finite,
    or that coincides with an earlier record (exactly, or within Qhull's
    precision), gets an empty cell and is never returned by :meth:`locate`.
    """

    def __init__(self, sites: np.ndarray, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        self.sites = np.asarray(sites, dtype=float).reshape(-1, 2)

        finite = np.isfinite(self.sites).all(axis=1)
        first_index: dict[Point, int] = {}
        owners: list[int] = []
        for i in np.flatnonzero(finite):
            key = (float(self.sites[i, 0]), float(self.sites[i, 1]))
            if key not in first_index:
                first_index[key] = int(i)
                owners.append(int(i))

        unique = self.sites[np.array(owners, dtype=int)]
        all_neighbours, kept = _delaunay_neighbours(unique)
        rect: list[Point] = [
            (0.0, 0.0),
            (self.width, 0.0),
            (self.width, self.height),
            (0.0, self.height),
        ]
        cells: list[Polygon] = [()] * len(self.sites)
        for k, (i, neighbours) in enumerate(zip(owners, all_neighbours)):
            if not kept[k]:
                continue
            site = (float(unique[k, 0]), float(unique[k, 1]))
            polygon = rect
            for j in neighbours:
                polygon = _clip_half_plane(
                    polygon, site, (float(unique[j, 0]), float(unique[j, 1]))
                )
                if not polygon:
                    break
            cells[i] = tuple(polygon)
        self._cells = tuple(cells)
        self._owners = np.array(owners, dtype=int)[kept]
        self._tree = cKDTree(unique[kept]) if len(self._owners) else None

        logger.debug(
            "Voronoi partition: %d records, %d locatable sites, %d skipped",
            len(self.sites),
            len(self._owners),
            len(self.sites) - len(self._owners),
        )

    @classmethod
    def build(
        cls,
        data: Sequence[DataPoint],
        x_scale: LinearScale,
        y_scale: LinearScale,
        width: float,
        height: float,
        x_accessor: Accessor,
        y_accessor: Accessor,
    ) -> VoronoiPartition:
        """Project each record through the scales and partition the plot bounds."""
        xs = np.array([x_accessor(d) for d in data], dtype=float)
        ys = np.array([y_accessor(d) for d in data], dtype=float)
        sites = np.column_stack([x_scale(xs), y_scale(ys)]) if len(data) else np.empty((0, 2))
        return cls(sites, width, height)

    def __len__(self) -> int:
        return len(self._cells)

    def cell_polygon(self, index: int) -> Polygon:
        """Vertices of the clipped cell; empty for zero-area cells."""
        return self._cells[index]

    def cell_area(self, index: int) -> float:
        polygon = self._cells[index]
        if len(polygon) < 3:
            return 0.0
        pts = np.asarray(polygon)
        nxt = np.roll(pts, -1, axis=0)
        return float(abs(np.sum(pts[:, 0] * nxt[:, 1] - nxt[:, 0] * pts[:, 1])) / 2)

    def cell_contains(self, index: int, x: float, y: float, tolerance: float = 1e-6) -> bool:
        """Whether (x, y) lies inside or on the boundary of a cell."""
        polygon = self._cells[index]
        if len(polygon) < 3:
            return False
        pts = np.asarray(polygon)
        nxt = np.roll(pts, -1, axis=0)
        ex = nxt[:, 0] - pts[:, 0]
        ey = nxt[:, 1] - pts[:, 1]
        cross = ex * (y - pts[:, 1]) - ey * (x - pts[:, 0])
        slack = tolerance * np.hypot(ex, ey)
        return bool(np.all(cross >= -slack) or np.all(cross <= slack))

    def locate(self, x: float, y: float) -> int:
        """Index of the record whose cell contains (x, y).

        Points on a shared edge go to whichever site the KD-tree reports first,
        which is stable for a given build.

        Raises:
            EmptyPartition: When there are no locatable sites.
        """
        if self._tree is None:
            raise EmptyPartition("Partition has no sites to locate against")
        _, k = self._tree.query((x, y))
        return int(self._owners[k])
