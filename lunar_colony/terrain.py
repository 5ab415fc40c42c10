"""Terrain implementations: a flat plane and a sampled heightmap.

Both are centred on the world origin and satisfy the ``Terrain`` protocol
from :mod:`lunar_colony.navigation`.
"""
from __future__ import annotations

import math
from typing import Sequence

from lunar_colony import vec
from lunar_colony.types import Vec3


class FlatTerrain:
    def __init__(self, size: float = 500.0, height: float = 0.0) -> None:
        if size <= 0:
            raise ValueError("size must be positive")
        self._half = size / 2.0
        self._height = height

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return (-self._half, self._half, -self._half, self._half)

    def contains(self, x: float, z: float) -> bool:
        return -self._half <= x <= self._half and -self._half <= z <= self._half

    def height_at(self, x: float, z: float) -> float | None:
        if not self.contains(x, z):
            return None
        return self._height

    def normal_at(self, x: float, z: float) -> Vec3:
        return vec.UP


class HeightmapTerrain:
    """Regular grid of height samples with bilinear interpolation.

    ``heights[row][col]`` is the sample at ``x = min_x + col * cell_size``,
    ``z = min_z + row * cell_size``.
    """

    def __init__(self, heights: Sequence[Sequence[float]], cell_size: float = 1.0) -> None:
        if len(heights) < 2 or len(heights[0]) < 2:
            raise ValueError("heightmap needs at least 2x2 samples")
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        width = len(heights[0])
        for row in heights:
            if len(row) != width:
                raise ValueError("heightmap rows must have equal length")
        self._heights = [list(row) for row in heights]
        self._cell = cell_size
        self._rows = len(heights)
        self._cols = width
        self._min_x = -(width - 1) * cell_size / 2.0
        self._min_z = -(self._rows - 1) * cell_size / 2.0

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return (
            self._min_x,
            self._min_x + (self._cols - 1) * self._cell,
            self._min_z,
            self._min_z + (self._rows - 1) * self._cell,
        )

    def height_at(self, x: float, z: float) -> float | None:
        gx = (x - self._min_x) / self._cell
        gz = (z - self._min_z) / self._cell
        if gx < 0 or gz < 0 or gx > self._cols - 1 or gz > self._rows - 1:
            return None
        c0 = min(int(math.floor(gx)), self._cols - 2)
        r0 = min(int(math.floor(gz)), self._rows - 2)
        fx = gx - c0
        fz = gz - r0
        h = self._heights
        top = h[r0][c0] * (1 - fx) + h[r0][c0 + 1] * fx
        bottom = h[r0 + 1][c0] * (1 - fx) + h[r0 + 1][c0 + 1] * fx
        return top * (1 - fz) + bottom * fz

    def normal_at(self, x: float, z: float) -> Vec3:
        # Central differences, clamped to the map edge.
        e = self._cell * 0.5
        min_x, max_x, min_z, max_z = self.bounds
        x0, x1 = max(min_x, x - e), min(max_x, x + e)
        z0, z1 = max(min_z, z - e), min(max_z, z + e)
        hx0, hx1 = self.height_at(x0, z), self.height_at(x1, z)
        hz0, hz1 = self.height_at(x, z0), self.height_at(x, z1)
        if None in (hx0, hx1, hz0, hz1) or x1 == x0 or z1 == z0:
            return vec.UP
        dx = (hx1 - hx0) / (x1 - x0)  # type: ignore[operator]
        dz = (hz1 - hz0) / (z1 - z0)  # type: ignore[operator]
        return vec.normalize((-dx, 1.0, -dz))
