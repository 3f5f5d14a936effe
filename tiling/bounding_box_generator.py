"""
Tile bounding boxes for flat tiling schemes.

The world box of a tile is the projection's world extent divided linearly
by the number of tiles at the tile's level; its geo box is the unprojection
of that world box.
"""

from common.types import Box3, Vector3
from geospatial.geo_box import GeoBox
from tiling.tile_key import TileKey


class FlatTileBoundingBoxGenerator:
    """Computes world and geo boxes of the tiles of a tiling scheme.

    Parameters
    ----------
    tiling_scheme : TilingScheme
        Scheme whose projection and subdivision define the tiles.
    min_elevation, max_elevation : float
        Altitude range in meters given to the world boxes.
    """

    def __init__(self, tiling_scheme, min_elevation: float = 0.0, max_elevation: float = 0.0):
        if min_elevation > max_elevation:
            raise ValueError(
                f"min_elevation {min_elevation} exceeds max_elevation {max_elevation}"
            )
        self.tiling_scheme = tiling_scheme
        self.min_elevation = min_elevation
        self.max_elevation = max_elevation

    @property
    def projection(self):
        return self.tiling_scheme.projection

    @property
    def subdivision_scheme(self):
        return self.tiling_scheme.subdivision_scheme

    def get_world_box(self, tile_key: TileKey) -> Box3:
        level = tile_key.level
        columns = self.subdivision_scheme.get_level_dimension_x(level)
        rows = self.subdivision_scheme.get_level_dimension_y(level)

        extent = self.projection.world_extent(self.min_elevation, self.max_elevation)
        cell_width = (extent.max.x - extent.min.x) / columns
        cell_height = (extent.max.y - extent.min.y) / rows

        min_x = extent.min.x + cell_width * tile_key.column
        min_y = extent.min.y + cell_height * tile_key.row
        return Box3(
            Vector3(min_x, min_y, self.min_elevation),
            Vector3(min_x + cell_width, min_y + cell_height, self.max_elevation),
        )

    def get_geo_box(self, tile_key: TileKey) -> GeoBox:
        return self.projection.unproject_box(self.get_world_box(tile_key))
