"""Pipelines chaining the transforms between GPS coordinates and a national grid."""

import logging

import numpy as np
import pandas as pd

from .data import (WGS84, GRS80, WGS84_TO_OSGB36, ETRF89_TO_IRL1975,
                   TM_NATIONAL_GRID, TM_IRISH_NATIONAL_GRID,
                   GR_NATIONAL_GRID, GR_IRISH_NATIONAL_GRID)
from .geo import (real, rad, deg, LatLon, EasNor, HelmertTransform,
                  lat_lon_to_cartesian, cartesian_to_lat_lon,
                  lat_lon_to_tm_eas_nor, tm_eas_nor_to_lat_lon)
from .grid import (eas_nor_to_grid_ref, grid_ref_to_eas_nor, parse_grid_ref)

__all__ = ['Tool']

logger = logging.getLogger(__name__)


class Tool(object):
    """Class converting GPS positions to and from a projected grid."""

    def __init__(self, helmert, projection, grid=None, source_ellipsoid=WGS84):
        """
        Set up the chain of transforms between the two datums.

        Parameters
        ----------

        helmert: geo.Helmert
            Datum shift from the source (GPS) datum to the projection's datum.
        projection: geo.TmProjection
            Transverse Mercator projection of the grid. Its ellipsoid is the
            target datum's ellipsoid.
        grid: grid.Grid, optional
            Lettered grid laid over the projection. Without one only
            eastings and northings are available.
        source_ellipsoid: geo.Ellipsoid, optional
            Ellipsoid of the source datum, WGS84 unless given.
        """
        self.projection = projection
        self.grid = grid
        self.source_ellipsoid = source_ellipsoid
        self.to_grid_datum = HelmertTransform(helmert)
        self.from_grid_datum = self.to_grid_datum.inverse()

    @classmethod
    def national_grid(cls):
        """Tool for the Ordnance Survey National Grid of Great Britain."""
        return cls(WGS84_TO_OSGB36, TM_NATIONAL_GRID, GR_NATIONAL_GRID)

    @classmethod
    def irish_national_grid(cls):
        """Tool for the Irish National Grid, taking ETRF89 positions on GRS80."""
        return cls(ETRF89_TO_IRL1975, TM_IRISH_NATIONAL_GRID,
                   GR_IRISH_NATIONAL_GRID, source_ellipsoid=GRS80)

    def _require_grid(self):
        if self.grid is None:
            raise ValueError("Tool has no lettered grid")
        return self.grid

    def get_easting_northing_from_lat_long(self, latitude, longitude, height=0,
                                           radians=False):
        """Get eastings and northings from GPS (latitude, longitude) pairs.

        Input arrays must be of matching length.

        Parameters
        ----------

        latitude: float or sequence of floats
            Latitudes to convert.
        longitude: float or sequence of floats
            Longitudes to convert.
        height: float or sequence of floats, optional
            Ellipsoidal heights (m).
        radians: bool, optional
            Set to `True` if input is in radians. Otherwise degrees are assumed.

        Returns
        -------

        geo.EasNor
            Eastings and northings (m) with the height above the target
            datum's ellipsoid.
        """
        if not radians:
            latitude = rad(latitude)
            longitude = rad(longitude)

        gps = LatLon(latitude, longitude, height)
        cartesian = self.to_grid_datum(lat_lon_to_cartesian(gps, self.source_ellipsoid))
        local = cartesian_to_lat_lon(cartesian, self.projection.ellipsoid)

        return lat_lon_to_tm_eas_nor(local, self.projection)

    def get_lat_long_from_easting_northing(self, easting, northing, height=0,
                                           radians=False):
        """Get GPS (latitude, longitude) pairs from eastings and northings.

        Input arrays must be of matching length.

        Parameters
        ----------

        easting: float or sequence of floats
            Eastings (m)
        northing: float or sequence of floats
            Northings (m)
        height: float or sequence of floats, optional
            Heights above the target datum's ellipsoid (m)
        radians: bool, optional
            Set to `True` for output in radians. Otherwise degrees.

        Returns
        -------

        geo.LatLon
            Latitude, longitude and ellipsoidal height on the source datum.
        """
        local = tm_eas_nor_to_lat_lon(EasNor(easting, northing, height),
                                      self.projection)
        cartesian = self.from_grid_datum(lat_lon_to_cartesian(local, self.projection.ellipsoid))
        gps = cartesian_to_lat_lon(cartesian, self.source_ellipsoid)

        if radians:
            return gps
        return LatLon(deg(gps.lat), deg(gps.lon), gps.eh)

    def get_grid_ref_from_lat_long(self, latitude, longitude, height=0,
                                   radians=False):
        """Get the grid reference of a single GPS position.

        Returns
        -------

        grid.GridRef
            Reference with an empty code if the position is off the grid.
        """
        grid = self._require_grid()
        eas_nor = self.get_easting_northing_from_lat_long(latitude, longitude,
                                                          height, radians)
        grid_ref = eas_nor_to_grid_ref(eas_nor, grid)
        if not grid_ref.is_valid:
            logger.debug("(%s, %s) is not covered by the grid", latitude, longitude)
        return grid_ref

    def get_lat_long_from_grid_ref(self, grid_ref, radians=False):
        """Get the GPS position of a grid reference.

        Parameters
        ----------

        grid_ref: grid.GridRef or str
            Reference to convert. Text is read with `grid.parse_grid_ref`.
        radians: bool, optional
            Set to `True` for output in radians. Otherwise degrees.

        Returns
        -------

        geo.LatLon
        """
        grid = self._require_grid()
        if isinstance(grid_ref, str):
            grid_ref = parse_grid_ref(grid_ref, grid)
        if not grid_ref.is_valid:
            raise ValueError("Grid reference is not on the grid")

        eas_nor = grid_ref_to_eas_nor(grid_ref, grid)
        return self.get_lat_long_from_easting_northing(*eas_nor, radians=radians)

    def get_grid_refs(self, latitudes, longitudes, heights=None):
        """Get a pandas DataFrame of grid references for GPS positions in degrees.

        Parameters
        ----------

        latitudes: sequence of floats
            Ordered sequence of N latitudes
        longitudes: sequence of floats
            Ordered sequence of N longitudes
        heights: sequence of floats, optional
            Ellipsoidal heights (m), zero if not given

        Returns
        -------

        pandas.DataFrame
            One row per input position with columns `Grid Reference`,
            `Easting`, `Northing` and `Height`. Positions off the grid have
            an empty `Grid Reference` and NaN in the other columns.
        """
        grid = self._require_grid()
        latitudes = np.asarray(latitudes, dtype=real)
        longitudes = np.asarray(longitudes, dtype=real)
        if heights is None:
            heights = np.zeros_like(latitudes)
        heights = np.asarray(heights, dtype=real)

        eas_nor = self.get_easting_northing_from_lat_long(latitudes, longitudes, heights)
        refs = [eas_nor_to_grid_ref(EasNor(e, n, h), grid)
                for e, n, h in zip(eas_nor.e, eas_nor.n, eas_nor.h)]

        off_grid = sum(1 for ref in refs if not ref.is_valid)
        if off_grid:
            logger.debug("%d of %d positions are not covered by the grid",
                         off_grid, len(refs))

        return pd.DataFrame({'Grid Reference': [ref.code for ref in refs],
                             'Easting': [ref.e for ref in refs],
                             'Northing': [ref.n for ref in refs],
                             'Height': [ref.h for ref in refs]},
                            columns=['Grid Reference', 'Easting', 'Northing', 'Height'])
