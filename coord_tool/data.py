"""Parameter tables for the ellipsoids, datum shifts, projections and grids
used in Great Britain and Ireland."""

from .geo import Ellipsoid, Helmert, TmProjection
from .grid import Grid

# Ellipsoids. Values taken from "A guide to coordinate systems in Great
# Britain".

AIRY_1830 = Ellipsoid(a=6377563.396, b=6356256.910)

AIRY_1830_MODIFIED = Ellipsoid(a=6377340.189, b=6356034.447)

# aka Hayford 1909
INTERNATIONAL_1924 = Ellipsoid(a=6378388.000, b=6356911.946)

GRS80 = Ellipsoid(a=6378137.000, b=6356752.314140)

# Ellipsoid used for the WGS 1984 datum (i.e. for GPS coordinates)
WGS84 = Ellipsoid(a=6378137.000, b=6356752.3142)


# Helmert transforms

# WGS84 -> OSGB36. Produces heights "similar to" ODN heights.
WGS84_TO_OSGB36 = Helmert(tx=-446.448, ty=125.157, tz=-542.060,
                          rx=-0.1502, ry=-0.2470, rz=-0.8421,
                          s=20.4894)

# WGS84 -> ED50, from the UK offshore (PON 4) guidance.
WGS84_TO_ED50 = Helmert(tx=89.5, ty=93.8, tz=123.1,
                        rx=0.0, ry=0.0, rz=0.156,
                        s=-1.2)

# ETRF89 (similar to WGS84) -> Irish 1975, from the Ordnance Survey Ireland
# transformations booklet.
ETRF89_TO_IRL1975 = Helmert(tx=-482.530, ty=130.596, tz=-564.557,
                            rx=-1.042, ry=-0.214, rz=-0.631,
                            s=-8.150)


# Transverse Mercator projections

# Ordnance Survey National Grid
TM_NATIONAL_GRID = TmProjection(e0=400000.0, n0=-100000.0,
                                f0=0.9996012717,
                                lat0=49.0, lon0=-2.0,
                                ellipsoid=AIRY_1830)

# Irish National Grid
TM_IRISH_NATIONAL_GRID = TmProjection(e0=200000.0, n0=250000.0,
                                      f0=1.000035,
                                      lat0=53.5, lon0=-8.0,
                                      ellipsoid=AIRY_1830_MODIFIED)

# Universal Transverse Mercator zones covering the British Isles
TM_UTM_ZONE_29 = TmProjection(e0=500000.0, n0=0.0, f0=0.9996,
                              lat0=0.0, lon0=-9.0,
                              ellipsoid=INTERNATIONAL_1924)

TM_UTM_ZONE_30 = TmProjection(e0=500000.0, n0=0.0, f0=0.9996,
                              lat0=0.0, lon0=-3.0,
                              ellipsoid=INTERNATIONAL_1924)

TM_UTM_ZONE_31 = TmProjection(e0=500000.0, n0=0.0, f0=0.9996,
                              lat0=0.0, lon0=3.0,
                              ellipsoid=INTERNATIONAL_1924)


# Lettered grids

# National Grid over England, Scotland and Wales
GR_NATIONAL_GRID = Grid(num_digits=2, bottom_left_first_char='S',
                        width=7, height=13)

# Irish National Grid over Ireland and Northern Ireland
GR_IRISH_NATIONAL_GRID = Grid(num_digits=1, bottom_left_first_char='V',
                              width=5, height=5)
