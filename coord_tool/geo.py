"""Module implementing the geodetic transformation functions.

Points move between three representations on an ellipsoid (geographic,
Cartesian and transverse Mercator eastings/northings) and between datums via
a seven parameter Helmert transform.

References
----------

A guide to coordinate systems in Great Britain, Section 6 and Appendix C.
"""

import logging
from collections import namedtuple

import numpy as np
from numpy import array, sin, cos, tan, sqrt, arctan2, floor

from .config import (CART_TO_LAT_LON_PRECISION, EAS_NOR_TO_LAT_LON_PRECISION,
                     MAX_ITERATIONS)

__all__ = ['real', 'PI', 'rad', 'deg',
           'ConvergenceError',
           'LatLon', 'Cartesian', 'EasNor',
           'Ellipsoid', 'Helmert', 'TmProjection',
           'HelmertTransform',
           'lat_lon_to_cartesian', 'cartesian_to_lat_lon',
           'helmert_invert', 'helmert_transform',
           'lat_lon_to_tm_eas_nor', 'tm_eas_nor_to_lat_lon']

logger = logging.getLogger(__name__)

# Real number type used throughout. Swapping this for another numpy float
# type (e.g. numpy.longdouble) changes the working precision of every
# transform.
real = np.float64

PI = real(3.141592653589793)


class ConvergenceError(ValueError):
    """Raised when an iterative solution fails to settle."""


def _real(value):
    """Coerce a scalar or an array to the working real type."""
    if np.isscalar(value):
        return real(value)
    return np.asarray(value, dtype=real)


def rad(deg, min=0, sec=0):
    """Convert degrees into radians.

    The three components are summed, so a negative angle needs every
    component negative.
    """
    return (_real(deg)+min/60.+sec/3600.)*(PI/180.)


def deg(rad, dms=False):
    """Convert radians into degrees.

    With `dms` set a scalar angle is returned as a (degrees, minutes,
    seconds) tuple, each component carrying the sign of the angle.
    """
    d = _real(rad)*(180./PI)
    if dms:
        sign = -1 if d < 0 else 1
        d = abs(d)
        m = 60.0*(d % 1.)
        return sign*floor(d), sign*floor(m), sign*round(60*(m % 1.), 4)
    else:
        return d


class LatLon(namedtuple('LatLon', ['lat', 'lon', 'eh'])):
    """Latitude and longitude (radians) with ellipsoidal height (m)."""
    __slots__ = ()


class Cartesian(namedtuple('Cartesian', ['x', 'y', 'z'])):
    """Earth-centred, earth-fixed 3D coordinate (m).

    The ellipsoid the point refers to is not recorded.
    """
    __slots__ = ()


class EasNor(namedtuple('EasNor', ['e', 'n', 'h'])):
    """Projected eastings and northings with height (all m)."""
    __slots__ = ()


class Ellipsoid(namedtuple('Ellipsoid', ['a', 'b'])):
    """Class acting as container for properties describing a terrestrial ellipsoid.

    Parameters
    ----------

    a: float
        Semi-major axis (m)
    b: float
        Semi-minor axis (m), with 0 < b <= a
    """
    __slots__ = ()

    @property
    def e2(self):
        """Eccentricity squared, (a^2-b^2)/a^2."""
        a, b = real(self.a), real(self.b)
        return (a*a-b*b)/(a*a)

    @property
    def n(self):
        """Third flattening, (a-b)/(a+b)."""
        a, b = real(self.a), real(self.b)
        return (a-b)/(a+b)


class Helmert(namedtuple('Helmert', ['tx', 'ty', 'tz', 'rx', 'ry', 'rz', 's'])):
    """Parameters of a seven parameter Helmert transform between two datums.

    Translations `tx`, `ty`, `tz` are in metres, rotations `rx`, `ry`, `rz`
    in seconds of arc and the scale factor `s` in parts per million.
    """
    __slots__ = ()


class TmProjection(namedtuple('TmProjection',
                              ['e0', 'n0', 'f0', 'lat0', 'lon0', 'ellipsoid'])):
    """Class acting as container for properties describing a transverse Mercator projection.

    Parameters
    ----------

    e0, n0: float
        Eastings and northings of the true origin (m)
    f0: float
        Scale factor on the central meridian
    lat0: float
        Latitude of the true origin (DEGREES)
    lon0: float
        Longitude of the true origin and central meridian (DEGREES)
    ellipsoid: Ellipsoid
        Ellipsoid the projected latitudes and longitudes refer to
    """
    __slots__ = ()


def lat_lon_to_cartesian(point, ellipsoid):
    """Convert a location in latitude and longitude format to 3D on the specified ellipsoid.

    Arrays may be supplied in place of scalars, in which case they must be
    of matching length.

    Parameters
    ----------

    point: LatLon
        Latitude and longitude (radians) and ellipsoidal height (m)
    ellipsoid: Ellipsoid
        Geodetic ellipsoid to work on

    Returns
    -------

    Cartesian
        Location in 3D (body Cartesian) coordinates.
    """
    lat, lon, eh = (_real(v) for v in point)
    e2 = ellipsoid.e2

    sin_phi = sin(lat)
    nu = real(ellipsoid.a)/sqrt(1-e2*sin_phi*sin_phi)

    return Cartesian((nu+eh)*cos(lat)*cos(lon),
                     (nu+eh)*cos(lat)*sin(lon),
                     ((1-e2)*nu+eh)*sin_phi)


def cartesian_to_lat_lon(point, ellipsoid):
    """Convert a location in 3D to latitude and longitude format on the specified ellipsoid.

    Latitude is found by fixed point iteration, stopping once successive
    estimates are within roughly `CART_TO_LAT_LON_PRECISION` metres of each
    other. For arrays the iteration runs until every point has settled.

    Parameters
    ----------

    point: Cartesian
        Location in body Cartesian 3D (m)
    ellipsoid: Ellipsoid
        Geodetic ellipsoid to work on

    Returns
    -------

    LatLon
        Latitude and longitude (radians) and ellipsoidal height (m).

    Raises
    ------

    ConvergenceError
        If the latitude has not settled after `MAX_ITERATIONS` steps.
    """
    x, y, z = (_real(v) for v in point)
    a = real(ellipsoid.a)
    e2 = ellipsoid.e2

    precision = real(CART_TO_LAT_LON_PRECISION)/a
    p = sqrt(x*x+y*y)

    ### first guess at latitude
    phi = arctan2(z, p*(1-e2))
    nu = a/sqrt(1-e2*sin(phi)**2)

    # points that have settled keep their values while the rest iterate
    settled = np.zeros(np.shape(phi), dtype=bool)
    for iteration in range(1, MAX_ITERATIONS+1):
        nu = np.where(settled, nu, a/sqrt(1-e2*sin(phi)**2))
        phi_p = phi
        phi = np.where(settled, phi, arctan2(z+e2*nu*sin(phi), p))
        settled = settled | ~(abs(phi-phi_p) > precision)
        if np.all(settled):
            break
    else:
        raise ConvergenceError("latitude did not converge after %d iterations"
                               % MAX_ITERATIONS)
    logger.debug("cartesian_to_lat_lon converged after %d iterations", iteration)

    phi, nu = phi[()], nu[()]
    # nu is from each point's final pass through the loop
    return LatLon(phi, arctan2(y, x), p/cos(phi)-nu)


class HelmertTransform(object):
    """Class to perform a Helmert Transform mapping (x,y,z) tuples from one datum to another.

    This is the small angle (Bursa-Wolf) form published by the Ordnance
    Survey, not the exact large angle rotation.
    """

    def __init__(self, helmert):
        tx, ty, tz, rx, ry, rz, s = (real(v) for v in helmert)

        # Normalise seconds to radians and ppm to (1+s)
        rx, ry, rz = rad(0, 0, rx), rad(0, 0, ry), rad(0, 0, rz)
        s1 = 1+s/real(1000000)

        self.helmert = helmert
        self.T = array([tx, ty, tz]).reshape((3, 1))
        self.M = array([[s1, -rz, ry],
                        [rz, s1, -rx],
                        [-ry, rx, s1]])

    def __call__(self, point):
        """Transform a point or point set using the Helmert Transform."""
        X = array(np.broadcast_arrays(*(_real(v) for v in point)))
        Y = self.T + self.M.dot(X.reshape((3, -1)))
        return Cartesian(*Y.reshape(X.shape))

    def inverse(self):
        return HelmertTransform(helmert_invert(self.helmert))


def helmert_transform(point, helmert):
    """Perform a Helmert transform on a point (or point set) in Cartesian space.

    Parameters
    ----------

    point: Cartesian
        Location on the source datum (m)
    helmert: Helmert
        Transform parameters

    Returns
    -------

    Cartesian
        Location on the target datum (m).
    """
    return HelmertTransform(helmert)(point)


def helmert_invert(helmert):
    """Transform a set of Helmert parameters to give the inverse transform.

    Every parameter is negated, which inverts the transform to first order
    in the rotations and scale.
    """
    return Helmert(*(-v for v in helmert))


def _meridional_arc(phi, phi0, projection):
    """Developed meridional arc M from latitude phi0 to phi (m)."""
    b = real(projection.ellipsoid.b)
    f0 = real(projection.f0)
    n = projection.ellipsoid.n
    n2 = n*n
    n3 = n*n*n

    Ma = (1+n+(5/4)*n2+(5/4)*n3)*(phi-phi0)
    Mb = (3*n+3*n2+(21/8)*n3)*sin(phi-phi0)*cos(phi+phi0)
    Mc = ((15/8)*n2+(15/8)*n3)*sin(2*(phi-phi0))*cos(2*(phi+phi0))
    Md = (35/24)*n3*sin(3*(phi-phi0))*cos(3*(phi+phi0))

    return b*f0*(Ma-Mb+Mc-Md)


def _radii_of_curvature(phi, projection):
    """Scaled transverse (nu) and meridional (rho) radii of curvature at phi."""
    a = real(projection.ellipsoid.a)
    b = real(projection.ellipsoid.b)
    f0 = real(projection.f0)
    e2 = 1-(b*b)/(a*a)

    sin2 = sin(phi)**2
    nu = a*f0/sqrt(1-e2*sin2)
    rho = a*f0*(1-e2)/(1-e2*sin2)**1.5

    return nu, rho


def lat_lon_to_tm_eas_nor(point, projection):
    """Project a latitude and longitude to eastings and northings.

    Parameters
    ----------

    point: LatLon
        Latitude and longitude in radians on the projection's ellipsoid.
        The ellipsoidal height is copied verbatim.
    projection: TmProjection
        Transverse Mercator projection to use

    Returns
    -------

    EasNor
        Eastings, northings and height (m).
    """
    lat, lon, eh = (_real(v) for v in point)
    lat0 = rad(projection.lat0)
    lon0 = rad(projection.lon0)

    nu, rho = _radii_of_curvature(lat, projection)
    eta2 = nu/rho-1

    M = _meridional_arc(lat, lat0, projection)

    sin_lat = sin(lat)
    cos_lat = cos(lat)
    cos3_lat = cos_lat**3
    cos5_lat = cos_lat**5
    tan2_lat = tan(lat)**2
    tan4_lat = tan2_lat*tan2_lat

    I = M+real(projection.n0)
    II = (nu/2)*sin_lat*cos_lat
    III = (nu/24)*sin_lat*cos3_lat*(5-tan2_lat+9*eta2)
    IIIA = (nu/720)*sin_lat*cos5_lat*(61-58*tan2_lat+tan4_lat)
    IV = nu*cos_lat
    V = (nu/6)*cos3_lat*(nu/rho-tan2_lat)
    VI = (nu/120)*cos5_lat*(5-18*tan2_lat+tan4_lat+14*eta2-58*tan2_lat*eta2)

    d_lon = lon-lon0

    northing = I+II*d_lon**2+III*d_lon**4+IIIA*d_lon**6
    easting = real(projection.e0)+IV*d_lon+V*d_lon**3+VI*d_lon**5

    return EasNor(easting, northing, eh)


def tm_eas_nor_to_lat_lon(point, projection):
    """Convert eastings and northings on a projection back to latitude and longitude.

    The latitude of the foot point is found iteratively, stopping once
    |N - N0 - M| drops below `EAS_NOR_TO_LAT_LON_PRECISION`. North of about
    54.7 degrees the arc overshoots, so the residual changes sign and a
    signed test would stop early.

    Parameters
    ----------

    point: EasNor
        Eastings and northings (m). The height is copied verbatim.
    projection: TmProjection
        Transverse Mercator projection the point lies on

    Returns
    -------

    LatLon
        Latitude and longitude (radians) on the projection's ellipsoid.

    Raises
    ------

    ConvergenceError
        If the residual is still above the threshold after `MAX_ITERATIONS`
        steps.
    """
    easting, northing, h = (_real(v) for v in point)
    a = real(projection.ellipsoid.a)
    f0 = real(projection.f0)
    n0 = real(projection.n0)
    lat0 = rad(projection.lat0)
    lon0 = rad(projection.lon0)

    lat = lat0
    M = real(0)
    settled = np.zeros(np.shape(northing), dtype=bool)
    for iteration in range(1, MAX_ITERATIONS+1):
        lat = np.where(settled, lat, (northing-n0-M)/(a*f0)+lat)
        M = np.where(settled, M, _meridional_arc(lat, lat0, projection))
        settled = settled | ~(abs(northing-n0-M) >= EAS_NOR_TO_LAT_LON_PRECISION)
        if np.all(settled):
            break
    else:
        raise ConvergenceError("meridional arc did not converge after %d iterations"
                               % MAX_ITERATIONS)
    logger.debug("tm_eas_nor_to_lat_lon converged after %d iterations", iteration)
    lat = lat[()]

    nu, rho = _radii_of_curvature(lat, projection)
    eta2 = nu/rho-1

    tan_lat = tan(lat)
    tan2_lat = tan_lat*tan_lat
    tan4_lat = tan2_lat*tan2_lat
    tan6_lat = tan4_lat*tan2_lat
    sec_lat = 1/cos(lat)
    nu3 = nu**3
    nu5 = nu**5
    nu7 = nu**7

    VII = tan_lat/(2*rho*nu)
    VIII = tan_lat/(24*rho*nu3)*(5+3*tan2_lat+eta2-9*tan2_lat*eta2)
    IX = tan_lat/(720*rho*nu5)*(61+90*tan2_lat+45*tan4_lat)
    X = sec_lat/nu
    XI = sec_lat/(6*nu3)*(nu/rho+2*tan2_lat)
    XII = sec_lat/(120*nu5)*(5+28*tan2_lat+24*tan4_lat)
    XIIA = sec_lat/(5040*nu7)*(61+662*tan2_lat+1320*tan4_lat+720*tan6_lat)

    dE = easting-real(projection.e0)

    latitude = lat-VII*dE**2+VIII*dE**4-IX*dE**6
    longitude = lon0+X*dE-XI*dE**3+XII*dE**5-XIIA*dE**7

    return LatLon(latitude, longitude, h)
