"""Tests for the ellipsoid, Helmert and transverse Mercator transforms."""

import numpy as np
import pytest

from coord_tool import geo
from coord_tool.data import (AIRY_1830, AIRY_1830_MODIFIED, WGS84, GRS80,
                             INTERNATIONAL_1924, WGS84_TO_OSGB36, WGS84_TO_ED50,
                             TM_NATIONAL_GRID, TM_IRISH_NATIONAL_GRID,
                             TM_UTM_ZONE_30)
from coord_tool.geo import (PI, rad, deg, LatLon, Cartesian, EasNor, Helmert,
                            HelmertTransform, ConvergenceError,
                            lat_lon_to_cartesian, cartesian_to_lat_lon,
                            helmert_invert, helmert_transform,
                            lat_lon_to_tm_eas_nor, tm_eas_nor_to_lat_lon)

# Worked example from "A guide to coordinate systems in Great Britain"
# (Annex B and C): 52 39' 27.2531" N, 1 43' 4.5177" E on Airy 1830.
GUIDE_LAT = rad(52, 39, 27.2531)
GUIDE_LON = rad(1, 43, 4.5177)

# (latitude, longitude) in degrees, within a few degrees of the National
# Grid's central meridian.
GB_POINTS = [
    (50.5, -5.0),
    (51.5, 1.5),
    (52.65757, 1.7179216),
    (53.467097, -2.220490),
    (57.0, -4.0),
    (60.0, -1.0),
]


class TestAngles:
    def test_half_turn(self):
        assert rad(180) == pytest.approx(PI)
        assert deg(PI) == pytest.approx(180.0)

    def test_minutes_and_seconds(self):
        assert rad(0, 30) == pytest.approx(rad(0.5))
        assert rad(0, 0, 36) == pytest.approx(rad(0.01))

    def test_dms(self):
        d, m, s = deg(rad(10, 20, 30), dms=True)
        assert d*3600 + m*60 + s == pytest.approx(37230, abs=1e-3)

    def test_dms_negative(self):
        d, m, s = deg(-rad(1, 30), dms=True)
        assert d <= 0 and m <= 0 and s <= 0
        assert d*3600 + m*60 + s == pytest.approx(-5400, abs=1e-3)

    def test_array(self):
        np.testing.assert_allclose(rad([0, 90, 180]), [0, PI/2, PI])

    def test_real_type(self):
        assert isinstance(rad(1.0), geo.real)


class TestEllipsoid:
    def test_eccentricity(self):
        assert WGS84.e2 == pytest.approx(0.00669438, abs=1e-8)

    def test_third_flattening(self):
        a, b = AIRY_1830
        assert AIRY_1830.n == pytest.approx((a-b)/(a+b))

    def test_immutable(self):
        with pytest.raises(AttributeError):
            AIRY_1830.a = 0


class TestLatLonToCartesian:
    def test_guide_example(self):
        point = lat_lon_to_cartesian(LatLon(GUIDE_LAT, GUIDE_LON, 24.7), AIRY_1830)
        assert point.x == pytest.approx(3874938.849, abs=0.005)
        assert point.y == pytest.approx(116218.624, abs=0.005)
        assert point.z == pytest.approx(5047168.208, abs=0.005)

    def test_equator_prime_meridian(self):
        point = lat_lon_to_cartesian(LatLon(0.0, 0.0, 10.0), WGS84)
        assert point == pytest.approx((WGS84.a + 10.0, 0.0, 0.0))

    def test_north_pole(self):
        point = lat_lon_to_cartesian(LatLon(PI/2, 0.0, 0.0), GRS80)
        assert point.x == pytest.approx(0.0, abs=1e-6)
        assert point.z == pytest.approx(GRS80.b, abs=1e-6)

    def test_arrays(self):
        lats = rad(np.array([50.0, 55.0]))
        lons = rad(np.array([-3.0, 1.0]))
        points = lat_lon_to_cartesian(LatLon(lats, lons, 0.0), AIRY_1830)
        single = lat_lon_to_cartesian(LatLon(lats[1], lons[1], 0.0), AIRY_1830)
        assert points.x[1] == pytest.approx(single.x)
        assert points.z[1] == pytest.approx(single.z)


class TestCartesianToLatLon:
    @pytest.mark.parametrize('ellipsoid', [AIRY_1830, AIRY_1830_MODIFIED,
                                           INTERNATIONAL_1924, GRS80, WGS84])
    @pytest.mark.parametrize('lat, lon', [(52.65757, 1.7179216), (-33.9, 151.2),
                                          (0.0, 0.0), (80.0, -120.5),
                                          (10.0, 179.9)])
    def test_round_trip_on_ellipsoid(self, ellipsoid, lat, lon):
        point = LatLon(rad(lat), rad(lon), 0.0)
        result = cartesian_to_lat_lon(lat_lon_to_cartesian(point, ellipsoid), ellipsoid)
        assert result.lat == pytest.approx(point.lat, abs=1e-9)
        assert result.lon == pytest.approx(point.lon, abs=1e-9)
        assert result.eh == pytest.approx(0.0, abs=1e-3)

    @pytest.mark.parametrize('eh', [-10000.0, -500.0, 24.7, 1100.0, 10000.0])
    def test_round_trip_with_height(self, eh):
        point = LatLon(rad(45.0), rad(-2.0), eh)
        result = cartesian_to_lat_lon(lat_lon_to_cartesian(point, AIRY_1830), AIRY_1830)
        assert result.lat == pytest.approx(point.lat, abs=1e-8)
        assert result.lon == pytest.approx(point.lon, abs=1e-9)
        assert result.eh == pytest.approx(eh, abs=0.1)

    def test_guide_example(self):
        point = Cartesian(3874938.849, 116218.624, 5047168.208)
        result = cartesian_to_lat_lon(point, AIRY_1830)
        assert result.lat == pytest.approx(GUIDE_LAT, abs=1e-8)
        assert result.lon == pytest.approx(GUIDE_LON, abs=1e-8)
        assert result.eh == pytest.approx(24.7, abs=0.1)

    def test_arrays(self):
        points = lat_lon_to_cartesian(
            LatLon(rad(np.array([50.0, 55.0, 60.0])), rad(np.array([-3.0, 1.0, -1.0])), 100.0),
            AIRY_1830)
        result = cartesian_to_lat_lon(points, AIRY_1830)
        np.testing.assert_allclose(result.lat, rad([50.0, 55.0, 60.0]), atol=1e-8)
        np.testing.assert_allclose(result.eh, 100.0, atol=0.1)

    def test_batch_matches_single_points(self):
        lats = rad(np.array([50.5, 52.65757, 57.0]))
        lons = rad(np.array([-5.0, 1.7179216, -4.0]))
        heights = np.array([5000.0, 24.7, 0.0])
        batch = cartesian_to_lat_lon(lat_lon_to_cartesian(LatLon(lats, lons, heights), WGS84), WGS84)
        for i in range(3):
            single = cartesian_to_lat_lon(
                lat_lon_to_cartesian(LatLon(lats[i], lons[i], heights[i]), WGS84), WGS84)
            assert batch.lat[i] == pytest.approx(single.lat, abs=1e-14)
            assert batch.eh[i] == pytest.approx(single.eh, abs=1e-6)

    def test_iteration_bound(self, monkeypatch):
        monkeypatch.setattr(geo, 'MAX_ITERATIONS', 1)
        point = lat_lon_to_cartesian(LatLon(rad(45.0), 0.0, 5000.0), AIRY_1830)
        with pytest.raises(ConvergenceError):
            cartesian_to_lat_lon(point, AIRY_1830)

    def test_convergence_error_is_value_error(self):
        assert issubclass(ConvergenceError, ValueError)


class TestHelmert:
    POINT = Cartesian(3874938.849, 116218.624, 5047168.208)

    def test_invert_negates(self):
        assert helmert_invert(WGS84_TO_OSGB36) == Helmert(446.448, -125.157, 542.060,
                                                          0.1502, 0.2470, 0.8421,
                                                          -20.4894)

    def test_invert_twice(self):
        assert helmert_invert(helmert_invert(WGS84_TO_ED50)) == WGS84_TO_ED50

    def test_identity(self):
        result = helmert_transform(self.POINT, Helmert(0, 0, 0, 0, 0, 0, 0))
        assert result == pytest.approx(self.POINT)

    def test_translation(self):
        result = helmert_transform(self.POINT, Helmert(1.0, -2.0, 3.0, 0, 0, 0, 0))
        assert result == pytest.approx((self.POINT.x + 1.0, self.POINT.y - 2.0,
                                        self.POINT.z + 3.0))

    def test_scale(self):
        result = helmert_transform(Cartesian(1000000.0, 0.0, 0.0),
                                   Helmert(0, 0, 0, 0, 0, 0, 10.0))
        assert result.x == pytest.approx(1000010.0)

    def test_rotation_about_z(self):
        # one second of arc about z moves a point on the x axis towards +y
        result = helmert_transform(Cartesian(6378137.0, 0.0, 0.0),
                                   Helmert(0, 0, 0, 0, 0, 1.0, 0))
        assert result.y == pytest.approx(6378137.0 * rad(0, 0, 1.0))
        assert result.x == pytest.approx(6378137.0)

    @pytest.mark.parametrize('helmert', [WGS84_TO_OSGB36, WGS84_TO_ED50])
    def test_inverse_round_trip(self, helmert):
        there = helmert_transform(self.POINT, helmert)
        back = helmert_transform(there, helmert_invert(helmert))
        # second order terms of the small angle form are left behind
        assert back == pytest.approx(self.POINT, abs=0.02)

    def test_shift_size(self):
        shifted = helmert_transform(self.POINT, WGS84_TO_OSGB36)
        distance = np.sqrt(sum((a - b)**2 for a, b in zip(shifted, self.POINT)))
        assert 100 < distance < 1000

    def test_arrays(self):
        transform = HelmertTransform(WGS84_TO_OSGB36)
        xs = np.array([self.POINT.x, 4000000.0])
        ys = np.array([self.POINT.y, -100000.0])
        zs = np.array([self.POINT.z, 4900000.0])
        result = transform(Cartesian(xs, ys, zs))
        single = transform(self.POINT)
        assert result.x.shape == (2,)
        assert result.x[0] == pytest.approx(single.x)
        assert result.z[0] == pytest.approx(single.z)

    def test_transform_inverse(self):
        transform = HelmertTransform(WGS84_TO_OSGB36)
        assert transform.inverse().helmert == helmert_invert(WGS84_TO_OSGB36)


class TestTransverseMercator:
    def test_guide_forward(self):
        result = lat_lon_to_tm_eas_nor(LatLon(GUIDE_LAT, GUIDE_LON, 24.7), TM_NATIONAL_GRID)
        assert result.e == pytest.approx(651409.903, abs=0.005)
        assert result.n == pytest.approx(313177.270, abs=0.005)
        assert result.h == 24.7

    def test_guide_inverse(self):
        result = tm_eas_nor_to_lat_lon(EasNor(651409.903, 313177.270, 24.7), TM_NATIONAL_GRID)
        assert result.lat == pytest.approx(GUIDE_LAT, abs=1e-8)
        assert result.lon == pytest.approx(GUIDE_LON, abs=1e-8)
        assert result.eh == 24.7

    def test_true_origin(self):
        result = lat_lon_to_tm_eas_nor(LatLon(rad(49.0), rad(-2.0), 0.0), TM_NATIONAL_GRID)
        assert result.e == pytest.approx(400000.0)
        assert result.n == pytest.approx(-100000.0, abs=1e-6)

    def test_true_origin_inverse(self):
        result = tm_eas_nor_to_lat_lon(EasNor(400000.0, -100000.0, 0.0), TM_NATIONAL_GRID)
        assert result.lat == pytest.approx(rad(49.0), abs=1e-15)
        assert result.lon == pytest.approx(rad(-2.0), abs=1e-15)

    @pytest.mark.parametrize('lat, lon', GB_POINTS)
    def test_round_trip_national_grid(self, lat, lon):
        point = LatLon(rad(lat), rad(lon), 12.5)
        result = tm_eas_nor_to_lat_lon(lat_lon_to_tm_eas_nor(point, TM_NATIONAL_GRID),
                                       TM_NATIONAL_GRID)
        assert result.lat == pytest.approx(point.lat, abs=1e-9)
        assert result.lon == pytest.approx(point.lon, abs=1e-9)
        assert result.eh == point.eh

    @pytest.mark.parametrize('projection, lat, lon', [
        (TM_IRISH_NATIONAL_GRID, 53.35, -6.26),
        (TM_IRISH_NATIONAL_GRID, 55.2, -7.5),
        (TM_UTM_ZONE_30, 52.0, -2.0),
        (TM_UTM_ZONE_30, 0.5, -4.5),
    ])
    def test_round_trip_other_projections(self, projection, lat, lon):
        point = LatLon(rad(lat), rad(lon), 0.0)
        result = tm_eas_nor_to_lat_lon(lat_lon_to_tm_eas_nor(point, projection), projection)
        assert result.lat == pytest.approx(point.lat, abs=1e-9)
        assert result.lon == pytest.approx(point.lon, abs=1e-9)

    def test_central_meridian_has_false_easting(self):
        result = lat_lon_to_tm_eas_nor(LatLon(rad(52.0), rad(-3.0), 0.0), TM_UTM_ZONE_30)
        assert result.e == pytest.approx(500000.0)

    def test_arrays(self):
        lats = rad(np.array([p[0] for p in GB_POINTS]))
        lons = rad(np.array([p[1] for p in GB_POINTS]))
        projected = lat_lon_to_tm_eas_nor(LatLon(lats, lons, 0.0), TM_NATIONAL_GRID)
        result = tm_eas_nor_to_lat_lon(projected, TM_NATIONAL_GRID)
        np.testing.assert_allclose(result.lat, lats, atol=1e-9)
        np.testing.assert_allclose(result.lon, lons, atol=1e-9)

    def test_batch_matches_single_points(self):
        points = EasNor(np.array([651409.903, 400000.0, 250000.0]),
                        np.array([313177.270, 1000000.0, 50000.0]), 0.0)
        batch = tm_eas_nor_to_lat_lon(points, TM_NATIONAL_GRID)
        for i in range(3):
            single = tm_eas_nor_to_lat_lon(EasNor(points.e[i], points.n[i], 0.0), TM_NATIONAL_GRID)
            assert batch.lat[i] == pytest.approx(single.lat, abs=1e-14)
            assert batch.lon[i] == pytest.approx(single.lon, abs=1e-14)

    def test_scalar_stays_scalar(self):
        result = tm_eas_nor_to_lat_lon(EasNor(651409.903, 313177.270, 0.0), TM_NATIONAL_GRID)
        assert np.ndim(result.lat) == 0
        assert isinstance(result.lat, float)

    def test_iteration_bound(self, monkeypatch):
        monkeypatch.setattr(geo, 'MAX_ITERATIONS', 1)
        with pytest.raises(ConvergenceError):
            tm_eas_nor_to_lat_lon(EasNor(400000.0, 1000000.0, 0.0), TM_NATIONAL_GRID)
