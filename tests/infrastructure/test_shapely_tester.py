import pytest

from domain.geometry.ports import RayCastingTester
from domain.geometry.regions import AreaRegion
from domain.geometry.services import point_in_polygon
from domain.geometry.value_objects import Polygon
from domain.siting.services import auto_place
from domain.siting.value_objects import PlacementRequest
from infrastructure.geometry.shapely_tester import ShapelyPolygonTester


@pytest.mark.parametrize("point", [(20, 80), (80, 20), (70, 70), (150, 50), (39.9, 99)])
def test_interior_points_match_ray_casting(l_shape, point):
    tester = ShapelyPolygonTester()

    assert tester.contains(*point, l_shape) == RayCastingTester().contains(*point, l_shape)


def test_boundary_points_are_outside(square):
    tester = ShapelyPolygonTester()

    assert not tester.contains(0, 50, square)
    assert not tester.contains(100, 50, square)


def test_degenerate_polygon_contains_nothing():
    tester = ShapelyPolygonTester()

    assert not tester.contains(5, 5, Polygon.from_coords([(0, 0), (10, 10)]))


def test_prepared_geometry_is_cached(square, l_shape):
    tester = ShapelyPolygonTester()

    tester.contains(50, 50, square)
    tester.contains(60, 60, square)
    tester.contains(10, 10, l_shape)

    assert len(tester._prepared) == 2


def test_cache_is_bounded(rect):
    tester = ShapelyPolygonTester(cache_size=2)

    for offset in range(5):
        tester.contains(offset + 1, 1, rect(offset, 0, offset + 10, 10))

    assert len(tester._prepared) <= 2


def test_region_uses_injected_tester(square, rect):
    region = AreaRegion(
        area=square, exclusions=[rect(40, 40, 60, 60)], tester=ShapelyPolygonTester()
    )

    assert region.is_placeable(20, 20)
    assert not region.is_placeable(50, 50)
    # On the area boundary: outside with shapely, inside with ray casting
    assert not region.is_placeable(0, 50)


def test_auto_place_with_shapely_tester(square, rect):
    hole = rect(40, 40, 60, 60)
    request = PlacementRequest(
        service_areas=(square,), exclusions=(hole,), scale=1.0, device_range=30.0
    )

    result = auto_place(request, tester=ShapelyPolygonTester())

    assert result.devices
    assert result.report.coverage_percent >= result.report.target_percent
    for device in result.devices:
        assert point_in_polygon(device.position.x, device.position.y, square)
        assert not point_in_polygon(device.position.x, device.position.y, hole)
