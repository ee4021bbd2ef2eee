import pytest

from grid_editor.geometry import (
    cell_from_point, compute_default_box, find_conflicts, neighbor, region_id_grid, validate_regions,
)


@pytest.mark.parametrize("size,box", [(9, (3, 3)), (4, (2, 2)), (6, (2, 3)), (8, (2, 4)),
                                      (16, (4, 4)), (7, (7, 1)), (1, (1, 1))])
def test_default_box(size, box):
    assert compute_default_box(size) == box


def test_validate_regions():
    validate_regions(None, 4)
    validate_regions([[0] * 2, [0] * 2], 2)
    with pytest.raises(ValueError):
        validate_regions([[0] * 2], 2)
    with pytest.raises(ValueError):
        validate_regions([[0] * 2, [0] * 3], 2)


def test_region_ids_from_boxes():
    ids = region_id_grid(4)
    assert ids[0] == [0, 0, 1, 1]
    assert ids[3] == [2, 2, 3, 3]
    ids6 = region_id_grid(6)
    assert ids6[0] == [0, 0, 0, 1, 1, 1]
    assert ids6[2][0] == 2


def test_custom_regions_win():
    regions = [[5, 5], [6, 6]]
    assert region_id_grid(2, box=(1, 1), regions=regions) == regions


def test_neighbor_clamps_to_edges():
    assert neighbor((0, 0), -1, 0, 9) == (0, 0)
    assert neighbor((8, 8), 0, 1, 9) == (8, 8)
    assert neighbor((4, 4), 1, 0, 9) == (5, 4)


def test_cell_from_point_is_linear():
    rect = (10, 20, 90, 90)
    assert cell_from_point(15, 25, rect, 9) == (0, 0)
    assert cell_from_point(99, 20, rect, 9) == (0, 8)
    assert cell_from_point(100, 110, rect, 9) == (8, 8)
    assert cell_from_point(55, 65, rect, 9) == (4, 4)


def test_cell_from_point_outside_is_none():
    rect = (0, 0, 90, 90)
    assert cell_from_point(-1, 10, rect, 9) is None
    assert cell_from_point(10, 91, rect, 9) is None
    assert cell_from_point(10, 10, (0, 0, 0, 90), 9) is None


def test_find_conflicts():
    values = [
        [1, 0, 0, 1],
        [0, 0, 0, 0],
        [0, 2, 0, 0],
        [0, 0, 0, 2],
    ]
    ids = region_id_grid(4)
    assert find_conflicts(values, ids) == {(0, 0), (0, 3)}
    values[3][0] = 2
    assert find_conflicts(values, ids) == {(0, 0), (0, 3), (2, 1), (3, 0), (3, 3)}
