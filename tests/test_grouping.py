from domain.mapping import group_by_width
from utils.grouping import group_by, permute
from tests.factories import make_metadata


def test_group_by_keeps_first_occurrence_order():
    groups = group_by([3, 1, 4, 1, 5, 9, 2, 6], lambda n: n % 2)
    assert list(groups) == [1, 0]
    assert groups[1] == [3, 1, 1, 5, 9]
    assert groups[0] == [4, 2, 6]


def test_permute():
    assert permute([["a", "b"], ["c"]]) == [["a", "c"], ["b", "c"]]
    assert permute([["a", "b"], ["c", "d"]]) == [["a", "c"], ["a", "d"], ["b", "c"], ["b", "d"]]
    assert permute([]) == [[]]


def test_group_by_width_widest_first():
    groups = group_by_width(make_metadata([400, 1200, 800], formats=("webp", "jpeg")))
    assert [[(a.width, a.format) for a in g] for g in groups] == [
        [(1200, "webp"), (1200, "jpeg")],
        [(800, "webp"), (800, "jpeg")],
        [(400, "webp"), (400, "jpeg")],
    ]
    assert group_by_width({}) == []
