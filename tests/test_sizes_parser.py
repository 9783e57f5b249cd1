import pytest

from domain.models import ResizeInstructions
from domain.units import UnitValue
from parsing.errors import ParseError
from parsing.media_condition import All, Condition, Dimension, Feature
from parsing.sizes_parser import Sizes, split_clauses

MULTI = (
    "(min-width: 1536px) 718.5px, (min-width: 1280px) 590px, (min-width: 1024px) 468px, "
    "(min-width: 768px) 704px, (min-width: 640px) 576px, 100vw"
)


def min_width(px):
    return Condition(None, (Feature("min-width", Dimension(px, "px")),))


def test_parses_condition_and_width():
    (query,) = Sizes.parse("(min-width: 680px) 400px")
    assert query.conditions == min_width(680)
    assert query.size == ResizeInstructions(width=UnitValue(400, "px"))
    assert query.is_valid


def test_parses_fallback_clause():
    queries = Sizes.parse("(min-width: 680px) 400px, 100vw")
    assert len(queries) == 2
    assert queries[1].conditions is None
    assert queries[1].size.width == UnitValue(100, "vw")


def test_parses_multiple_clauses_in_order():
    sizes = Sizes(MULTI)
    assert [q.conditions for q in sizes.queries[:-1]] == [min_width(px) for px in (1536, 1280, 1024, 768, 640)]
    assert [str(q.size.width) for q in sizes] == ["718.5px", "590px", "468px", "704px", "576px", "100vw"]
    assert sizes.is_valid
    assert len(sizes) == 6


def test_size_expression_shapes():
    height, cover, width = Sizes("(orientation: portrait) height 50vh, cover 100vw 60vh, width 80vw").queries
    assert height.size == ResizeInstructions(height=UnitValue(50, "vh"))
    assert not height.is_valid
    assert cover.size == ResizeInstructions(width=UnitValue(100, "vw"), height=UnitValue(60, "vh"), fit="cover")
    assert not cover.is_valid
    assert width.size == ResizeInstructions(width=UnitValue(80, "vw"))
    assert not width.is_valid


def test_sizes_is_valid_is_a_conjunction():
    assert Sizes("(min-width: 680px) 400px, 100vw").is_valid
    assert not Sizes("(min-width: 680px) contain 400px 300px, 100vw").is_valid


@pytest.mark.parametrize(
    "sizes",
    [
        "",
        "(min-width: 680px)",
        "400px 300px",
        "cover 400px",
        "height",
        "(min-width: 680px) 40em",
        "screen and (min-width: 680px) 400px",
        "(min-width: 680px) and (max-width: 900px) or (orientation: portrait) 400px",
        "(width >= 600px) 400px",
    ],
)
def test_invalid_sizes_raise(sizes):
    with pytest.raises(ParseError):
        Sizes(sizes)


def test_not_all_and_all_clauses():
    never, always = Sizes("not all 400px, all 500px").queries
    assert never.conditions == All(negated=True)
    assert always.conditions == All()


def test_split_clauses_ignores_nested_commas():
    assert split_clauses("(a, b) 1px, 2px") == ["(a, b) 1px", "2px"]


def test_str_round_trips_width_clauses():
    assert str(Sizes("(min-width: 680px) 400px, 500px")) == "(min-width: 680px) 400px, 500px"
    assert str(Sizes(MULTI)) == MULTI


def test_str_skips_height_clauses():
    sizes = Sizes("(orientation: portrait) height 50vh, (min-width: 900px) 50vw, 100vw")
    assert str(sizes) == "(min-width: 900px) 50vw, 100vw"
    assert repr(sizes).startswith("Sizes(")
