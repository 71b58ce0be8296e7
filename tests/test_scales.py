from pytest import raises

from vegabuild.core.enums import RangeLiteral, TimeInterval
from vegabuild.core.exceptions import (
    ArgumentCountException,
    InvalidInputException,
    UndefinedReferenceException,
)
from vegabuild.core.models.scales import DataRef


def test_domain_from_data_field(ctx, table):
    scale = ctx.ordinal_scale("x").domain("table.x")
    assert isinstance(scale.domain(), DataRef)
    assert scale.collect_attributes() == {
        "name": "x",
        "type": "ordinal",
        "domain": {"data": "table", "field": "data.x"},
    }


def test_domain_index(ctx, table):
    assert ctx.linear_scale("a").domain("table").domain().field() == "index"
    assert ctx.linear_scale("b").domain(table).domain().field() == "index"
    ctx.data("numbers", values=[12, 23, 47])
    assert ctx.linear_scale("c").domain("numbers.x").domain().field() == "index"


def test_domain_extra_field(ctx, table):
    ctx.data("stats", source="table", transform=[ctx.transform("stats", value="y")])
    scale = ctx.linear_scale("y").domain("stats.max")
    assert scale.domain().collect_attributes() == {"data": "stats", "field": "max"}


def test_domain_literals(ctx):
    assert ctx.linear_scale("a").domain([0, 100]).domain() == [0, 100]
    assert ctx.ordinal_scale("b").domain(["a", "b", "c"]).domain() == ["a", "b", "c"]


def test_domain_unknown_data(ctx):
    with raises(UndefinedReferenceException):
        ctx.linear_scale("x").domain("tabel.x")
    with raises(InvalidInputException):
        ctx.linear_scale("y").domain(RangeLiteral.COLORS)


def test_multi_field_domain(ctx):
    ctx.data("people", values=[{"born": 1, "died": 2}])
    scale = ctx.time_scale("x").domain(["people.born", "people.died"])
    assert scale.domain().collect_attributes() == {
        "data": "people",
        "field": ["data.born", "data.died"],
    }


def test_range_literals(ctx):
    assert ctx.ordinal_scale("a").range("colors").range() == "category10"
    assert ctx.ordinal_scale("b").range("more_colors").range() == "category20"
    assert ctx.ordinal_scale("c").range("shapes").range() == "shapes"
    assert ctx.linear_scale("d").range("width").range() == "width"
    assert ctx.linear_scale("e").range("height").range() == "height"
    assert ctx.ordinal_scale("f").to_range_literal(RangeLiteral.COLORS).range() == (
        "category10"
    )
    with raises(InvalidInputException):
        ctx.ordinal_scale("g").range("rainbow")
    with raises(InvalidInputException):
        ctx.ordinal_scale("h").to_range_literal("rainbow")


def test_range_from_data(ctx, table):
    scale = ctx.ordinal_scale("x").range("table.y")
    assert scale.range().collect_attributes() == {"data": "table", "field": "data.y"}
    assert ctx.linear_scale("y").range([20, 100]).range() == [20, 100]


def test_bounded_forms(ctx, table):
    scale = ctx.linear_scale("x").domain("table.x", 0, 100)
    assert (scale.domain_min(), scale.domain_max()) == (0, 100)
    assert scale.domain().field() == "data.x"
    scale.range(None, 10, 20)
    assert scale.range() is None
    assert (scale.range_min(), scale.range_max()) == (10, 20)
    with raises(InvalidInputException):
        scale.domain("table.x", 0, None)
    with raises(ArgumentCountException):
        scale.domain("table.x", 0)


def test_failed_bounded_call_sets_nothing(ctx, table):
    scale = ctx.linear_scale("x")
    with raises(UndefinedReferenceException):
        scale.domain("tabel.x", 0, 10)
    assert scale.domain() is None
    assert (scale.domain_min(), scale.domain_max()) == (None, None)
    with raises(InvalidInputException):
        scale.range("width", 0, [1])
    assert (scale.range_min(), scale.range_max()) == (None, None)


def test_bound_from_data(ctx, table):
    scale = ctx.linear_scale("x").domain_min("table.x")
    assert scale.domain_min().collect_attributes() == {
        "data": "table",
        "field": "data.x",
    }
    with raises(InvalidInputException):
        ctx.linear_scale("y").domain_max([1])


def test_nice(ctx):
    assert ctx.linear_scale("a").nicely().nice() is True
    assert ctx.time_scale("b").nicely("years").nice() == TimeInterval.YEAR
    assert ctx.utc_scale("c").nice("month").collect_attributes()["nice"] == "month"
    with raises(InvalidInputException):
        ctx.time_scale("d").nicely()
    with raises(InvalidInputException):
        ctx.time_scale("e").nice("fortnight")
    with raises(InvalidInputException):
        ctx.linear_scale("f").nice("year")
    with raises(InvalidInputException):
        ctx.ordinal_scale("g").nicely()


def test_quantile_and_threshold_are_quantitative(ctx):
    assert ctx.quantile_scale("q").nicely().nice() is True
    assert ctx.threshold_scale("t").zero().is_zero()
    assert ctx.quantile_scale("r").clamp().is_clamp()
    with raises(InvalidInputException):
        ctx.threshold_scale("u").nice("month")


def test_type_gated_properties(ctx):
    ordinal = ctx.ordinal_scale("o").as_points().padding(1.2)
    assert ordinal.is_points() and ordinal.padding() == 1.2
    with raises(InvalidInputException):
        ctx.linear_scale("a").points()
    with raises(InvalidInputException):
        ctx.linear_scale("b").padding(1)
    with raises(InvalidInputException):
        ctx.linear_scale("c").exponent(2)
    assert ctx.pow_scale("d").exponent(2).exponent() == 2
    with raises(InvalidInputException):
        ctx.ordinal_scale("e").zero()
    with raises(InvalidInputException):
        ctx.ordinal_scale("f").clamp()
    assert ctx.time_scale("g").clamp().is_clamp()


def test_flags_serialize(ctx, table):
    scale = (
        ctx.linear_scale("y")
        .range("height")
        .domain("table.y")
        .nicely()
        .zero()
        .reverse()
        .round()
    )
    assert scale.collect_attributes() == {
        "name": "y",
        "type": "linear",
        "domain": {"data": "table", "field": "data.y"},
        "range": "height",
        "reverse": True,
        "round": True,
        "nice": True,
        "zero": True,
    }


def test_invalid_scale_type(ctx):
    with raises(InvalidInputException):
        ctx.scale("bogus", "x")
    assert ctx.scales == []
