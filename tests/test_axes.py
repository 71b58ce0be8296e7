from pytest import raises

from vegabuild.constants import CONFIG
from vegabuild.core.enums import AxisElement, Layer, Orientation
from vegabuild.core.exceptions import InvalidInputException, UndefinedReferenceException
from vegabuild.core.models.axes import is_valid_format
from vegabuild.core.models.marks import MarkProperty, TextProperties


def test_unresolved_scale(ctx):
    with raises(UndefinedReferenceException):
        ctx.x_axis(scale="x")
    assert ctx.axes == []


def test_scale_object(ctx):
    x = ctx.linear_scale("x")
    assert ctx.x_axis(scale=x).collect_attributes() == {"type": "x", "scale": "x"}
    with raises(InvalidInputException):
        ctx.y_axis(scale=3)


def test_builder_methods(ctx):
    ctx.time_scale("x")
    axis = (
        ctx.x_axis(scale="x")
        .with_ticks(5)
        .with_orient(Orientation.TOP)
        .subdivide_by(3)
        .in_layer(Layer.BACK)
        .with_title("Year", offset=30)
        .grid()
    )
    assert axis.collect_attributes() == {
        "type": "x",
        "scale": "x",
        "orient": "top",
        "ticks": 5,
        "subdivide": 3,
        "layer": "back",
        "grid": True,
        "title": "Year",
        "titleOffset": 30,
    }


def test_orient_agrees_with_type(ctx):
    ctx.linear_scale("x")
    with raises(InvalidInputException):
        ctx.x_axis(scale="x").with_orient("left")
    with raises(InvalidInputException):
        ctx.y_axis(scale="x", orient="bottom")
    assert ctx.y_axis(scale="x", orient="right").orient() == Orientation.RIGHT


def test_tick_properties(ctx):
    ctx.linear_scale("x")
    axis = ctx.x_axis(
        scale="x",
        tick_padding=4,
        tick_size=0,
        tick_size_major=6,
        tick_size_minor=2,
        tick_size_end=0,
        offset=-12,
        values=[1, 2, 3],
    )
    assert axis.collect_attributes() == {
        "type": "x",
        "scale": "x",
        "values": [1, 2, 3],
        "tickPadding": 4,
        "tickSize": 0,
        "tickSizeMajor": 6,
        "tickSizeMinor": 2,
        "tickSizeEnd": 0,
        "offset": -12,
    }
    with raises(InvalidInputException):
        axis.with_ticks(-1)
    with raises(InvalidInputException):
        axis.tick_size("large")
    with raises(InvalidInputException):
        axis.in_layer("middle")


def test_offset_mapping(ctx):
    x = ctx.linear_scale("x")
    axis = ctx.y_axis(scale=x, offset={"scale": x, "value": 4})
    assert axis.offset() == {"scale": "x", "value": 4}


def test_format_specifiers(ctx, monkeypatch):
    assert is_valid_format(",.0f")
    assert is_valid_format(".0%")
    assert is_valid_format("s")
    assert is_valid_format("%Y-%m")
    assert not is_valid_format("abc!!")
    ctx.linear_scale("x")
    axis = ctx.x_axis(scale="x", format=",.2f")
    assert axis.format() == ",.2f"
    with raises(InvalidInputException):
        axis.format("abc!!")
    monkeypatch.setattr(CONFIG.validation, "strict_format_specifiers", False)
    assert axis.format("abc!!").format() == "abc!!"


def test_element_properties(ctx):
    ctx.linear_scale("x")
    axis = (
        ctx.y_axis(scale="x")
        .set_properties("labels", angle=-45, fill="#333")
        .set_properties(AxisElement.AXIS, lambda p: p.stroke("transparent"))
        .set_properties("major_ticks", stroke_width=2)
    )
    assert isinstance(axis.element_properties("labels"), TextProperties)
    assert type(axis.element_properties("axis")) is MarkProperty
    assert axis.collect_attributes()["properties"] == {
        "labels": {"fill": {"value": "#333"}, "angle": {"value": -45}},
        "axis": {"stroke": {"value": "transparent"}},
        "majorTicks": {"strokeWidth": {"value": 2}},
    }
    with raises(InvalidInputException):
        axis.set_properties("gridlines", stroke="red")
    with raises(InvalidInputException):
        axis.set_properties("ticks", angle=45)


def test_axes_need_a_scale_to_compile(ctx):
    x = ctx.linear_scale("x")
    unscaled = ctx.y_axis()
    with raises(InvalidInputException):
        ctx.visualization(scales=[x], axes=[ctx.x_axis(scale="x"), unscaled])
    with raises(InvalidInputException):
        ctx.group_mark(axes=[unscaled])
    vis = ctx.visualization(scales=[x], axes=[unscaled.scale(x)])
    assert vis.to_dict()["axes"] == [{"type": "y", "scale": "x"}]
