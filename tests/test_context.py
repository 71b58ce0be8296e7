from pytest import raises

from vegabuild import BuildContext
from vegabuild.core.enums import EntityKind, MarkType, ScaleType
from vegabuild.core.exceptions import (
    DuplicateNameException,
    InvalidInputException,
    UndefinedReferenceException,
)
from vegabuild.core.models.marks import GroupMark, Mark


def test_data_names_are_unique(ctx):
    ctx.data("table")
    with raises(DuplicateNameException) as e:
        ctx.data("table")
    assert e.value.kind == EntityKind.DATA
    assert e.value.name == "table"
    assert ctx.names(EntityKind.DATA) == ["table"]


def test_scale_names_are_unique(ctx):
    ctx.linear_scale("x")
    with raises(DuplicateNameException):
        ctx.ordinal_scale("x")
    assert len(ctx.scales) == 1


def test_mark_names_are_unique(ctx):
    ctx.rect_mark(name="bars")
    with raises(DuplicateNameException):
        ctx.text_mark(name="bars")


def test_kinds_have_separate_namespaces(ctx):
    ctx.data("x")
    ctx.linear_scale("x")
    assert ctx.find_by_name(EntityKind.DATA, "x") is not ctx.find_by_name(
        EntityKind.SCALE, "x"
    )


def test_register_rejects_duplicates(ctx):
    first = ctx.data("table")
    ctx.data_sets.append(first)
    assert ctx.is_duplicate_name(EntityKind.DATA, "table")
    ctx.data_sets.pop()
    assert not ctx.is_duplicate_name(EntityKind.DATA, "table")


def test_require_suggests_close_names(ctx):
    ctx.data("table")
    ctx.data("tables2")
    with raises(UndefinedReferenceException) as e:
        ctx.require(EntityKind.DATA, "tabel")
    assert "table" in e.value.suggestions
    assert e.value.kind == EntityKind.DATA


def test_contexts_are_isolated():
    first = BuildContext()
    second = BuildContext()
    first.data("table")
    second.data("table")
    assert second.find_by_name(EntityKind.DATA, "table") is not None
    assert first.find_by_name(EntityKind.DATA, "table") is not second.find_by_name(
        EntityKind.DATA, "table"
    )


def test_scale_factories(ctx):
    factories = {
        ScaleType.LINEAR: ctx.linear_scale,
        ScaleType.LOG: ctx.log_scale,
        ScaleType.POW: ctx.pow_scale,
        ScaleType.SQRT: ctx.sqrt_scale,
        ScaleType.QUANTILE: ctx.quantile_scale,
        ScaleType.QUANTIZE: ctx.quantize_scale,
        ScaleType.THRESHOLD: ctx.threshold_scale,
        ScaleType.ORDINAL: ctx.ordinal_scale,
        ScaleType.TIME: ctx.time_scale,
        ScaleType.UTC: ctx.utc_scale,
    }
    for scale_type, factory in factories.items():
        assert factory(scale_type.value).scale_type == scale_type


def test_mark_factories(ctx):
    assert isinstance(ctx.mark("group"), GroupMark)
    assert isinstance(ctx.group_mark(), GroupMark)
    rect = ctx.mark(MarkType.RECT)
    assert isinstance(rect, Mark) and not isinstance(rect, GroupMark)
    assert ctx.arc_mark().mark_type == MarkType.ARC
    assert len(ctx.marks) == 4
    with raises(InvalidInputException):
        ctx.mark("blob")
    with raises(InvalidInputException):
        Mark(ctx, "group")
    assert len(ctx.marks) == 4


def test_transform_factory_registers(ctx):
    transform = ctx.transform("filter", test="d.data.x > 1")
    assert ctx.transforms == [transform]
    assert transform.name() is None


def test_axes_are_registered(ctx):
    ctx.linear_scale("x")
    axis = ctx.x_axis(scale="x")
    assert ctx.axes == [axis]


def test_required_names_and_types(ctx, table):
    with raises(InvalidInputException):
        ctx.data(None)
    with raises(InvalidInputException):
        table.name(None)
    assert table.name() == "table"
    with raises(InvalidInputException):
        ctx.scale(None, "x", nice=True)
    with raises(InvalidInputException):
        ctx.scale("linear", None)
    with raises(InvalidInputException):
        ctx.mark(None).enter(x=1)
    with raises(InvalidInputException):
        ctx.axis(None)
    assert ctx.names(EntityKind.DATA) == ["table"]
    assert ctx.scales == [] and ctx.marks == [] and ctx.axes == []
