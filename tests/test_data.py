from pytest import raises

from vegabuild.core.exceptions import InvalidInputException, UndefinedReferenceException
from vegabuild.core.models.data import CsvFormat, TopoJsonFormat, build_format


def test_values_json_string(ctx):
    data = ctx.data("table", values='[{"x": 1}, {"x": 2}]')
    assert data.values() == [{"x": 1}, {"x": 2}]


def test_values_invalid(ctx):
    with raises(InvalidInputException):
        ctx.data("table", values="[{x: 1}")
    with raises(InvalidInputException):
        ctx.data("other", values=12)
    assert ctx.data_sets == []


def test_blank_name(ctx):
    with raises(InvalidInputException):
        ctx.data("  ")


def test_url(ctx):
    data = ctx.data("remote", url="data/unemployment.tsv")
    assert data.url() == "data/unemployment.tsv"
    assert ctx.data("other").file("http://example.com/x.json").url() == (
        "http://example.com/x.json"
    )
    with raises(InvalidInputException):
        ctx.data("broken", url="not a url")


def test_format_parse_helpers(ctx):
    data = ctx.data("table").with_format("csv")
    data.format().number("a", "b").date(["c"])
    assert isinstance(data.format(), CsvFormat)
    assert data.collect_attributes() == {
        "name": "table",
        "format": {
            "type": "csv",
            "parse": {"a": "number", "b": "number", "c": "date"},
        },
    }


def test_format_from_mapping(ctx):
    data = ctx.data("counties", format={"type": "topojson", "feature": "counties"})
    assert isinstance(data.format(), TopoJsonFormat)
    assert data.collect_attributes()["format"] == {
        "type": "topojson",
        "feature": "counties",
    }


def test_format_validation():
    with raises(InvalidInputException):
        build_format("xml")
    with raises(InvalidInputException):
        build_format("csv", feature="counties")
    with raises(InvalidInputException):
        build_format("json", parse={"when": "timestamp"})
    with raises(InvalidInputException):
        build_format("topojson").number("rate")


def test_source(ctx, table):
    derived = ctx.data("derived", source=table)
    assert derived.source() == "table"
    with raises(UndefinedReferenceException):
        ctx.data("orphan", source="tabel")
    with raises(InvalidInputException):
        ctx.data("loop").source("loop")


def test_extra_fields_accumulate(ctx, table):
    stats = ctx.data(
        "stats", source="table", transform=[ctx.transform("stats", value="y")]
    )
    assert "count" in stats.extra_fields()
    derived = ctx.data(
        "derived",
        source="stats",
        transform=ctx.transform("formula", field="double", expr="d.data.y * 2"),
    )
    fields = derived.extra_fields()
    assert fields[:2] == ["data", "index"]
    assert "count" in fields and "double" in fields


def test_transform_fields_resolved_along_chain(ctx):
    fold = ctx.transform("fold", fields=["a", "b"])
    sort = ctx.transform("sort", by="-value")
    data = ctx.data("table", values=[{"a": 1, "b": 2}], transform=[fold, sort])
    resolved_fold, resolved_sort = data.transform()
    assert resolved_fold.fields == ["data.a", "data.b"]
    assert resolved_sort.by == "-value"
    assert fold.fields == ["a", "b"]
    assert data.collect_attributes()["transform"] == [
        {"type": "fold", "fields": ["data.a", "data.b"]},
        {"type": "sort", "by": "-value"},
    ]


def test_transform_requires_transforms(ctx):
    with raises(InvalidInputException):
        ctx.data("table", transform=["fold"])


def test_flat_values(ctx, table):
    assert ctx.data("numbers", values=[12, 23, 47]).is_flat()
    assert not table.is_flat()
    assert not ctx.data("remote", url="data.json").is_flat()
