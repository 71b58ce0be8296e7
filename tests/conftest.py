from pytest import fixture

from vegabuild import BuildContext


@fixture
def ctx() -> BuildContext:
    return BuildContext()


@fixture
def table(ctx):
    return ctx.data(
        "table",
        values=[
            {"x": 1, "y": 28},
            {"x": 2, "y": 55},
            {"x": 3, "y": 43},
        ],
    )
