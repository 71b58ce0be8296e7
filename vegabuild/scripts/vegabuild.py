import runpy
from logging import DEBUG, StreamHandler
from typing import Any, Dict

from click import Path, argument, echo, group, option, pass_context, style
from click.exceptions import Exit

from vegabuild.constants import logger
from vegabuild.core.exceptions import InvalidInputException
from vegabuild.core.models.visualization import Visualization


def print_error(message: str):
    echo(style(message, fg="red", bold=True), err=True)


def print_success(message: str):
    echo(style(message, fg="green"), err=True)


def find_visualization(
    namespace: Dict[str, Any], name: str | None = None
) -> Visualization:
    """Pick the Visualization a chart script defines."""
    if name is not None:
        found = namespace.get(name)
        if not isinstance(found, Visualization):
            raise InvalidInputException(f"{name} is not a Visualization")
        return found
    candidates = [
        (key, value)
        for key, value in namespace.items()
        if isinstance(value, Visualization) and not key.startswith("_")
    ]
    if not candidates:
        raise InvalidInputException("Script does not define a Visualization")
    if len(candidates) > 1:
        names = ", ".join(key for key, _ in candidates)
        raise InvalidInputException(
            f"Script defines several visualizations ({names}); pick one with --name"
        )
    return candidates[0][1]


@group()
@option("--debug", default=False, is_flag=True, help="Enable debug logging")
@pass_context
def cli(ctx, debug: bool):
    """vegabuild CLI - compile chart scripts into visualization documents."""
    ctx.ensure_object(dict)
    ctx.obj["DEBUG"] = debug
    if debug:
        logger.setLevel(DEBUG)
        logger.addHandler(StreamHandler())


@cli.command("render")
@argument("script", type=Path(exists=True, dir_okay=False))
@option("--pretty/--compact", default=True, help="Indent the output document")
@option(
    "--output", "-o", type=Path(dir_okay=False), default=None, help="Write to a file"
)
@option("--name", default=None, help="Variable holding the visualization")
def render(script: str, pretty: bool, output: str | None, name: str | None):
    """Run a chart script and print the document it builds."""
    try:
        namespace = runpy.run_path(script, run_name="__vegabuild__")
        spec = find_visualization(namespace, name).generate_spec(pretty=pretty)
    except InvalidInputException as e:
        print_error(f"Invalid chart: {e}")
        raise Exit(1)
    if output is None:
        echo(spec)
        return
    with open(output, "w") as f:
        f.write(spec)
    print_success(f"Wrote {output}")


if __name__ == "__main__":
    cli()
