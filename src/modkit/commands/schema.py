"""Schema commands -- merge GraphQL SDL fragments from the command line.

Provides the ``modkit schema`` sub-command group. ``merge`` runs the same
composition the server performs at startup, which makes it handy for
checking what the engine will actually receive.
"""

from __future__ import annotations

import typer

from modkit.exceptions import ModkitError
from modkit.output import debug, error, print_data

schema_app = typer.Typer(no_args_is_help=True)


@schema_app.command("merge")
def schema_merge(
    sources: list[str] = typer.Argument(
        help="SDL files, directories, http(s) URLs, or inline SDL."
    ),
) -> None:
    """Merge type definitions and print the resulting SDL.

    Example::

        modkit schema merge schema/ extra.graphql
        modkit schema merge "type Query { a: Int }" "type Query { b: Int }"
    """
    from modkit.schema import load_type_definitions, merge_type_definitions

    try:
        fragments = load_type_definitions(sources)
        debug(f"Loaded {len(fragments)} fragment(s)")
        merged = merge_type_definitions(fragments)
    except ModkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_data(merged, "graphql")
