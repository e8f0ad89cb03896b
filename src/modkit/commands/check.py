"""Check command -- run the full startup sequence without a transport.

``modkit check`` loads the configuration, initialises every service and
module, fires the start hooks, composes the schema, and shuts down again.
It exits non-zero with the original error message if any step fails, which
makes it suitable as a CI smoke test for a server's configuration.
"""

from __future__ import annotations

import asyncio

import typer

from modkit.exceptions import ModkitError
from modkit.output import error, print_data, success


def check_command(
    paths: list[str] = typer.Argument(help="Config files or directories."),
    print_schema: bool = typer.Option(
        False, "--print-schema", help="Print the composed schema to stdout."
    ),
) -> None:
    """Start the server from PATHS, compose its schema, and shut it down."""
    from modkit.server import Server

    async def _run() -> tuple[Server, str]:
        server = Server()
        try:
            await server.start(paths)
            return server, await server.build_schema()
        finally:
            await server.shutdown()

    try:
        server, schema = asyncio.run(_run())
    except ModkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(
        f"{len(server.services)} service(s) and {len(server.modules)} module(s) initialized"
    )
    if print_schema:
        print_data(schema, "graphql")
