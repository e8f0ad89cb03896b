"""Config commands -- inspect the effective server configuration.

Provides the ``modkit config`` sub-command group. ``show`` merges the
defaults with the given files and directories exactly as
:meth:`~modkit.server.Server.combine_configurations` does, validates the
``core`` section, and prints the resulting tree as JSON.
"""

from __future__ import annotations

from typing import Optional

import typer

from modkit.exceptions import ModkitError
from modkit.output import error, info, print_json

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    paths: list[str] = typer.Argument(help="Config files or directories."),
    env: Optional[str] = typer.Option(
        None, "--env", "-e", help="Environment (default: MODKIT_ENV or development)."
    ),
) -> None:
    """Show the merged configuration.

    Example::

        modkit config show config/
        modkit config show config/ --env production
    """
    from modkit.config import default_config, get_environment, load_configs, resolve_core_settings
    from modkit.merge import merge

    try:
        tree = merge(default_config(), load_configs(paths, environment=env))
        resolve_core_settings(tree)
    except ModkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Environment: {get_environment(env)}")
    print_json(tree)
