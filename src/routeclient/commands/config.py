"""Config commands -- view and modify global configuration.

Provides the ``routeclient config`` sub-command group for reading,
updating, and resetting the user's global configuration file
(:class:`~routeclient.models.GlobalConfig`). Settings are persisted in the
routeclient config directory and supply the lowest-precedence generator
defaults (routes root, terminal markers, formatting).
"""

from __future__ import annotations

import typer

from routeclient.output import get_output, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Prints the config file path on stderr and the full global configuration
    as JSON on stdout.

    Example::

        routeclient config show
    """
    from routeclient.config import global_config_path, load_global_config

    config = load_global_config()
    info(f"Config file: {global_config_path()}")
    get_output().print_json(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'generator.format.indent_width')."
    ),
    value: str = typer.Argument(help="Value to set (parsed as JSON when possible)."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The updated config is validated
    against :class:`~routeclient.models.GlobalConfig` before saving.

    Example::

        routeclient config set generator.routes_root app/routes
        routeclient config set generator.format.indent_width 2
        routeclient config set generator.terminal_markers '["+server.ts"]'
    """
    from routeclient.config import load_global_config, save_global_config, set_config_value

    config = set_config_value(load_global_config(), key, value)
    save_global_config(config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset() -> None:
    """Reset configuration to defaults by removing the global config file.

    Example::

        routeclient config reset
    """
    from routeclient.config import reset_global_config

    if reset_global_config():
        success("Configuration reset to defaults.")
    else:
        info("Configuration already at defaults.")
