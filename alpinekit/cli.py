"""Command-line interface for alpinekit: demo rendering, serving and configuration."""

from __future__ import annotations

import argparse
import os
import sys

from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    """Run the main CLI entry point.

    Parameters
    ----------
    argv : list of str, optional
        Arguments to parse (defaults to ``sys.argv[1:]``).

    Returns
    -------
    int
        Exit code.
    """
    parser = argparse.ArgumentParser(
        prog="alpinekit",
        description="alpinekit demo and configuration tools",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # render command
    render_parser = subparsers.add_parser(
        "render",
        help="Render the demo forms page to HTML",
    )
    render_parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output file path (default: stdout)",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the demo forms application",
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Bind host (uses config default)",
    )
    serve_parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Bind port (uses config default)",
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show or export configuration",
    )
    config_group = config_parser.add_mutually_exclusive_group()
    config_group.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )
    config_group.add_argument(
        "--toml",
        action="store_true",
        help="Export configuration as TOML",
    )
    config_group.add_argument(
        "--env",
        action="store_true",
        help="Export configuration as environment variables",
    )
    config_group.add_argument(
        "--sources",
        action="store_true",
        help="Show configuration file sources",
    )
    config_parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output file path (default: stdout)",
    )

    # init command
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize an alpinekit.toml configuration file",
    )
    init_parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Overwrite existing configuration file",
    )
    init_parser.add_argument(
        "--path",
        "-p",
        type=str,
        default="alpinekit.toml",
        help="Path for configuration file (default: alpinekit.toml)",
    )

    args = parser.parse_args(argv)

    if args.command == "render":
        return handle_render(args)
    if args.command == "serve":
        return handle_serve(args)
    if args.command == "config":
        return handle_config(args)
    if args.command == "init":
        return handle_init(args)
    parser.print_help()
    return 0


def _write_output(output: str, path: str | None, what: str) -> None:
    if path:
        Path(path).write_text(output, encoding="utf-8")
        print(f"{what} written to {path}")
    else:
        print(output)


def handle_render(args: argparse.Namespace) -> int:
    """Handle the render command."""
    from .demo import build_forms_view_model, render_forms_page

    _write_output(render_forms_page(build_forms_view_model()), args.output, "Page")
    return 0


def handle_serve(args: argparse.Namespace) -> int:
    """Handle the serve command.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments.

    Returns
    -------
    int
        Exit code.
    """
    import uvicorn

    from .config import get_settings
    from .demo import create_app

    server = get_settings().server

    # CLI args override config (if provided)
    host = args.host if args.host is not None else server.host
    port = args.port if args.port is not None else server.port

    print(f"Serving the alpinekit demo on http://{host}:{port}/forms")
    try:
        uvicorn.run(create_app(), host=host, port=port, log_level=server.log_level)
    except KeyboardInterrupt:
        print("\nServer stopped.")
    return 0


def handle_config(args: argparse.Namespace) -> int:
    """Handle the config command.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments.

    Returns
    -------
    int
        Exit code.
    """
    from .config import AlpineKitSettings

    if args.sources:
        return show_config_sources()

    settings = AlpineKitSettings()

    if args.toml:
        output = settings.to_toml()
    elif args.env:
        output = settings.to_env()
    else:
        output = settings.show()

    _write_output(output, args.output, "Configuration")
    return 0


def handle_init(args: argparse.Namespace) -> int:
    """Handle the init command.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments.

    Returns
    -------
    int
        Exit code.
    """
    from .config import AlpineKitSettings

    path = Path(args.path)

    if path.exists() and not args.force:
        print(f"Error: {path} already exists. Use --force to overwrite.", file=sys.stderr)
        return 1

    header = """# alpinekit Configuration File
#
# Environment variables can override any setting:
#   ALPINEKIT_SELECT__SEARCH_PLACEHOLDER="Filter..."
#   ALPINEKIT_TOAST__POSITION="bottom-right"
#   ALPINEKIT_TOAST__DEFAULT_DURATION=5000
#   ALPINEKIT_ASSET__ALPINE_VERSION="3.14.1"
#   ALPINEKIT_LOG__LEVEL="DEBUG"
#
# Use nested keys with __ (double underscore) delimiter.

"""
    path.write_text(header + AlpineKitSettings().to_toml(), encoding="utf-8")
    print(f"Created {path}")

    return 0


def show_config_sources() -> int:
    """Show configuration file sources and their status.

    Returns
    -------
    int
        Exit code.
    """
    if sys.platform == "win32":
        user_config = Path(os.environ.get("APPDATA", "~")) / "alpinekit" / "config.toml"
    else:
        user_config = Path("~/.config/alpinekit/config.toml")

    sources: list[tuple[str, Path | None]] = [
        ("Built-in defaults", None),
        ("pyproject.toml [tool.alpinekit]", Path("pyproject.toml")),
        ("./alpinekit.toml", Path("alpinekit.toml")),
        ("User config", user_config.expanduser()),
    ]
    env_config = os.environ.get("ALPINEKIT_CONFIG_FILE")
    if env_config:
        sources.append(("ALPINEKIT_CONFIG_FILE", Path(env_config)))

    print("Configuration Sources (in order of precedence):\n")
    print(f"{'Source':<40} {'Status':<15} {'Path'}")
    print("-" * 80)

    for name, path in sources:
        if path is None:
            status, path_display = "Active", ""
        elif path.exists():
            status, path_display = "Found", str(path)
        else:
            status, path_display = "Not found", str(path)
        print(f"{name:<40} {status:<15} {path_display}")

    env_vars = sorted(k for k in os.environ if k.startswith("ALPINEKIT_"))
    if env_vars:
        shown = ", ".join(env_vars[:3]) + ("..." if len(env_vars) > 3 else "")
        print(f"{'Environment variables':<40} {f'{len(env_vars)} vars':<15} {shown}")
    else:
        print(f"{'Environment variables':<40} {'No vars':<15}")

    print("\nNote: Later sources override earlier ones.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
