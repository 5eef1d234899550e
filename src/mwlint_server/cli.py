"""CLI for mwlint.

Provides direct terminal access to the linter without the HTTP or MCP server.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from mwlint_server import __version__
from mwlint_server.config import Config

SEVERITY_STYLES = {
    "error": "bold red",
    "warning": "yellow",
    "info": "dim",
}


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="mwlint-cli",
        description="Lint MediaWiki source code"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    s = subparsers.add_parser("serve", help="Run the HTTP server")
    s.add_argument("--host", help="Bind address (default: from config)")
    s.add_argument("--port", type=int, help="Port (default: from config)")

    # lint command
    lint = subparsers.add_parser("lint", help="Lint a wikitext file")
    lint.add_argument("path", help="Path to the wikitext file, or - for stdin")
    lint.add_argument(
        "--json", action="store_true",
        help="Print the raw JSON result (same shape as the HTTP API)"
    )

    # examples command
    subparsers.add_parser("examples", help="Show rule examples")

    # rules command
    subparsers.add_parser("rules", help="List lint rules")

    # check command
    subparsers.add_parser("check", help="Health check (config, formula checker)")

    args = parser.parse_args()

    if args.command == "serve":
        serve_command(args)
    elif args.command == "lint":
        sys.exit(lint_command(args))
    elif args.command == "examples":
        examples_command()
    elif args.command == "rules":
        rules_command()
    elif args.command == "check":
        check_command()


def _configure_logging(config: Config) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def serve_command(args):
    """Execute the serve command."""
    import uvicorn

    from mwlint_server.core.settings import Settings
    from mwlint_server.web import create_app

    config = Config.load()
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port

    _configure_logging(config)

    app = create_app(Settings.from_config(config))
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


def lint_command(args) -> int:
    """
    Execute the lint command.

    Returns:
        Exit code: 0 if the source was linted, 1 on parse or transformation errors
    """
    from mwlint_server.core.linter import lint_source
    from mwlint_server.core.settings import Settings

    config = Config.load()
    _configure_logging(config)

    if args.path == "-":
        source = sys.stdin.read()
        name = "<stdin>"
    else:
        path = Path(args.path).expanduser()
        if not path.exists():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return 1
        source = path.read_text(encoding="utf-8")
        name = str(path)

    result = lint_source(source, Settings.from_config(config))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return 1 if result.is_error else 0

    console = Console()

    if result.is_error:
        kind = type(result.error).__name__
        console.print(Text(f"{name}: {kind}: {result.error}", style="bold red"))
        for line in getattr(result.error, "context", ()):
            console.print(Text(f"  | {line}", style="dim"))
        return 1

    if not result.lints:
        console.print(f"{name}: no issues found")
        return 0

    table = Table(title=f"{name}: {len(result.lints)} issue(s)")
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Severity")
    table.add_column("Rule")
    table.add_column("Message")

    for lint in result.lints:
        start = lint.position.start
        severity = lint.severity.value
        table.add_row(
            str(start.line),
            str(start.col),
            Text(severity, style=SEVERITY_STYLES.get(severity, "")),
            lint.rule,
            lint.message,
        )

    console.print(table)
    return 0


def examples_command():
    """Execute the examples command."""
    from mwlint_server.core.linter import collect_examples

    console = Console()
    for example in collect_examples():
        label = Text("bad ", style="red") if example.bad else Text("good", style="green")
        console.print(Text.assemble(label, " ", (example.rule, "bold")))
        for line in example.text.rstrip("\n").split("\n"):
            console.print(f"    {line}", markup=False, highlight=False)
        if example.explanation:
            console.print(Text(f"    {example.explanation}", style="dim"))


def rules_command():
    """Execute the rules command."""
    from mwlint_server.core.linter import get_available_rules

    table = Table(title="Lint rules")
    table.add_column("Rule", style="bold")
    table.add_column("Description")
    for name, description in get_available_rules().items():
        table.add_row(name, description)
    Console().print(table)


def check_command():
    """Execute the check command."""
    print(f"mwlint v{__version__}")
    print("=" * 40)

    config = Config.load()
    print("\nConfiguration:")
    print(f"  HTTP: {config.host}:{config.port}")
    print(f"  Formula cache size: {config.tex_cache_size}")
    print(f"  Log level: {config.log_level}")

    print("\nFormula checker:")
    if config.texvccheck_path is None:
        print("  Status: disabled (set TEXVCCHECK_PATH to enable)")
    elif not config.texvccheck_path.exists():
        print(f"  Status: NOT FOUND at {config.texvccheck_path}")
        print("  Formulas will be reported as transformation errors")
    else:
        from mwlint_server.core.texcheck import TexChecker, TexCheckerError

        try:
            result = TexChecker(config.texvccheck_path).check("x^2")
            print(f"  Path: {config.texvccheck_path}")
            print(f"  Status: {'working' if result.is_valid else 'unexpected: ' + result.describe()}")
        except TexCheckerError as e:
            print(f"  Path: {config.texvccheck_path}")
            print("  Status: FAILED")
            print(f"  Error: {e}")

    print("\nEndpoints:")
    print("  - GET  /  and /mwlint/")
    print("  - GET  /examples  and /mwlint/examples")
    print("  - POST /  and /mwlint/")

    print("\n" + "=" * 40)


if __name__ == "__main__":
    main()
