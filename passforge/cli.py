"""CLI for PassForge — generate passwords and manage saved defaults (config show/set/reset)."""

import argparse
import logging
import sys
from dataclasses import replace

from rich import print
from rich.markup import escape
from rich.table import Table

from .generator import (
    MIN_LENGTH,
    MAX_LENGTH,
    InternalInvariantViolation,
    PasswordOptionsError,
    generate,
)
from .config import DEFAULTS, coerce_value, config_path, load_config, request_from_config, save_config

logger = logging.getLogger(__name__)

# argparse dest -> request field
_FLAG_FIELDS = {
    "upper": "include_uppercase",
    "lower": "include_lowercase",
    "numbers": "include_numbers",
    "symbols": "include_symbols",
}


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def cmd_generate(args) -> int:
    cfg = load_config()
    request = request_from_config(cfg)
    if args.length is not None:
        request = replace(request, length=args.length)
    for dest, field in _FLAG_FIELDS.items():
        value = getattr(args, dest)
        if value is not None:
            request = replace(request, **{field: value})

    try:
        for i in range(args.copies):
            pw = generate(request, symbols=cfg["symbols"])
            if args.plain:
                sys.stdout.write(pw + "\n")
            else:
                print(f"[bold green]Password #{i+1}:[/bold green] {escape(pw)}")
    except PasswordOptionsError as e:
        print(f"[red]{escape(str(e))}[/red]")
        return 2
    except InternalInvariantViolation:
        logger.exception("Password generation failed for %r", request)
        return 1
    return 0


def cmd_config_show(args) -> int:
    cfg = load_config()
    table = Table(show_header=True, header_style="bold cyan", title=escape(config_path()))
    table.add_column("Setting")
    table.add_column("Value")
    for key in DEFAULTS:
        table.add_row(key, escape(str(cfg[key])))
    print(table)
    return 0


def cmd_config_set(args) -> int:
    cfg = load_config()
    try:
        value = coerce_value(args.key, args.value)
    except KeyError:
        print(f"[red]Unknown setting: {escape(args.key)}[/red] (choose from {', '.join(DEFAULTS)})")
        return 2
    except ValueError as e:
        print(f"[red]Invalid value for {escape(args.key)}: {escape(str(e))}[/red]")
        return 2
    if args.key == "length" and not MIN_LENGTH <= value <= MAX_LENGTH:
        print(f"[red]length must be between {MIN_LENGTH} and {MAX_LENGTH}[/red]")
        return 2
    cfg[args.key] = value
    save_config(cfg)
    print(f"[green]Saved[/green] {args.key} = {escape(str(value))}")
    return 0


def cmd_config_reset(args) -> int:
    save_config(DEFAULTS.copy())
    print("[green]Settings reset to defaults.[/green]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="passforge")
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default="WARNING",
        help="Logging verbosity",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    gen = sub.add_parser("generate", help="Generate one or more passwords")
    gen.add_argument("--length", type=int, help=f"Password length ({MIN_LENGTH}-{MAX_LENGTH})")
    gen.add_argument("--upper", action=argparse.BooleanOptionalAction, help="Uppercase letters")
    gen.add_argument("--lower", action=argparse.BooleanOptionalAction, help="Lowercase letters")
    gen.add_argument("--numbers", action=argparse.BooleanOptionalAction, help="Digits")
    gen.add_argument("--symbols", action=argparse.BooleanOptionalAction, help="Special characters")
    gen.add_argument("--copies", type=_positive_int, default=1, help="How many passwords to generate")
    gen.add_argument("--plain", action="store_true", help="Print bare passwords, one per line")
    gen.set_defaults(func=cmd_generate)

    c = sub.add_parser("config", help="Show or change saved defaults")
    csub = c.add_subparsers(dest="ccmd", required=True)

    c_show = csub.add_parser("show", help="Show current settings")
    c_show.set_defaults(func=cmd_config_show)

    c_set = csub.add_parser("set", help="Change one setting")
    c_set.add_argument("key", type=str, help="Setting name")
    c_set.add_argument("value", type=str, help="New value")
    c_set.set_defaults(func=cmd_config_set)

    c_reset = csub.add_parser("reset", help="Restore default settings")
    c_reset.set_defaults(func=cmd_config_reset)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
