"""Cavern CLI entry point.

Provides subcommands for generating a cave map in the terminal and for running
the generation API server. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()


def _load_version() -> str:
    try:
        with open("VERSION", "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Cavern cave map generator

    Generate a cellular-automaton cave map in the terminal, or run the HTTP
    generation API. Configuration can be provided via CLI flags or environment
    variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                            Bind address for the web server (default: 0.0.0.0)
          PORT                            Port for the web server (default: 5000)
          CAVE_REMOVE_SMALL_REGIONS       Default for small-region pruning (default: 1)
          CAVE_CONNECT_REGIONS            Default for room connection (default: 1)
          CAVE_ENABLE_GENERATION_METRICS  Collect per-phase timings (default: 1)
          CAVE_BORDER_SIZE                Solid padding around the map (default: 5)

        Examples:
          # Print a map for a fixed seed
          python run.py generate --seed moss --width 80 --height 40

          # Random (time-based) seed, JSON output
          python run.py generate --random-seed --json

          # Run the API server on a custom port
          python run.py server --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="Cavern",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Cavern {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the generation API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Serve POST /api/cave/generate and GET /api/cave/defaults",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a cave and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one cave map and print it ('#' wall, '.' floor) or as JSON.",
    )
    gen_parser.add_argument("--width", type=int, default=None, help="Map width in cells (default: 128)")
    gen_parser.add_argument("--height", type=int, default=None, help="Map height in cells (default: 72)")
    gen_parser.add_argument("--fill", dest="random_fill_percent", type=int, default=None, help="Initial wall percentage 0-100")
    gen_parser.add_argument("--seed", default=None, help="Seed text (any string)")
    gen_parser.add_argument("--random-seed", dest="use_random_seed", action="store_true", help="Use a time-based seed")
    gen_parser.add_argument("--smooth", dest="smooth_iterations", type=int, default=None, help="Smoothing passes 0-10")
    gen_parser.add_argument(
        "--keep-small-regions",
        dest="keep_small_regions",
        action="store_true",
        help="Do not prune small wall / floor regions",
    )
    gen_parser.add_argument("--wall-min", dest="wall_region_min_size", type=int, default=None, help="Smallest wall region kept")
    gen_parser.add_argument("--room-min", dest="room_region_min_size", type=int, default=None, help="Smallest floor region kept")
    gen_parser.add_argument("--no-connect", dest="no_connect", action="store_true", help="Skip passage carving")
    gen_parser.add_argument("--border", dest="border_size", type=int, default=None, help="Solid padding (default: 5)")
    gen_parser.add_argument("--json", dest="as_json", action="store_true", help="Emit JSON instead of a text map")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace):
    """Translate ``generate`` flags into a CaveConfig (env overrides first, then flags)."""
    from cavern.caves import CaveConfig, apply_env_overrides

    config = apply_env_overrides(CaveConfig())
    for attr in (
        "width",
        "height",
        "random_fill_percent",
        "seed",
        "smooth_iterations",
        "wall_region_min_size",
        "room_region_min_size",
        "border_size",
    ):
        value = getattr(args, attr, None)
        if value is not None:
            setattr(config, attr, value)
    if getattr(args, "use_random_seed", False):
        config.use_random_seed = True
    if getattr(args, "keep_small_regions", False):
        config.remove_small_regions = False
    if getattr(args, "no_connect", False):
        config.connect_regions = False
    return config


def render_text(grid) -> str:
    from cavern.caves.tiles import SOLID, tile_to_char

    width = len(grid)
    height = len(grid[0]) if width else 0
    lines = []
    # Top row first so the picture matches a y-up map
    for y in range(height - 1, -1, -1):
        row = []
        for x in range(width):
            ch = tile_to_char(grid[x][y])
            if _COLOR_ENABLED:
                color = Fore.WHITE if grid[x][y] == SOLID else Fore.YELLOW
                ch = f"{color}{ch}{Style.RESET_ALL}"
            row.append(ch)
        lines.append("".join(row))
    return "\n".join(lines)


def run_generate(args: argparse.Namespace) -> int:
    from cavern.caves import CaveConfigError, CaveGenerator
    from cavern.utils.tile_compress import grid_to_rows

    try:
        gen = CaveGenerator(build_config(args))
        gen.generate()
    except CaveConfigError as exc:
        prefix = f"{Fore.RED}[ERROR]{Style.RESET_ALL}" if _COLOR_ENABLED else "[ERROR]"
        print(f"{prefix} {exc}", file=sys.stderr)
        return 2
    if getattr(args, "as_json", False):
        print(
            json.dumps(
                {
                    "seed": gen.seed,
                    "width": gen.width,
                    "height": gen.height,
                    "border": gen.config.border_size,
                    "rooms": len(gen.rooms),
                    "grid": grid_to_rows(gen.bordered_grid),
                    "metrics": gen.metrics,
                }
            )
        )
        return 0
    print(render_text(gen.bordered_grid))
    print(f"seed={gen.seed} rooms={len(gen.rooms)} passages={gen.metrics.get('passages_carved', 0)}")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return run_generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from cavern.server import start_server

    title = f"{Fore.CYAN}{Style.BRIGHT}Cavern API{Style.RESET_ALL}" if _COLOR_ENABLED else "Cavern API"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Debug:'):12} {value('YES' if debug else 'NO')}",
        divider,
        "",
    ]
    print("\n".join(lines))

    from cavern.logging_utils import log

    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
