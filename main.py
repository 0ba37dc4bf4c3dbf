# Main.py
import argparse
import logging
import sys
from pathlib import Path

from PyQt6.QtCore import QCoreApplication

from manifest_toggler.core.constants import (
    APP_NAME,
    APP_VERSION,
    CONFIG_FILE_NAME,
    LOG_DIR_NAME,
    ORG_NAME,
)
from manifest_toggler.utils.logger_utils import logger, reconfigure_logger

# Import services
from manifest_toggler.services import (
    ConfigService,
    LibraryService,
    ManifestService,
    PathService,
    ScannerService,
)

# Import utilities
from manifest_toggler.utils import SystemUtils

# Import view models
from manifest_toggler.viewmodels import GameListViewModel

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_NO_ROOT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="manifest-toggler",
        description="Lock Steam games against updates by making their app manifests read-only.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(CONFIG_FILE_NAME),
        help=f"settings file (default: ./{CONFIG_FILE_NAME})",
    )
    parser.add_argument(
        "--root", help="Steam root to use for this run, without remembering it"
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path(LOG_DIR_NAME),
        help=f"log folder (default: ./{LOG_DIR_NAME})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="show debug logging on the console"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_root = sub.add_parser("root", help="show the active Steam root, or select a new one")
    p_root.add_argument("path", nargs="?", help="Steam root to validate and remember")

    p_list = sub.add_parser("list", help="list installed games")
    p_list.add_argument("--search", default="", help="filter by name or app id")
    p_list.add_argument("--library", default="", help="filter by library path")
    state = p_list.add_mutually_exclusive_group()
    state.add_argument("--locked", dest="locked", action="store_const", const=True)
    state.add_argument("--unlocked", dest="locked", action="store_const", const=False)

    sub.add_parser("libraries", help="list library folders that contain games")

    for name, help_text in (
        ("lock", "make manifests read-only (blocks updates)"),
        ("unlock", "make manifests writable again"),
        ("toggle", "flip the read-only state of manifests"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("targets", nargs="+", metavar="TARGET", help="app id or game name")

    p_open = sub.add_parser("open", help="open the folder holding a game's manifest")
    p_open.add_argument("target", metavar="TARGET", help="app id or game name")

    return parser


def format_game(game) -> str:
    state = "LOCKED" if game.is_read_only else "open  "
    return f"{state}  {game.app_id or '-':>10}  {game.name}  [{game.library_name}]"


def build_view_model(config_path: Path) -> GameListViewModel:
    """Composition root: create and wire all dependencies."""
    library_service = LibraryService()
    manifest_service = ManifestService()
    return GameListViewModel(
        config_service=ConfigService(config_path),
        path_service=PathService(library_service),
        scanner_service=ScannerService(library_service, manifest_service),
        manifest_service=manifest_service,
        system_utils=SystemUtils(),
    )


def _resolve_targets(vm: GameListViewModel, targets: list[str]):
    games, missing = [], []
    for target in targets:
        found = vm.find_games(target)
        if not found:
            missing.append(target)
        games.extend(g for g in found if g not in games)
    return games, missing


def _select_session_root(args, vm: GameListViewModel) -> int:
    """Loads settings and scans the root this run works on."""
    if args.root:
        vm.load_config()
        if vm.select_root(args.root, remember=False):
            return EXIT_OK
        if vm.steam_root is None:
            print(f"Invalid Steam root: {args.root}", file=sys.stderr)
            return EXIT_NO_ROOT
        return EXIT_FAILURES

    if not vm.load_initial_state():
        print("No Steam root found. Select one with: root PATH", file=sys.stderr)
        return EXIT_NO_ROOT
    return EXIT_OK if vm.refresh() else EXIT_FAILURES


def run_command(args, vm: GameListViewModel) -> int:
    if args.command == "root" and args.path:
        vm.load_config()
        if not vm.select_root(args.path):
            if vm.steam_root is None:
                print(f"Invalid Steam root: {args.path}", file=sys.stderr)
                return EXIT_NO_ROOT
            if not vm.config_saved:
                print(f"Could not save settings to {args.config}", file=sys.stderr)
            return EXIT_FAILURES
        print(f"Steam root set to {vm.steam_root} ({len(vm.all_games)} game(s)).")
        return EXIT_OK

    status = _select_session_root(args, vm)
    if status != EXIT_OK:
        return status

    if args.command == "root":
        print(vm.steam_root)
        return EXIT_OK

    if args.command == "list":
        vm.set_filter(args.search, args.library, args.locked)
        for game in vm.visible_games():
            print(format_game(game))
        return EXIT_OK

    if args.command == "libraries":
        for name in vm.library_names():
            print(name)
        return EXIT_OK

    if args.command == "open":
        games = vm.find_games(args.target)
        if not games:
            print(f"No game matches '{args.target}'.", file=sys.stderr)
            return EXIT_FAILURES
        return EXIT_OK if vm.open_folder(games[0]) else EXIT_FAILURES

    # lock / unlock / toggle
    games, missing = _resolve_targets(vm, args.targets)
    for target in missing:
        print(f"No game matches '{target}'.", file=sys.stderr)

    action = {"lock": vm.lock, "unlock": vm.unlock, "toggle": vm.toggle}[args.command]
    failures = action(games)
    for name, error in failures:
        print(f"Failed for {name}: {error}", file=sys.stderr)

    # The batch rescanned, so these lines show the state on disk now
    targeted = {g.manifest_path for g in games}
    for game in vm.all_games:
        if game.manifest_path in targeted:
            print(format_game(game))

    return EXIT_FAILURES if failures or missing else EXIT_OK


def main(argv=None) -> int:
    """The main entry point for the application."""
    args = build_parser().parse_args(argv)

    reconfigure_logger(
        args.log_dir, console_level=logging.DEBUG if args.verbose else logging.WARNING
    )

    # Needed for signal delivery and the global thread pool
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setOrganizationName(ORG_NAME)
    app.setApplicationName(APP_NAME)
    logger.info("Application starting...")

    try:
        vm = build_view_model(args.config)
    except Exception as e:
        logger.critical(f"Failed to initialize core components: {e}", exc_info=True)
        return EXIT_FAILURES

    exit_code = run_command(args, vm)
    logger.info(f"Application exiting with code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
