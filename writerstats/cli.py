"""Command line entry point: writerstats [COMMAND]"""

from __future__ import annotations

import errno
import fcntl
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from writerstats.config import AppConfig

W = "\033[97m"   # bright white
G = "\033[32m"   # green
Y = "\033[33m"   # yellow
R = "\033[31m"   # red
D = "\033[2m"    # dim
B = "\033[1m"    # bold
N = "\033[0m"    # reset
CLEAR = "\033[2J\033[H"


def _data_path(config: AppConfig) -> Path:
    from writerstats import stats

    return config.data_file or stats.STATS_FILE


def _acquire_tracker_lock(config: AppConfig) -> int | None:
    """Take the exclusive lock held by a running 'track' session.

    Returns the lock fd on success, or None if another process holds it.
    The fd must stay open for as long as the lock is needed.
    """
    lock_file = _data_path(config).with_suffix(".lock")
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(str(lock_file), os.O_CREAT | os.O_RDWR, 0o600)
    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        return fd
    except OSError as e:
        os.close(fd)
        if e.errno in (errno.EAGAIN, errno.EWOULDBLOCK, errno.EACCES):
            return None
        print(f"Lock file error: {e}", file=sys.stderr)
        return None


def _release_tracker_lock(fd: int) -> None:
    fcntl.flock(fd, fcntl.LOCK_UN)
    os.close(fd)


def _refuse_while_tracking(config: AppConfig) -> bool:
    """True (with an error printed) if a tracker would overwrite our changes."""
    fd = _acquire_tracker_lock(config)
    if fd is not None:
        _release_tracker_lock(fd)
        return False
    print(f"{R}writerstats track is running.{N} Stop it first, or it will overwrite this change.",
          file=sys.stderr)
    return True


def _config_command(args: list[str], config: AppConfig) -> int:
    """Handle 'writerstats config' subcommands.

    Usage:
        writerstats config              Show all current settings
        writerstats config show         Show all current settings
        writerstats config set KEY VAL  Change a setting
        writerstats config reset        Reset settings to defaults (keeps stats)
        writerstats config path         Show data file path
    """
    from writerstats.settings import SETTING_KEYS, Settings
    from writerstats.stats import StatsRecord

    subcmd = args[0] if args else "show"

    if subcmd == "path":
        print(str(_data_path(config)))
        return 0

    if subcmd == "reset":
        if _refuse_while_tracking(config):
            return 1
        record = StatsRecord.load(config.data_file)
        record.settings = Settings()
        record.save(config.data_file)
        print(f"{G}✓{N} Settings reset to defaults")
        return 0

    if subcmd == "set":
        if len(args) < 3:
            print(f"{R}Usage:{N} writerstats config set KEY VALUE", file=sys.stderr)
            print(f"\n{W}Available keys:{N}")
            for key, info in SETTING_KEYS.items():
                hint = "  [on/off]" if info["type"] == "bool" else ""
                print(f"  {Y}{key}{N}  {D}{info['description']}{N}{hint}")
            return 1

        key = args[1]
        value = args[2]

        if key not in SETTING_KEYS:
            print(f"{R}Unknown key:{N} {key}", file=sys.stderr)
            print(f"{D}Available keys: {', '.join(SETTING_KEYS.keys())}{N}", file=sys.stderr)
            return 1

        if _refuse_while_tracking(config):
            return 1

        record = StatsRecord.load(config.data_file)
        try:
            record.settings.apply(key, value)
        except ValueError as e:
            print(f"{R}Invalid value:{N} {e}", file=sys.stderr)
            return 1
        record.save(config.data_file)
        print(f"{G}✓{N} Set {W}{key}{N} = {Y}{value}{N}")
        return 0

    if subcmd not in ("show", "list", "get"):
        print(f"{R}Unknown subcommand:{N} {subcmd}", file=sys.stderr)
        print(f"{D}Usage: writerstats config [show|set|reset|path]{N}", file=sys.stderr)
        return 1

    path = _data_path(config)
    if not path.exists():
        print(f"{D}No data file. Using defaults.{N}")
    settings = StatsRecord.load(config.data_file).settings

    print(f"\n{W}{B}Writer Stats Config{N}\n")
    print(f"  {W}daily_goal{N}       {Y}{settings.daily_goal}{N}")
    print(f"  {W}count_pastes{N}     {Y}{'on' if settings.count_pastes else 'off'}{N}")
    print(f"  {W}include_folders{N}  {Y}{settings.include_folders or '(all)'}{N}")
    print(f"  {W}exclude_folders{N}  {Y}{settings.exclude_folders or '(none)'}{N}")
    print()
    print(f"  {D}Data file: {path}{N}")
    print(f"  {D}Use 'writerstats config set KEY VALUE' to change a setting{N}")
    print()
    return 0


def _show_dashboard(config: AppConfig) -> int:
    """Print the writing dashboard."""
    from writerstats.dashboard import render_dashboard
    from writerstats.stats import StatsRecord

    record = StatsRecord.load(config.data_file)
    print()
    print(render_dashboard(record.store, record.settings))
    print()
    return 0


def _show_status(config: AppConfig) -> int:
    from writerstats.aggregate import status_line
    from writerstats.stats import StatsRecord

    record = StatsRecord.load(config.data_file)
    print(status_line(record.store, record.settings))
    return 0


def _reset_stats(config: AppConfig) -> int:
    from writerstats.stats import StatsRecord

    if _refuse_while_tracking(config):
        return 1
    StatsRecord.reset(config.data_file)
    print(f"{G}✓{N} All stats and settings cleared")
    return 0


def _track(args: list[str], config: AppConfig) -> int:
    """Track keyboard edits to one document until interrupted."""
    if "--document" not in args or args.index("--document") + 1 >= len(args):
        print(f"{R}Usage:{N} writerstats track --document PATH [--dashboard]", file=sys.stderr)
        return 1
    document = args[args.index("--document") + 1]
    show_dashboard = "--dashboard" in args

    lock_fd = _acquire_tracker_lock(config)
    if lock_fd is None:
        print(f"{R}Already tracking.{N} Only one 'writerstats track' can run per data file.",
              file=sys.stderr)
        return 1

    from writerstats.keyboard_host import KeyboardEditSource
    from writerstats.tracker import WriterStats

    logger = logging.getLogger(__name__)

    def on_status(text: str) -> None:
        print(f"\r{Y}{text}{N}  ", end="", flush=True)

    def on_dashboard(text: str) -> None:
        print(f"{CLEAR}{text}\n", flush=True)

    try:
        tracker = WriterStats.load(
            config,
            on_status=on_status,
            on_dashboard=on_dashboard if show_dashboard else None,
        )
        source = KeyboardEditSource(tracker, document)

        print(f"{W}{B}Tracking{N} {Y}{document}{N}  {D}(Ctrl+C to stop){N}")
        tracker.refresh_status()
        try:
            source.start()
            source.join()
            return 0
        except KeyboardInterrupt:
            logger.info("Interrupted")
            return 130
        finally:
            source.stop()
            tracker.shutdown()
            print()
    finally:
        _release_tracker_lock(lock_fd)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _print_help() -> None:
    from writerstats import __version__

    print(f"writerstats v{__version__}: daily writing stats, goals and streaks")
    print()
    print("Usage: writerstats [COMMAND] [OPTIONS]")
    print()
    print("Commands:")
    print("  (default)        Show the writing dashboard")
    print("  stats            Show the writing dashboard")
    print("  status           One-line summary: words today and streak")
    print("  config           View and modify settings")
    print("  track            Count words typed or pasted into a document")
    print("                   --document PATH [--dashboard]")
    print("  reset            Delete all stats and settings")
    print()
    print("Options:")
    print("  -V, --version    Show version and exit")
    print("  -h, --help       Show this help and exit")
    print()
    print("Config examples:")
    print("  writerstats config set daily_goal 750")
    print("  writerstats config set count_pastes off")
    print("  writerstats config set exclude_folders Templates,Archive")


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if "--version" in args or "-V" in args:
        from writerstats import __version__
        print(f"writerstats {__version__}")
        return 0

    if "--help" in args or "-h" in args:
        _print_help()
        return 0

    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    config = AppConfig.from_env()
    command = args[0] if args else "stats"
    setup_logging(config.verbose, quiet=command != "track")

    if command in ("stats", "dashboard"):
        return _show_dashboard(config)
    if command == "status":
        return _show_status(config)
    if command == "config":
        return _config_command(args[1:], config)
    if command == "track":
        return _track(args[1:], config)
    if command == "reset":
        return _reset_stats(config)

    print(f"{R}Unknown command:{N} {command}", file=sys.stderr)
    print(f"{D}Run 'writerstats --help' for usage{N}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
