"""Entry point and argument parsing for tanpura.

Subcommands
-----------
play    Load the samples, start audio and open the interactive keyboard.
check   Load the samples and report which pitches are available.
"""

from __future__ import annotations

import argparse
import logging
import sys

from tanpura.host import TanpuraCore
from tanpura.logging_setup import configure_logging
from tanpura.models import Pitch
from tanpura.paths import ASSETS_ENV, default_assets_dir


logger = logging.getLogger(__name__)


# -- shared helpers ----------------------------------------------------------

def _add_engine_args(parser: argparse.ArgumentParser):
    """Add arguments used when creating an engine instance."""
    parser.add_argument("--assets", default=None,
                        help=f"Sample directory (default: ${ASSETS_ENV} or ./Audio)")
    parser.add_argument("--sr", type=int, default=44100, help="Sample rate")
    parser.add_argument("--buf", type=int, default=512, help="Buffer size")
    parser.add_argument("--log-level", default=None,
                        help="Logging level (overrides $LOG_LEVEL)")


def _boot_host(args) -> TanpuraCore:
    """Create and initialize a TanpuraCore from parsed arguments."""
    assets = args.assets or default_assets_dir()
    host = TanpuraCore.from_directory(assets, sample_rate=args.sr, buffer_size=args.buf,
                                      master_volume=getattr(args, "master", 1.0))
    host.initialize()
    return host


# -- subcommand handlers -----------------------------------------------------

def _cmd_play(args) -> int:
    """Run the interactive keyboard."""
    from tanpura.cli import TanpuraCLI

    level = configure_logging(default_level="WARNING", level=args.log_level)
    logger.info("tanpura starting (log level: %s)", logging.getLevelName(level))

    host = _boot_host(args)
    if not host.bank.loaded:
        logger.warning("no samples found in %s", args.assets or default_assets_dir())

    output_device = args.output
    if isinstance(output_device, str) and output_device.isdigit():
        output_device = int(output_device)
    try:
        host.start_audio(output_device)
    except Exception as e:
        logger.warning("audio auto-start failed: %s", e)

    if args.midi is not None:
        try:
            host.open_keyboard_midi(args.midi, latch=not args.hold)
        except Exception as e:
            logger.warning("MIDI keyboard startup failed: %s", e)

    cli = TanpuraCLI(host)
    try:
        cli.cmdloop()
    except KeyboardInterrupt:
        print()
        host.shutdown()
    return 0


def _cmd_check(args) -> int:
    """Decode every sample and print which pitches loaded."""
    configure_logging(default_level="ERROR", level=args.log_level)
    host = _boot_host(args)
    for pitch in Pitch:
        ok = host.bank.get_sample(pitch) is not None
        print(f"  {pitch.value:<3} {pitch.asset_key:<7} {'OK' if ok else 'MISSING'}")
    loaded = len(host.bank.loaded)
    print(f"{loaded}/{len(Pitch)} pitches loaded")
    host.dispose()
    return 0 if loaded else 1


# -- main --------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="tanpura - three-voice sustained keyboard")
    sub = ap.add_subparsers(dest="command")

    # -- play ----------------------------------------------------------------
    sp_play = sub.add_parser("play", help="Open the interactive keyboard")
    _add_engine_args(sp_play)
    sp_play.add_argument("--output", default=None, help="Audio output device")
    sp_play.add_argument("--midi", type=int, default=None,
                         help="MIDI keyboard input port index")
    sp_play.add_argument("--hold", action="store_true",
                         help="Notes sound only while MIDI keys are held")
    sp_play.add_argument("--master", type=float, default=1.0,
                         help="Initial master volume (0.0-1.0)")
    sp_play.set_defaults(func=_cmd_play)

    # -- check ---------------------------------------------------------------
    sp_check = sub.add_parser("check", help="Report which samples load")
    _add_engine_args(sp_check)
    sp_check.set_defaults(func=_cmd_check)

    return ap


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.command is None:
        ap.error("a command is required: play or check")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
