# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # run from anywhere: config.py sits next to this file

from utils.crashlog import setup_crashlog, log_exception, log_dir

import argparse
import logging, traceback
from logging.handlers import RotatingFileHandler
from config import AppConfig, RenderConfig, ReductionConfig
from midi.parser import load_midi
from notes.reduction import midi_duration, midi_to_tones

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def _init_logging(level: str = "INFO"):
    if logging.getLogger().handlers:
        return

    logging.basicConfig(level=level, format=LOG_FORMAT, encoding="utf-8")
    try:
        fh = RotatingFileHandler(os.path.join(log_dir(), "app.log"),
                                 maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(fh)
    except OSError:
        logging.warning("File logging disabled, console only", exc_info=True)

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Show the notes of a MIDI file as tone bars.")
    ap.add_argument('path', help="Standard MIDI file (.mid)")
    ap.add_argument('--tick-width', type=float, default=1.0, help="pixels per tick")
    ap.add_argument('--row-height', type=float, default=16.0, help="pixels per pitch row")
    ap.add_argument('--tps', type=float, default=480.0, help="playhead speed in ticks per second")
    ap.add_argument('--font', default=None, help="TTF font for pitch labels")
    ap.add_argument('--emission-order', action='store_true',
                    help="keep tones in note-off order instead of sorting by start")
    ap.add_argument('--dump', action='store_true', help="print tones and exit, no window")
    ap.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return ap

def dump_tones(cfg: AppConfig, song, out=None):
    if out is None:
        out = sys.stdout
    tones = midi_to_tones(song, cfg.reduce)
    for t in tones:
        print(f"{t.name:>5} {t.pitch:>3} {t.start_time:>9} {t.end_time:>9} "
              f"{t.attack_velocity:>3} {t.release_velocity:>3}", file=out)
    print(f"# {len(tones)} tones, duration {midi_duration(song)} ticks", file=out)

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _init_logging(args.log_level)
    setup_crashlog()

    cfg = AppConfig(
        render=RenderConfig(tick_width=args.tick_width, row_height=args.row_height,
                            ticks_per_second=args.tps),
        reduce=ReductionConfig(sort_by_start=not args.emission_order),
    )

    try:
        song = load_midi(args.path)
    except Exception as e:
        path = log_exception("load_midi", e)
        logging.error("Failed to load %s: %s (details in %s)", args.path, e, path)
        return 1

    if args.dump:
        dump_tones(cfg, song)
        return 0

    from app import App
    App(cfg, song, font_path=args.font).run()
    return 0

if __name__ == '__main__':
    try:
        sys.exit(main())
    except Exception as e:
        try:
            log_exception("Top-level exception", e)
        except OSError:
            pass
        logging.error("Unhandled exception: %s", e, exc_info=True)
        print("Something went wrong, see app.log and error-*.txt in the logs/ folder")
        traceback.print_exc()
        sys.exit(1)
