"""Entry point for identspell.

Usage:
    identspell src/ README.md              # report typos
    identspell --kill-on-typo src/         # exit 1 if any typo is found (CI)
    identspell --watch src/app.py          # re-check files when saved
"""
import os
import sys
import time
import signal
import logging
import argparse


def setup_logging(debug: bool = False):
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def run_watch(paths, config, pipeline):
    """Re-check PATHS on every save until interrupted."""
    from identspell.daemon import Watcher
    from identspell.scheduler import Scheduler

    logger = logging.getLogger(__name__)
    files = []
    for path in paths:
        if os.path.isdir(path):
            logger.warning("--watch takes files, ignoring directory %s", path)
        else:
            files.append(path)

    watcher = Watcher(files, Scheduler.from_config(config, pipeline),
                      interval_ms=config.watch_interval_ms)
    watcher.start()
    try:
        while watcher.running:
            time.sleep(0.2)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()


def run_check(paths, config, pipeline, kill_on_typo: bool, full_path: bool) -> bool:
    from identspell.walker import check_directory, check_file

    if pipeline is None:
        return False
    found = False
    for path in paths:
        if os.path.isdir(path):
            found = check_directory(path, full_path=full_path,
                                    pipeline=pipeline, config=config) or found
        else:
            found = check_file(path, full_path=full_path,
                               pipeline=pipeline, config=config) or found
    if found and kill_on_typo:
        sys.exit(1)
    return found


def main(argv=None):
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    parser = argparse.ArgumentParser(
        description="Spell-check comments, strings and identifiers in source and text files")
    parser.add_argument("paths", nargs="+", help="Files or directories to check")
    parser.add_argument("--kill-on-typo", action="store_true",
                        help="Exit with status 1 when a typo is found")
    parser.add_argument("--full-path", action="store_true",
                        help="Report absolute paths")
    parser.add_argument("--backend", choices=("aspell", "hunspell", "pyspellchecker"),
                        help="Spell-checking backend (default from config)")
    parser.add_argument("--lang", help="Aspell language or hunspell dictionary")
    parser.add_argument("--watch", action="store_true",
                        help="Keep running and re-check files when they are saved")
    parser.add_argument("--debug", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    from identspell.config import Config
    from identspell.pipeline import build_pipeline

    config = Config()
    if args.backend:
        config.override("backend", args.backend)
    if args.lang:
        key = "hunspell_dictionary" if config.backend == "hunspell" else "aspell_language"
        config.override(key, args.lang)
    setup_logging(args.debug or config.debug_logging)

    pipeline = build_pipeline(config)
    if pipeline is None:
        logging.getLogger(__name__).warning(
            "Backend %r unavailable, no typos will be reported", config.backend)

    if args.watch:
        if args.kill_on_typo:
            parser.error("--kill-on-typo cannot be combined with --watch")
        run_watch(args.paths, config, pipeline)
        return

    run_check(args.paths, config, pipeline, args.kill_on_typo, args.full_path)


if __name__ == "__main__":
    main()
