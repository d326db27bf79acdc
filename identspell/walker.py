"""Batch checking of files and directory trees."""
import logging
import os
import re
import sys
from typing import Optional

from identspell.config import Config
from identspell.document import Document
from identspell.pipeline import build_pipeline
from identspell.scheduler import CheckMode, Scheduler

logger = logging.getLogger(__name__)


def _display_path(path: str, full_path: bool) -> str:
    if full_path:
        return os.path.abspath(path)
    return os.path.relpath(path)


def _scan_file(path: str, pipeline, config: Config, full_path: bool) -> bool:
    try:
        document = Document.from_file(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Skipping %s: %s", path, e)
        return False

    scheduler = Scheduler.from_config(config, pipeline)
    scheduler.set_mode(document, CheckMode.NORMAL)
    try:
        if not scheduler.maybe_check(document):
            logger.debug("Not checked: %s", path)
            return False
    finally:
        scheduler.dispose(document)

    display = _display_path(path, full_path)
    found = False
    for finding in document.typos():
        found = True
        print(f"{display}:{finding.line}: {finding.kind.value} '{finding.word}' at {finding.start}")
    return found


def check_file(path, kill_on_typo: bool = False, full_path: bool = False,
               pipeline=None, config: Optional[Config] = None) -> bool:
    """Check one file; True when a typo was found."""
    config = config or Config()
    if pipeline is None:
        pipeline = build_pipeline(config)
    if pipeline is None:
        logger.warning("No spell-checking backend available, nothing checked")
        return False

    found = _scan_file(str(path), pipeline, config, full_path)
    if found and kill_on_typo:
        sys.exit(1)
    return found


def check_directory(path, kill_on_typo: bool = False, full_path: bool = False,
                    pipeline=None, config: Optional[Config] = None) -> bool:
    """Check every matching file under PATH; True when any typo was found."""
    config = config or Config()
    if pipeline is None:
        pipeline = build_pipeline(config)
    if pipeline is None:
        logger.warning("No spell-checking backend available, nothing checked")
        return False

    include = re.compile(config.find_file_regexp)
    exclude = re.compile(config.exclude_file_regexp) if config.exclude_file_regexp else None
    excluded_dirs = config.exclude_directories

    found = False
    for root, dirs, files in os.walk(str(path)):
        dirs[:] = sorted(
            d for d in dirs
            if d not in excluded_dirs and not os.path.islink(os.path.join(root, d))
        )
        for name in sorted(files):
            file_path = os.path.join(root, name)
            if not include.search(file_path):
                continue
            if exclude is not None and exclude.search(file_path):
                continue
            found = _scan_file(file_path, pipeline, config, full_path) or found

    if found and kill_on_typo:
        sys.exit(1)
    return found
