"""
File and directory orchestration around the text transform.

Per file the order is fixed: read, back up the untouched original, clean,
overwrite. A failure at any step skips that one file and leaves its
siblings alone.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .encoding import UndecodableError, decode_text, encode_text
from .models import BatchResult, FileResult, StageConfig
from .rules import BACKUP_SUFFIX, DEFAULT_EXTENSIONS
from .transform import clean_text_with_report

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def normalize_extensions(values: Union[str, Iterable[str], None]) -> tuple[str, ...]:
    """
    Accept "js,ts", ".js", or a list of either; return lower-cased
    extensions with a leading dot.
    """
    if values is None:
        return DEFAULT_EXTENSIONS
    if isinstance(values, str):
        values = [values]

    out: List[str] = []
    for value in values:
        for part in value.split(","):
            part = part.strip().lower()
            if not part:
                continue
            ext = part if part.startswith(".") else "." + part
            if ext not in out:
                out.append(ext)
    return tuple(out)


def backup_path_for(path: PathLike) -> Path:
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def _failed(path: Path, message: str, **extra) -> FileResult:
    logger.error("%s: %s", path, message)
    return FileResult(path=str(path), success=False, error=message, **extra)


def process_file(
    path: PathLike,
    config: Optional[StageConfig] = None,
    backup: bool = True,
) -> FileResult:
    path = Path(path)
    logger.info("processing file %s", path)

    if not path.is_file():
        return _failed(path, "file does not exist")

    try:
        raw = path.read_bytes()
    except OSError as e:
        return _failed(path, f"read failed: {e}")

    try:
        text, encoding = decode_text(raw)
    except UndecodableError as e:
        return _failed(path, f"not a text file: {e}")

    backup_path = None
    if backup:
        backup_path = backup_path_for(path)
        try:
            backup_path.write_bytes(raw)
        except OSError as e:
            return _failed(path, f"backup to {backup_path} failed: {e}", encoding=encoding)
        logger.info("backed up %s to %s", path, backup_path)

    cleaned, report = clean_text_with_report(text, config)

    try:
        path.write_bytes(encode_text(cleaned, encoding))
    except (OSError, UnicodeEncodeError) as e:
        return _failed(
            path,
            f"write failed: {e}",
            backup_path=str(backup_path) if backup_path else None,
            encoding=encoding,
        )

    logger.info(
        "cleaned %s: %.2f KB -> %.2f KB, saved %.2f KB (%.2f%%)",
        path,
        report.original_size / 1024,
        report.cleaned_size / 1024,
        report.saved_bytes / 1024,
        report.saved_percent,
    )
    return FileResult(
        path=str(path),
        success=True,
        backup_path=str(backup_path) if backup_path else None,
        encoding=encoding,
        report=report,
    )


def _allowed_files(base: str, names: Sequence[str], extensions: Sequence[str]) -> List[Path]:
    found: List[Path] = []
    for name in sorted(names):
        full = Path(base) / name
        if full.suffix.lower() in extensions and full.is_file():
            found.append(full)
    return found


def process_directory(
    path: PathLike,
    config: Optional[StageConfig] = None,
    extensions: Union[str, Iterable[str], None] = None,
    backup: bool = True,
    workers: int = 1,
) -> BatchResult:
    """
    Clean allowed files under `path`, deepest directories first.

    Each directory logs its own count, which includes its subdirectories.
    Directories that cannot be listed are logged and count as zero.
    """
    path = Path(path)
    exts = normalize_extensions(extensions)
    logger.info("processing directory %s", path)

    result = BatchResult()
    if not path.is_dir():
        logger.error("cannot read directory %s", path)
        return result

    def onerror(err: OSError) -> None:
        logger.error("cannot read directory %s: %s", err.filename, err.strerror)

    def clean(f: Path) -> FileResult:
        return process_file(f, config, backup)

    # (processed, success) per directory, subdirectories included
    counts: Dict[str, Tuple[int, int]] = {}
    pool = ThreadPoolExecutor(max_workers=workers) if workers > 1 else None
    try:
        for base, dirs, names in os.walk(path, topdown=False, onerror=onerror):
            files = _allowed_files(base, names, exts)
            # One task per file keeps read, backup and write of a path together.
            results = pool.map(clean, files) if pool else map(clean, files)

            processed = success = 0
            for file_result in results:
                result.add(file_result)
                processed += 1
                success += file_result.success
            for d in dirs:
                sub_processed, sub_success = counts.pop(os.path.join(base, d), (0, 0))
                processed += sub_processed
                success += sub_success
            counts[base] = (processed, success)
            logger.info("directory done: %s (%d/%d files)", base, success, processed)
    finally:
        if pool:
            pool.shutdown()

    return result


def process_paths(
    paths: Iterable[PathLike],
    config: Optional[StageConfig] = None,
    extensions: Union[str, Iterable[str], None] = None,
    backup: bool = True,
    workers: int = 1,
) -> BatchResult:
    """
    Clean every target. A file target is always considered, whatever its
    extension; directory targets use the allow-list.
    """
    total = BatchResult()
    for target in paths:
        target = Path(target)
        if target.is_file():
            total.add(process_file(target, config, backup))
        elif target.is_dir():
            total.merge(process_directory(target, config, extensions, backup, workers))
        else:
            logger.error("path does not exist: %s", target)

    logger.info("all done: %d/%d files cleaned", total.success, total.processed)
    return total
