"""File writing for the editor state and exported documents."""

import os
import structlog
from pathlib import Path
from typing import Optional

from sectionist.services.exceptions import FileModifiedError
from sectionist.services.file_monitor import FileMonitor

logger = structlog.get_logger()


def atomic_write(
    path: Path,
    content: str,
    file_monitor: Optional[FileMonitor] = None
) -> None:
    """
    Atomically write content to file with temp-file-rename pattern.

    1. Early modification check (before write)
    2. Write to temporary file and fsync
    3. Late modification check (after write, before rename)
    4. Atomic rename to replace original file

    Args:
        path: Target file path (parent directories are created)
        content: Content to write
        file_monitor: Optional FileMonitor for concurrent modification detection

    Raises:
        FileModifiedError: If file was modified during write operation
        OSError: On file I/O errors
    """
    if file_monitor and file_monitor.is_modified(path):
        raise FileModifiedError(
            str(path),
            "File was modified before write (early check)"
        )

    path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory keeps the rename on one filesystem
    temp_path = path.parent / f".{path.name}.tmp.{os.getpid()}"

    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        if file_monitor and file_monitor.is_modified(path):
            raise FileModifiedError(
                str(path),
                "File was modified during write (late check)"
            )

        temp_path.replace(path)

        if file_monitor:
            file_monitor.refresh(path)

        logger.debug(
            "atomic_write_success",
            path=str(path),
            size=len(content)
        )

    except FileModifiedError:
        if temp_path.exists():
            temp_path.unlink()
        raise

    except Exception as e:
        if temp_path.exists():
            temp_path.unlink()
        logger.error(
            "atomic_write_failed",
            path=str(path),
            error=str(e)
        )
        raise


def export_document(path: Path, content: str) -> Path:
    """
    Write a compiled document to disk.

    A trailing newline is added so the file ends like any text file.

    Args:
        path: Output file path (~ is expanded)
        content: Compiled document

    Returns:
        The resolved output path
    """
    target = Path(path).expanduser()
    atomic_write(target, content + "\n")
    logger.info("document_exported", path=str(target), size=len(content))
    return target
