# src/shtola/core/writer.py
import logging
import shutil
from pathlib import Path

from shtola.models import IR

logger = logging.getLogger(__name__)


def clean_dir(dest: Path) -> None:
    """Deletes `dest` recursively if present and recreates it empty."""
    if dest.exists():
        logger.info("Cleaning %s", dest)
        shutil.rmtree(dest)
    dest.mkdir(parents=True)


def write_dir(ir: IR, dest: Path) -> int:
    """
    Writes every entry of the IR's store under `dest`, creating parent
    directories as needed. Files already written stay if a later one fails.
    """
    count = 0
    for rel_path, record in ir.files.items():
        dest_path = dest / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        dest_path.write_bytes(record.content)
        logger.debug("Wrote %s (%d bytes)", rel_path, len(record.content))
        count += 1
    return count
