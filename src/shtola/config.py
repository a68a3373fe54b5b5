# src/shtola/config.py
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

FENCE = "---"

DEFAULT_IGNORE_PATTERNS = [
    ".git/",
    ".hg/",
    ".svn/",
    ".DS_Store",
]


@dataclass(frozen=True)
class Config:
    """Run configuration. Replaced, never mutated, while a build is set up."""
    ignores: Tuple[str, ...] = ()
    source: Optional[Path] = None
    destination: Optional[Path] = None
    clean: bool = False
    frontmatter: bool = False
