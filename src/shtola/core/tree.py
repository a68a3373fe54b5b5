# src/shtola/core/tree.py
from typing import Dict, List

from shtola.models import FileStore


def _format_size(size: int) -> str:
    for unit in ("B", "KiB", "MiB"):
        if size < 1024 or unit == "MiB":
            return f"{size} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024


def _nest(files: FileStore) -> Dict:
    """Folds store keys into nested dicts; leaves hold the content size."""
    root: Dict = {}
    for path, record in files.items():
        *dirs, name = path.split("/")
        level = root
        for part in dirs:
            level = level.setdefault(part, {})
        level[name] = len(record.content)
    return root


def render_tree(files: FileStore, root_name: str) -> str:
    """
    Renders the files a build will write as a text tree, directories first,
    each file annotated with its content size.
    """
    lines: List[str] = [f"{root_name}/"]

    def walk(node: Dict, prefix: str) -> None:
        dirs = sorted(k for k, v in node.items() if isinstance(v, dict))
        names = sorted(k for k, v in node.items() if not isinstance(v, dict))
        entries = dirs + names
        for i, name in enumerate(entries):
            last = i == len(entries) - 1
            branch = "└── " if last else "├── "
            child = node[name]
            if isinstance(child, dict):
                lines.append(f"{prefix}{branch}{name}/")
                walk(child, prefix + ("    " if last else "│   "))
            else:
                lines.append(f"{prefix}{branch}{name} ({_format_size(child)})")

    walk(_nest(files), "")
    return "\n".join(lines) + "\n"
