"""Output file naming and multi-document export."""

import re
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from .models.results import ConversionResult

MAX_FILENAME_LENGTH = 50
COMBINED_SEPARATOR = "\n\n---\n\n"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def safe_filename(title: str) -> str:
    """
    Derive a file stem from a title.

    Every character outside ``[A-Za-z0-9]`` becomes ``_``; the result is
    lowercased and cut to 50 characters.

    >>> safe_filename("Breaking News! 100% Real?")
    'breaking_news__100__real_'
    """
    return _UNSAFE_CHARS.sub("_", title).lower()[:MAX_FILENAME_LENGTH]


def unique_markdown_path(directory: Path, result: ConversionResult, taken: set[Path]) -> Path:
    """
    Pick a path for a result that collides with neither ``taken`` nor an
    existing file, suffixing the stem with ``_2``, ``_3``, ... as needed.

    The chosen path is added to ``taken``.
    """
    stem = safe_filename(result.title)
    path = directory / f"{stem}.md"
    counter = 2
    while path in taken or path.exists():
        path = directory / f"{stem}_{counter}.md"
        counter += 1
    taken.add(path)
    return path


def combine_markdown(results: Iterable[ConversionResult]) -> str:
    """Concatenate documents, separated by horizontal rules, in the order given."""
    return COMBINED_SEPARATOR.join(result.markdown for result in results)


def combined_filename(now: Optional[float] = None) -> str:
    """File name for a combined export, stamped with epoch milliseconds."""
    epoch_ms = int((time.time() if now is None else now) * 1000)
    return f"combined-links-{epoch_ms}.md"
