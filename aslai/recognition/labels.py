"""
Label file loading.

The label file holds a single line of comma-separated names. Their order
must match the order the classifier was trained with.
"""

import logging
from pathlib import Path
from typing import Tuple, Union

from aslai.core.errors import InitializationError

logger = logging.getLogger(__name__)


def parse_labels(line: str) -> Tuple[str, ...]:
    """Split a comma-separated label line, dropping empty tokens."""
    return tuple(token for token in line.strip().split(",") if token)


def load_labels(path: Union[str, Path]) -> Tuple[str, ...]:
    """Read the LabelSet from the first line of ``path``.

    Raises:
        InitializationError: If the file is missing or unreadable
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            line = f.readline()
    except OSError as e:
        raise InitializationError(f"Cannot read label file {path}: {e}") from e

    labels = parse_labels(line)
    if labels:
        logger.info("Loaded %d labels from %s", len(labels), path)
    else:
        logger.warning("Label file %s contains no labels", path)
    return labels
