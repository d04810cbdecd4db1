"""Interest catalogue loading with caching."""
import json
import logging
from pathlib import Path
from typing import Optional

from src.models.interest import InterestCatalogue, InterestOption
from src.utils.config import get_interests_file

logger = logging.getLogger(__name__)

# Cache
_catalogue_cache: Optional[InterestCatalogue] = None


def _clear_cache():
    """Drop the cached catalogue so the next call reloads the file."""
    global _catalogue_cache
    _catalogue_cache = None


def load_catalogue(file_path: str, revision: Optional[str] = None) -> InterestCatalogue:
    """
    Load one revision of the interest catalogue from a JSON file.

    Args:
        file_path: Catalogue file ({"active": name, "revisions": {name: [{value, label}]}})
        revision: Revision to load; defaults to the file's "active" entry

    Returns:
        InterestCatalogue

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file or the requested revision is malformed
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Interest catalogue not found: {file_path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed interest catalogue {file_path}: {e.msg}") from e

    revisions = data.get("revisions", {})
    name = revision or data.get("active")
    if not name or name not in revisions:
        raise ValueError(f"Unknown interest catalogue revision: {name}")

    try:
        options = [
            InterestOption(value=entry["value"], label=entry["label"])
            for entry in revisions[name]
        ]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed entry in interest catalogue revision {name}: {e}") from e
    return InterestCatalogue(revision=name, options=options)


def get_active_catalogue() -> InterestCatalogue:
    """Active catalogue from the configured file, cached after the first load."""
    global _catalogue_cache

    if _catalogue_cache is not None:
        return _catalogue_cache

    catalogue = load_catalogue(get_interests_file())
    logger.info(f"Loaded interest catalogue '{catalogue.revision}' ({len(catalogue.options)} tags)")

    _catalogue_cache = catalogue
    return catalogue
