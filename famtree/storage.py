"""
Whole-structure YAML persistence shared by the tree, credential and session stores.

Every save rewrites the complete document. The new content is written to a
temporary file next to the target and then moved over it with os.replace, so a
crash mid-write leaves the previous file intact.
"""
import logging
import os
import tempfile
from pathlib import Path

import yaml

from .errors import PersistenceError

logger = logging.getLogger(__name__)


def load_document(path):
    """
    Reads a YAML mapping from path.

    Raises PersistenceError if the file is missing, unreadable, not valid YAML,
    or does not hold a mapping at the top level.
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise PersistenceError(f"No such file: {path}")
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError(f"Could not read {path}: {e}")
    except yaml.YAMLError as e:
        raise PersistenceError(f"Could not parse {path}: {e}")
    except RecursionError:
        raise PersistenceError(f"Could not parse {path}: nested too deeply")

    # An empty file loads as None.
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PersistenceError(f"Expected a mapping in {path}, got {type(data).__name__}")
    logger.debug("Loaded %s", path)
    return data


def save_document(path, data):
    """Atomically replaces the content of path with data dumped as YAML."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix='.tmp', dir=path.parent)
    except OSError as e:
        raise PersistenceError(f"Could not write {path}: {e}")

    try:
        try:
            f = os.fdopen(fd, 'w', encoding='utf-8')
        except Exception:
            os.close(fd)
            raise
        with f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        os.replace(temp_path, path)
    except (OSError, yaml.YAMLError) as e:
        raise PersistenceError(f"Could not write {path}: {e}")
    finally:
        # Gone after a successful replace.
        if os.path.exists(temp_path):
            os.unlink(temp_path)
    logger.debug("Saved %s", path)
