import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from .errors import PersistenceError, ProjectNotFoundError, ValidationError
from . import storage

CONFIG_FILENAME = 'famtree.yml'


@dataclass
class Settings:
    home: Path
    tree_file: str = 'family_tree.yml'
    credentials_file: str = 'credentials.yml'
    session_file: str = '.session.yml'
    wipe_tree_on_sign_in: bool = True
    track_history: bool = True

    @property
    def tree_path(self):
        return self.home / self.tree_file

    @property
    def credentials_path(self):
        return self.home / self.credentials_file

    @property
    def session_path(self):
        return self.home / self.session_file

    @property
    def config_path(self):
        return self.home / CONFIG_FILENAME

    def to_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != 'home'}


def find_home(start=None):
    """Finds the project directory by searching up from start (default: the current directory)."""
    search_path = Path(start or os.getcwd()).resolve()
    for candidate in [search_path, *search_path.parents]:
        if (candidate / CONFIG_FILENAME).is_file():
            return candidate
    return None


def load_settings(home=None):
    """
    Reads the settings of the project at home, or of the project found above the
    current directory when home is not given.
    """
    if home is not None:
        home = Path(home).resolve()
        if not (home / CONFIG_FILENAME).is_file():
            raise ProjectNotFoundError(f"No {CONFIG_FILENAME} found in '{home}'. Run 'famtree init' first.")
    else:
        home = find_home()
        if home is None:
            raise ProjectNotFoundError(
                f"Must be run from within a family tree project (no {CONFIG_FILENAME} found). Run 'famtree init' first."
            )

    try:
        data = storage.load_document(home / CONFIG_FILENAME)
    except PersistenceError as e:
        raise ValidationError(f"Invalid project settings: {e}")

    settings = Settings(home=home)
    for f in fields(Settings):
        if f.name == 'home' or f.name not in data:
            continue
        value = data[f.name]
        if not isinstance(value, type(getattr(settings, f.name))):
            raise ValidationError(f"Setting '{f.name}' in {home / CONFIG_FILENAME} has the wrong type: {value!r}")
        setattr(settings, f.name, value)
    return settings


def write_settings(settings):
    with open(settings.config_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(settings.to_dict(), f, default_flow_style=False, sort_keys=False)
