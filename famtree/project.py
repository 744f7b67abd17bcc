import json
import logging
from pathlib import Path

from .config import Settings, load_settings, write_settings
from .credentials import CredentialStore
from .history import TreeHistory
from .session import Session
from .tree import FamilyTreeStore

logger = logging.getLogger(__name__)

GITIGNORE_TEMPLATE = Path(__file__).parent / "resources" / "gitignore_template"


class Project:
    """The stores of one family tree project, opened together and passed to whatever needs them."""

    def __init__(self, settings, tree, credentials, session, history=None):
        self.settings = settings
        self.tree = tree
        self.credentials = credentials
        self.session = session
        self.history = history

    @classmethod
    def open(cls, home=None):
        settings = load_settings(home)
        history = TreeHistory.find(settings.home) if settings.track_history else None
        tree = FamilyTreeStore.open(settings.tree_path, history=history)
        credentials = CredentialStore.open(settings.credentials_path)
        session = Session.open(
            credentials,
            tree,
            settings.session_path,
            wipe_tree_on_sign_in=settings.wipe_tree_on_sign_in,
        )
        return cls(settings, tree, credentials, session, history=history)


def initialize_project(root_path, track_history=True, wipe_tree_on_sign_in=True):
    """Creates a new family tree project at root_path and returns its settings."""
    settings = Settings(
        home=Path(root_path).resolve(),
        track_history=track_history,
        wipe_tree_on_sign_in=wipe_tree_on_sign_in,
    )
    settings.home.mkdir(parents=True, exist_ok=True)

    # 1. Settings and ignore rules
    write_settings(settings)
    gitignore = GITIGNORE_TEMPLATE.read_text().format(
        credentials_file=settings.credentials_file,
        session_file=settings.session_file,
    )
    (settings.home / '.gitignore').write_text(gitignore)

    # 2. Empty tree file
    tree = FamilyTreeStore(settings.tree_path)
    tree.save()

    # 3. History repository with the initial commit
    if track_history:
        history = TreeHistory.find(settings.home) or TreeHistory.init(settings.home)
        history.commit_files(
            ['famtree.yml', '.gitignore', settings.tree_file],
            "Initial commit: Add project settings and empty family tree",
        )
        logger.info("Initialized history repository at %s", settings.home)

    return settings


def export_to_json(tree, output_path):
    """Writes the tree as nested JSON for other tools to consume."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_data = {
        'roots': [person.to_dict() for person in tree.roots.values()],
        'count': len(tree),
    }
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(output_data, f, indent=2, ensure_ascii=False)
    return output_path
