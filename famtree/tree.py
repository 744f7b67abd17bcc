import logging
import uuid
from pathlib import Path

from .errors import NotFoundError, PersistenceError, ValidationError
from . import storage

logger = logging.getLogger(__name__)


class PersonRecord:
    """A named node owning an ordered list of children. Nodes never point back to their parent."""

    def __init__(self, name, children=None, person_id=None):
        self.id = person_id or str(uuid.uuid4())
        self.name = name
        self.children = list(children or [])

    def __repr__(self):
        return f"PersonRecord({self.name!r}, children={len(self.children)}, id={self.id[:8]})"

    def add_child(self, child):
        self.children.append(child)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'children': [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise PersistenceError(f"Expected a person mapping, got {type(data).__name__}")
        name = data.get('name')
        if not isinstance(name, str) or not name.strip():
            raise PersistenceError(f"Invalid person name: {name!r}")
        children = data.get('children') or []
        if not isinstance(children, list):
            raise PersistenceError(f"Children of '{name}' must be a list")
        person_id = data.get('id')
        if person_id is not None and not isinstance(person_id, str):
            raise PersistenceError(f"Invalid id for '{name}': {person_id!r}")
        return cls(name, [cls.from_dict(child) for child in children], person_id=person_id)


def _search(nodes, name):
    """Depth-first, in-order search for the first node called name."""
    for node in nodes:
        if node.name == name:
            return node
        found = _search(node.children, name)
        if found:
            return found
    return None


def _walk(nodes, depth):
    for node in nodes:
        yield depth, node
        yield from _walk(node.children, depth + 1)


class FamilyTreeStore:
    """
    The forest of people keyed by root name, backed by a single YAML file.

    Every mutation rewrites the whole file before returning and then notifies
    the subscribed listeners. A failed write is logged and the in-memory change
    is kept.
    """

    def __init__(self, path, history=None):
        self.path = Path(path)
        self.history = history
        self.roots = {}
        self._listeners = []

    @classmethod
    def open(cls, path, history=None):
        store = cls(path, history=history)
        store.load()
        return store

    # --- Persistence ---

    def load(self):
        """Replaces the in-memory tree with the file content. Unreadable data yields an empty tree."""
        try:
            data = storage.load_document(self.path)
            self.roots = self.from_dict(data)
        except RecursionError:
            logger.warning("Starting with an empty family tree: %s is nested too deeply", self.path)
            self.roots = {}
            return
        except PersistenceError as e:
            logger.warning("Starting with an empty family tree: %s", e)
            self.roots = {}
            return
        logger.info("Loaded %d root(s) from %s", len(self.roots), self.path)

    def save(self, message="Update family tree"):
        """Writes the whole tree. Returns False if the write failed."""
        try:
            storage.save_document(self.path, self.to_dict())
        except PersistenceError as e:
            logger.error("Family tree changes were not saved: %s", e)
            return False
        if self.history is not None:
            self.history.record(self.path, message)
        return True

    def to_dict(self):
        return {'people': {name: person.to_dict() for name, person in self.roots.items()}}

    @staticmethod
    def from_dict(data):
        people = data.get('people') or {}
        if not isinstance(people, dict):
            raise PersistenceError("'people' must be a mapping of name to person")
        roots = {}
        for name, person_data in people.items():
            person = PersonRecord.from_dict(person_data)
            if name != person.name:
                raise PersistenceError(f"Root key '{name}' does not match person name '{person.name}'")
            roots[name] = person
        return roots

    # --- Change notification ---

    def subscribe(self, listener):
        """Registers a callable invoked with the store after every mutation."""
        self._listeners.append(listener)

    def _changed(self, message):
        self.save(message)
        for listener in self._listeners:
            listener(self)

    # --- Queries ---

    def find_by_name(self, name):
        """Returns the root keyed by name, else the first descendant with that name, else None."""
        if name in self.roots:
            return self.roots[name]
        for root in self.roots.values():
            found = _search(root.children, name)
            if found:
                return found
        return None

    def walk(self):
        """Yields (depth, person) for every node, roots in order, depth-first."""
        return _walk(self.roots.values(), 0)

    def __len__(self):
        return sum(1 for _ in self.walk())

    # --- Mutations ---

    def add_person(self, name, parent_name=""):
        """
        Adds a person, either as the last child of parent_name or as a new root.

        The parent is the root keyed parent_name, else the first descendant with
        that name in a depth-first walk of the roots in order. An empty or
        unknown parent_name makes the person a root, replacing any root that
        already has the same name.
        """
        name = (name or "").strip()
        parent_name = (parent_name or "").strip()
        if not name:
            raise ValidationError("Please enter a valid name.")

        person = PersonRecord(name)
        parent = self.find_by_name(parent_name) if parent_name else None
        if parent is not None:
            parent.add_child(person)
            message = f"feat: Add person '{name}' as child of '{parent.name}'"
        else:
            if parent_name:
                logger.info("Parent '%s' not found, adding '%s' as a root", parent_name, name)
            self.roots[name] = person
            message = f"feat: Add person '{name}'"

        self._changed(message)
        return person

    def delete_person(self, name, confirm=None):
        """
        Removes the root called name.

        Direct children of the remaining roots that share the name are removed
        as well. Nodes deeper than one level below a root are not touched, and a
        person who is not a root cannot be deleted by name.

        confirm is called with the name before anything changes; a falsy answer
        aborts and returns False.
        """
        name = (name or "").strip()
        if not name or name not in self.roots:
            raise NotFoundError("Person not found.")

        if confirm is not None and not confirm(name):
            return False

        del self.roots[name]
        for root in self.roots.values():
            root.children = [child for child in root.children if child.name != name]

        self._changed(f"feat: Remove person '{name}'")
        return True

    def edit_person(self, old_name, new_name):
        """
        Renames the root called old_name to new_name.

        Direct children of every root that are called old_name are renamed too,
        without moving them. A root already called new_name is replaced.
        """
        old_name = (old_name or "").strip()
        new_name = (new_name or "").strip()
        if not old_name or old_name not in self.roots:
            raise NotFoundError("Person not found.")
        if not new_name:
            raise ValidationError("Please enter a valid name.")

        person = self.roots.pop(old_name)
        person.name = new_name
        self.roots[new_name] = person
        for root in self.roots.values():
            for child in root.children:
                if child.name == old_name:
                    child.name = new_name

        self._changed(f"feat: Rename '{old_name}' to '{new_name}'")
        return person

    def reset(self):
        """Removes everybody."""
        self.roots.clear()
        self._changed("feat: Reset family tree")
