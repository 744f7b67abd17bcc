"""
Git history of the family tree file.

Each saved change to the tree file becomes one commit in the project
repository. Credentials and the session file are listed in .gitignore and are
never added.
"""
import logging
from pathlib import Path

import git

logger = logging.getLogger(__name__)


class TreeHistory:

    def __init__(self, repo):
        self.repo = repo

    @classmethod
    def init(cls, path):
        """Creates a repository at path."""
        repo = git.Repo.init(path, initial_branch='main')
        return cls(repo)

    @classmethod
    def find(cls, path):
        """Returns the history of the repository at path, or None if path is not a git repository."""
        try:
            return cls(git.Repo(path))
        except (git.InvalidGitRepositoryError, git.NoSuchPathError):
            return None

    @property
    def working_dir(self):
        return Path(self.repo.working_dir)

    def record(self, file_path, message):
        """Commits file_path if it changed. Failures are logged and swallowed."""
        try:
            relative = str(Path(file_path).resolve().relative_to(self.working_dir.resolve()))
            self.repo.index.add([relative])
            if not self.repo.head.is_valid() or self.repo.index.diff('HEAD'):
                self.repo.index.commit(message)
                logger.debug("Committed %s: %s", relative, message)
            return True
        except (git.GitCommandError, ValueError, OSError) as e:
            logger.warning("Could not record history for %s: %s", file_path, e)
            return False

    def commit_files(self, paths, message):
        self.repo.index.add([str(p) for p in paths])
        self.repo.index.commit(message)

    def log(self, limit=None):
        """Returns (short sha, summary) pairs, newest first."""
        if not self.repo.head.is_valid():
            return []
        return [(commit.hexsha[:8], commit.summary) for commit in self.repo.iter_commits(max_count=limit)]
