"""
Pytest configuration and fixtures for running famtree commands against a throwaway project.
"""
import os

import pytest
from click.testing import CliRunner

from famtree.cli import cli
from famtree.project import initialize_project


@pytest.fixture(autouse=True, scope="session")
def configure_git_identity():
    """Ensure Git author/committer identity is set so history commits during tests do not fail."""
    os.environ.setdefault("GIT_AUTHOR_NAME", "Test User")
    os.environ.setdefault("GIT_AUTHOR_EMAIL", "test@example.com")
    os.environ.setdefault("GIT_COMMITTER_NAME", "Test User")
    os.environ.setdefault("GIT_COMMITTER_EMAIL", "test@example.com")


class ProjectRunner:
    """Runs the 'famtree' CLI in-process against one project directory."""

    def __init__(self, home):
        self.home = home
        self._runner = CliRunner()

    def invoke(self, args, input=None):
        return self._runner.invoke(cli, ['--home', str(self.home)] + list(args), input=input)


@pytest.fixture
def project_home(tmp_path):
    """A freshly initialised project with history tracking."""
    home = tmp_path / 'family'
    initialize_project(home)
    return home


@pytest.fixture
def runner(project_home):
    return ProjectRunner(project_home)


@pytest.fixture
def signed_in_runner(runner):
    """A runner whose project has user 'admin' signed in."""
    result = runner.invoke(['signup', '-u', 'admin', '-p', '1234'])
    assert result.exit_code == 0, result.output
    result = runner.invoke(['signin', '-u', 'admin', '-p', '1234'])
    assert result.exit_code == 0, result.output
    return runner
