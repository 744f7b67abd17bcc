"""Tests for the 'famtree edit' command functionality."""
from git import Repo

from .test_utils import check_project_health, get_names_from_list


class TestEditCommand:
    """Test cases for the 'famtree edit' command."""

    def test_rename_root(self, signed_in_runner, project_home):
        """Test renaming a root person keeps their children."""
        runner = signed_in_runner
        runner.invoke(['add', 'Alice'])
        runner.invoke(['add', 'Bob', '-p', 'Alice'])

        result = runner.invoke(['edit', 'Alice', 'Alicia'])

        assert result.exit_code == 0, result.output
        assert "Successfully renamed Alice to Alicia." in result.output
        assert get_names_from_list(runner) == [(0, 'Alicia'), (1, 'Bob')]
        assert runner.invoke(['find', 'Alice']).exit_code == 1
        assert runner.invoke(['find', 'Alicia']).exit_code == 0

        assert Repo(project_home).head.commit.summary == "feat: Rename 'Alice' to 'Alicia'"
        check_project_health(project_home)

    def test_rename_cascades_to_direct_children(self, signed_in_runner):
        """Test that same-named children directly below a root are renamed too."""
        runner = signed_in_runner
        runner.invoke(['add', 'Alice'])
        runner.invoke(['add', 'Mum'])
        runner.invoke(['add', 'Alice', '-p', 'Mum'])

        runner.invoke(['edit', 'Alice', 'Alicia'])

        names = [name for _, name in get_names_from_list(runner)]
        assert 'Alice' not in names
        assert names.count('Alicia') == 2

    def test_rename_nested_person_fails(self, signed_in_runner):
        """Current behaviour: only root people can be renamed by name."""
        runner = signed_in_runner
        runner.invoke(['add', 'Alice'])
        runner.invoke(['add', 'Bob', '-p', 'Alice'])

        result = runner.invoke(['edit', 'Bob', 'Robert'])

        assert result.exit_code == 1
        assert "Person not found." in result.output

    def test_rename_to_blank_name(self, signed_in_runner):
        """Test that a blank new name is rejected."""
        runner = signed_in_runner
        runner.invoke(['add', 'Alice'])

        result = runner.invoke(['edit', 'Alice', ' '])

        assert result.exit_code == 1
        assert "Please enter a valid name." in result.output
        assert get_names_from_list(runner) == [(0, 'Alice')]
