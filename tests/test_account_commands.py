"""
Tests for the 'famtree signup', 'signin' and 'signout' commands.
"""
import yaml

from .test_utils import get_names_from_list


class TestAccountCommands:
    """Test cases for the account commands."""

    def test_signup_then_signin(self, runner):
        """Test registering and signing in."""
        result = runner.invoke(['signup', '-u', 'admin', '-p', '1234'])
        assert result.exit_code == 0
        assert "Sign up successful!" in result.output

        result = runner.invoke(['signin', '-u', 'admin', '-p', '1234'])
        assert result.exit_code == 0
        assert "Welcome, admin!" in result.output

    def test_signup_prompts_for_password(self, runner):
        """Test that the password can be entered at the prompt."""
        result = runner.invoke(['signup', '-u', 'admin'], input='1234\n1234\n')
        assert result.exit_code == 0, result.output

        result = runner.invoke(['signin', '-u', 'admin'], input='1234\n')
        assert result.exit_code == 0, result.output

    def test_signin_invalid_credentials(self, runner):
        """Test that wrong passwords and unknown users are rejected."""
        runner.invoke(['signup', '-u', 'admin', '-p', '1234'])

        result = runner.invoke(['signin', '-u', 'admin', '-p', 'wrong'])
        assert result.exit_code == 1
        assert "Invalid credentials." in result.output

        result = runner.invoke(['signin', '-u', 'missing', '-p', 'anything'])
        assert result.exit_code == 1
        assert "Invalid credentials." in result.output

    def test_signin_resets_the_tree(self, signed_in_runner, project_home):
        """Known defect kept for compatibility: signing in empties the family tree."""
        runner = signed_in_runner
        runner.invoke(['add', 'Alice'])
        runner.invoke(['add', 'Bob', '-p', 'Alice'])
        assert len(get_names_from_list(runner)) == 2

        runner.invoke(['signout'])
        result = runner.invoke(['signin', '-u', 'admin', '-p', '1234'])

        assert result.exit_code == 0
        assert "The family tree has been reset." in result.output
        assert get_names_from_list(runner) == []

    def test_signin_keeps_tree_when_wipe_disabled(self, signed_in_runner, project_home):
        """Test that the sign-in wipe can be switched off in famtree.yml."""
        runner = signed_in_runner
        runner.invoke(['add', 'Alice'])
        runner.invoke(['signout'])

        config_path = project_home / 'famtree.yml'
        config = yaml.safe_load(config_path.read_text())
        config['wipe_tree_on_sign_in'] = False
        config_path.write_text(yaml.safe_dump(config))

        result = runner.invoke(['signin', '-u', 'admin', '-p', '1234'])
        assert result.exit_code == 0
        assert get_names_from_list(runner) == [(0, 'Alice')]

    def test_signout_locks_editing(self, signed_in_runner):
        """Test that editing commands require a signed-in user."""
        runner = signed_in_runner
        result = runner.invoke(['signout'])
        assert result.exit_code == 0
        assert "Signed out successfully." in result.output

        for args in (['add', 'Alice'], ['remove', 'Alice'], ['edit', 'Alice', 'Alicia'], ['reset']):
            result = runner.invoke(args, input='y\n')
            assert result.exit_code == 1, args
            assert "You must sign in first." in result.output

    def test_signout_when_signed_out(self, runner):
        """Test signing out without a session."""
        result = runner.invoke(['signout'])
        assert result.exit_code == 1
        assert "Not signed in." in result.output

    def test_credentials_are_not_committed(self, signed_in_runner, project_home):
        """Test that the cleartext credential file stays out of the history."""
        from git import Repo
        repo = Repo(project_home)
        assert (project_home / 'credentials.yml').exists()
        assert 'credentials.yml' in repo.ignored('credentials.yml')
        assert '.session.yml' in repo.ignored('.session.yml')
