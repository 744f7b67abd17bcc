import logging
import os
from pathlib import Path

import click
import git

from .config import CONFIG_FILENAME
from .errors import FamilyTreeError
from .project import Project, export_to_json, initialize_project


def _short_id(person_id):
    """Returns the first 8 characters of a full ID."""
    if person_id:
        return person_id[:8]
    return 'N/A'


def _fail(message):
    click.secho(f"Error: {message}", fg='red')
    raise SystemExit(1)


def _open_project(ctx):
    try:
        return Project.open(ctx.obj['home'])
    except FamilyTreeError as e:
        _fail(e)


@click.group()
@click.option('--home', envvar='FAMTREE_HOME', type=click.Path(file_okay=False),
              help='The project directory. Defaults to the nearest directory containing famtree.yml.')
@click.option('-v', '--verbose', is_flag=True, help='Show debug logging.')
@click.pass_context
def cli(ctx, home, verbose):
    """A CLI tool to keep a family tree, gated by a username and password."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    ctx.ensure_object(dict)
    ctx.obj['home'] = home


@cli.command('init')
@click.argument('root_path', type=click.Path())
@click.option('--no-history', is_flag=True, help='Do not keep a git history of the tree file.')
def init(root_path, no_history):
    """Initializes a new family tree project at the specified path."""
    target_path = Path(root_path)
    if target_path.exists() and not target_path.is_dir():
        _fail(f"'{root_path}' exists and is not a directory.")
    if (target_path / CONFIG_FILENAME).exists():
        _fail(f"'{root_path}' already contains a family tree project.")
    if target_path.exists() and os.listdir(target_path):
        click.secho(f"Warning: Target directory '{root_path}' is not empty.", fg='yellow')

    click.echo(f"Initializing new project at: {root_path}")
    try:
        settings = initialize_project(root_path, track_history=not no_history)
    except (OSError, git.GitCommandError, FamilyTreeError) as e:
        _fail(f"Failed to initialize project: {e}")
    click.secho(f"Successfully initialized project at {settings.home}!", fg='green')


# --- Account commands ---

@cli.command('signup')
@click.option('-u', '--username', required=True, help='The new username.')
@click.option('-p', '--password', prompt=True, hide_input=True, confirmation_prompt=True,
              help='The new password.')
@click.pass_context
def signup(ctx, username, password):
    """Registers a user. An existing user's password is replaced."""
    project = _open_project(ctx)
    project.credentials.register(username, password)
    click.secho("Sign up successful! You can now sign in.", fg='green')


@cli.command('signin')
@click.option('-u', '--username', required=True, help='The username.')
@click.option('-p', '--password', prompt=True, hide_input=True, help='The password.')
@click.pass_context
def signin(ctx, username, password):
    """Signs in and unlocks the editing commands."""
    project = _open_project(ctx)
    try:
        project.session.sign_in(username, password)
    except FamilyTreeError as e:
        _fail(e)
    click.secho(f"Welcome, {username}!", fg='green')
    if project.settings.wipe_tree_on_sign_in:
        click.secho("The family tree has been reset.", fg='yellow')


@cli.command('signout')
@click.pass_context
def signout(ctx):
    """Signs out and locks the editing commands."""
    project = _open_project(ctx)
    try:
        project.session.sign_out()
    except FamilyTreeError as e:
        _fail(e)
    click.secho("Signed out successfully.", fg='green')


# --- Editing commands ---

def _open_for_editing(ctx):
    project = _open_project(ctx)
    try:
        project.session.require_signed_in()
    except FamilyTreeError as e:
        _fail(e)
    return project


@cli.command('add')
@click.argument('name')
@click.option('-p', '--parent', 'parent_name', default='', help="The parent's name. Omit to add a root.")
@click.pass_context
def add(ctx, name, parent_name):
    """Adds a new person to the family tree."""
    project = _open_for_editing(ctx)
    click.echo(f"Adding person: {name}...")
    try:
        person = project.tree.add_person(name, parent_name)
    except FamilyTreeError as e:
        _fail(e)
    parent_name = parent_name.strip()
    if project.tree.roots.get(person.name) is not person:
        click.secho(f"Successfully added person as child of {parent_name}! (ID: {_short_id(person.id)})", fg='green')
        return
    if parent_name:
        click.secho(f"Warning: Parent '{parent_name}' not found. Added as a root.", fg='yellow')
    click.secho(f"Successfully added person! (ID: {_short_id(person.id)})", fg='green')


@cli.command('remove')
@click.argument('name')
@click.pass_context
def remove(ctx, name):
    """Removes a root person from the family tree."""
    project = _open_for_editing(ctx)
    try:
        removed = project.tree.delete_person(
            name,
            confirm=lambda n: click.confirm(f"Are you sure you want to delete {n}?"),
        )
    except FamilyTreeError as e:
        _fail(e)
    if removed:
        click.secho(f"Successfully removed {name.strip()}.", fg='green')
    else:
        click.echo("Operation aborted.")


@cli.command('edit')
@click.argument('old_name')
@click.argument('new_name')
@click.pass_context
def edit(ctx, old_name, new_name):
    """Renames a root person."""
    project = _open_for_editing(ctx)
    try:
        project.tree.edit_person(old_name, new_name)
    except FamilyTreeError as e:
        _fail(e)
    click.secho(f"Successfully renamed {old_name.strip()} to {new_name.strip()}.", fg='green')


@cli.command('reset')
@click.pass_context
def reset(ctx):
    """Removes everybody from the family tree."""
    project = _open_for_editing(ctx)
    if not click.confirm("Are you sure you want to remove everybody from the family tree?"):
        click.echo("Operation aborted.")
        return
    project.tree.reset()
    click.secho("Family tree has been reset.", fg='green')


# --- Read-only commands ---

@cli.command('find')
@click.argument('name')
@click.pass_context
def find(ctx, name):
    """Finds a person by name and lists their children."""
    project = _open_project(ctx)
    person = project.tree.find_by_name(name.strip())
    if person is None:
        _fail(f"No person found matching '{name}'.")
    click.secho(f"- {person.name} (ID: {_short_id(person.id)})", fg='cyan')
    if person.children:
        click.secho("    Children:", fg='yellow')
        for child in person.children:
            click.echo(f"        - {child.name} (ID: {_short_id(child.id)})")


@cli.command('list')
@click.pass_context
def list_people(ctx):
    """Shows every person as an indented outline."""
    project = _open_project(ctx)
    if not project.tree.roots:
        click.secho("No people found.", fg='yellow')
        return
    click.secho(f"Found {len(project.tree)} people in {len(project.tree.roots)} root(s).", fg='blue')
    for depth, person in project.tree.walk():
        click.secho(f"{'    ' * depth}- {person.name} (ID: {_short_id(person.id)})", fg='cyan' if depth == 0 else None)


@cli.command('export')
@click.option('--output', default='family_tree.json', help='The output file name.')
@click.pass_context
def export(ctx, output):
    """Exports the family tree to a JSON file."""
    project = _open_project(ctx)
    click.echo(f"Exporting family tree to {output}...")
    try:
        output_path = export_to_json(project.tree, output)
    except OSError as e:
        _fail(f"Failed to export family tree: {e}")
    click.secho(f"Successfully exported family tree to {output_path}!", fg='green')


@cli.command('log')
@click.option('-n', '--limit', type=int, default=None, help='Show at most this many entries.')
@click.pass_context
def log(ctx, limit):
    """Displays the history of the family tree file."""
    project = _open_project(ctx)
    if project.history is None:
        click.secho("History is not tracked for this project.", fg='yellow')
        return
    for short_sha, summary in project.history.log(limit):
        click.echo(f"{click.style(short_sha, fg='yellow')} {summary}")


if __name__ == '__main__':
    cli()
