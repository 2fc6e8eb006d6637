"""moodlog CLI - mood journal."""

import asyncio
import json
import logging
import sys

import click

from .adapters.firestore import FirestoreMoodStore
from .config import Config, load_config
from .core.entries import ValidationError
from .repository import EntryRepository


def _repository(config: Config) -> EntryRepository:
    """Build a repository that reports failures on stderr."""
    try:
        store = FirestoreMoodStore.from_config(config)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    return EntryRepository(
        store,
        notify=lambda message: click.echo(message, err=True),
        timezone=config.timezone,
    )


def _print_list(repo: EntryRepository) -> None:
    region = repo.region
    if region.placeholder:
        click.echo(region.placeholder)
        return
    for item in region.items:
        click.echo(f"{item.entry_id}  {item.when}  {item.text}")


@click.group()
@click.version_option(package_name="moodlog")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """moodlog - Mood Journal CLI."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def entries(as_json: bool):
    """List entries, newest first."""
    config = load_config()
    repo = _repository(config)
    ok = asyncio.run(repo.refresh())

    if as_json:
        if not ok:
            sys.exit(1)
        click.echo(
            json.dumps(
                [
                    {
                        "id": e.id,
                        "mood": e.mood,
                        "note": e.note,
                        "timestamp": e.timestamp.isoformat() if e.timestamp else None,
                    }
                    for e in repo.entries
                ],
                indent=2,
            )
        )
        return

    _print_list(repo)
    if not ok:
        sys.exit(1)


@main.command()
@click.argument("mood")
@click.option("--note", "-n", default="", help="Optional note")
def add(mood: str, note: str):
    """Record a mood entry."""
    config = load_config()
    if mood.strip() and mood not in config.moods:
        click.echo(f"Error: unknown mood '{mood}'. Choose from: {', '.join(config.moods)}", err=True)
        sys.exit(1)

    repo = _repository(config)
    try:
        entry_id = asyncio.run(repo.add(mood, note.strip()))
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if entry_id is None:
        sys.exit(1)
    click.echo(f"Saved entry {entry_id}.")
    _print_list(repo)


@main.command()
@click.argument("entry_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def delete(entry_id: str, yes: bool):
    """Delete an entry by id."""
    config = load_config()
    repo = _repository(config)

    if not yes and not click.confirm(f"Delete entry {entry_id}? This cannot be undone."):
        click.echo("Delete cancelled.")
        return

    if not asyncio.run(repo.remove(entry_id)):
        sys.exit(1)
    click.echo(f"Deleted entry {entry_id}.")
    _print_list(repo)


@main.command()
def bot():
    """Run the Telegram bot."""
    from .telegram_bot import run_bot

    try:
        run_bot(load_config())
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
def moods():
    """List the configured moods."""
    config = load_config()
    for mood in config.moods:
        click.echo(mood)


if __name__ == "__main__":
    main()
