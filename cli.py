#!/usr/bin/env python3
"""
CLI for running the KPL auction from a terminal
"""
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from app.config import settings
from app.database import init_db, get_session
from app.models import Player, Team, User, UserRole, PlayerStatus
from app.generators import PlayerGenerator, TeamGenerator
from app.importers.player_importer import PlayerImporter, ImportFormatError
from app.engine.auction_engine import AuctionEngine
from app.engine.errors import AuctionError
from app.auth.utils import create_access_token

console = Console()


@click.group()
def cli():
    """KPL Auction - cricket auction management"""
    pass


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.option("--purse", default=None, type=int, help="Starting purse for each team")
def seed_teams(purse):
    """Create the default franchise teams"""
    init_db()
    teams = TeamGenerator.create_teams(purse if purse is not None else settings.DEFAULT_TEAM_PURSE)
    added = TeamGenerator.save_teams_to_db(teams)
    console.print(f"[green]{len(added)} teams created[/green] ({len(teams) - len(added)} already existed)")


@cli.command()
@click.option("--count", default=120, help="Number of players to generate")
def generate_players(count: int):
    """Generate fictional players for the auction pool"""
    console.print(f"[yellow]Generating {count} players...[/yellow]")

    init_db()
    players = PlayerGenerator.generate_player_pool(count)

    categories = {}
    for p in players:
        categories[p.category.value] = categories.get(p.category.value, 0) + 1

    PlayerGenerator.save_players_to_db(players)
    console.print(f"[green]{len(players)} players saved to database![/green]")

    console.print("\n[bold]Category Distribution:[/bold]")
    for category, n in sorted(categories.items()):
        console.print(f"  {category}: {n}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def import_players(path: str):
    """Import players from a CSV or XLSX sheet"""
    init_db()
    file = Path(path)
    session = get_session()
    try:
        result = PlayerImporter.import_file(session, file.name, file.read_bytes())
    except ImportFormatError as e:
        raise click.ClickException(str(e))
    finally:
        session.close()

    console.print(f"[green]{len(result.players)} players imported[/green]")
    if result.errors:
        table = Table(title=f"Rejected rows ({len(result.errors)})")
        table.add_column("Row", justify="right")
        table.add_column("Problem", style="red")
        for err in result.errors:
            table.add_row(str(err.row), err.message)
        console.print(table)


@cli.command()
@click.option("--status", type=click.Choice([s.value for s in PlayerStatus]), default=None)
def list_players(status):
    """List players in the database"""
    session = get_session()
    try:
        query = session.query(Player)
        if status:
            query = query.filter(Player.status == PlayerStatus(status))
        players = query.order_by(Player.id).all()

        if not players:
            console.print("[red]No players found. Run 'generate-players' or 'import-players' first.[/red]")
            return

        table = Table(title=f"Players ({len(players)} total)")
        table.add_column("ID")
        table.add_column("Name", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Cat")
        table.add_column("Base", justify="right")
        table.add_column("Status")
        table.add_column("Sold For", justify="right", style="green")
        table.add_column("Team")

        for player in players:
            table.add_row(
                str(player.id),
                player.name,
                player.type.value,
                player.category.value,
                f"{player.base_value:,}",
                player.status.value,
                f"{player.bid_value:,}" if player.bid_value is not None else "-",
                player.current_team.name if player.current_team else "-",
            )

        console.print(table)
    finally:
        session.close()


@cli.command()
def list_teams():
    """Show teams with their remaining purse"""
    session = get_session()
    try:
        teams = session.query(Team).order_by(Team.id).all()
        table = Table(title="Teams")
        table.add_column("ID")
        table.add_column("Name", style="cyan")
        table.add_column("Owner")
        table.add_column("Purse", justify="right", style="green")
        table.add_column("Squad", justify="right")
        table.add_column("Spent", justify="right")
        for team in teams:
            table.add_row(
                str(team.id),
                team.name,
                team.owner,
                f"{team.purse:,}",
                str(team.squad_size),
                f"{team.total_spent:,}",
            )
        console.print(table)
    finally:
        session.close()


@cli.command()
@click.argument("email")
@click.option("--name", default=None, help="Display name (defaults to the email's local part)")
@click.option("--role", type=click.Choice([r.value for r in UserRole]), default=UserRole.USER.value)
def create_user(email: str, name, role: str):
    """Create a user or change an existing user's role"""
    init_db()
    session = get_session()
    try:
        user = session.query(User).filter_by(email=email).first()
        if user is None:
            user = User(email=email, name=name or email.split("@")[0], role=UserRole(role))
            session.add(user)
            action = "Created"
        else:
            user.role = UserRole(role)
            action = "Updated"
        session.commit()
        console.print(f"[green]{action} {email} as {role}[/green]")
    finally:
        session.close()


@cli.command()
@click.argument("email")
def issue_token(email: str):
    """Print an access token for a user (for scripting against the API)"""
    session = get_session()
    try:
        user = session.query(User).filter_by(email=email).first()
        if user is None:
            raise click.ClickException(f"No user with email {email}")
        click.echo(create_access_token(user.id))
    finally:
        session.close()


@cli.command()
@click.argument("player_id", type=int)
@click.argument("team_id", type=int)
@click.argument("amount", type=int)
def sell(player_id: int, team_id: int, amount: int):
    """Sell a player to a team"""
    session = get_session()
    try:
        result = AuctionEngine(session).resolve_bid(player_id, team_id, amount)
        console.print(Panel(
            f"[bold]{result.player.name}[/bold] sold to [cyan]{result.team.name}[/cyan] "
            f"for [green]{amount:,}[/green]\nPurse left: {result.team.purse:,}",
            title="SOLD",
        ))
    except AuctionError as e:
        raise click.ClickException(f"{e.__class__.__name__}: {e.message}")
    finally:
        session.close()


@cli.command()
@click.argument("player_id", type=int)
def unsold(player_id: int):
    """Mark a player unsold"""
    session = get_session()
    try:
        player = AuctionEngine(session).mark_unsold(player_id)
        console.print(f"[yellow]{player.name} went unsold[/yellow]")
    except AuctionError as e:
        raise click.ClickException(f"{e.__class__.__name__}: {e.message}")
    finally:
        session.close()


if __name__ == "__main__":
    cli()
