"""Command-line interface for socialchain."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from nacl.signing import SigningKey
from rich.console import Console
from rich.table import Table

from socialchain import Runtime, SocialConfig, save_json, __version__
from socialchain.core.derivation import derive
from socialchain.core.exporter import save_posts_csv
from socialchain.exceptions import SocialChainError
from socialchain.models.address import Address
from socialchain.models.result import InstructionResult

app = typer.Typer(
    name="socialchain",
    help="Social graph program over derived-address ledger accounts",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"socialchain version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """socialchain - follow graph and post logs stored in ledger accounts."""
    pass


def _address(value: str) -> Address:
    try:
        return Address(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _call(action):
    """Run action against an open runtime, exiting on configuration, argument or store errors."""

    async def run():
        async with Runtime(SocialConfig()) as runtime:
            return await action(runtime)

    try:
        return asyncio.run(run())
    except SocialChainError as e:
        console.print(f"[red]✗[/red] {type(e).__name__}: {e}")
        raise typer.Exit(1)


def _run(action, output: Optional[Path] = None) -> InstructionResult:
    """Run one runtime action and report its result."""
    result = _call(action)
    if not result.success:
        console.print(f"[red]✗[/red] {result.error_type}: {result.error_message}")
        raise typer.Exit(1)
    if output:
        save_json(result, output)
        console.print(f"[dim]Saved to {output}[/dim]")
    return result


@app.command()
def keygen():
    """Generate a new ed25519 identity."""
    key = SigningKey.generate()
    console.print(f"Address: [bold]{Address(bytes(key.verify_key))}[/bold]")
    console.print(f"Secret seed: [dim]{bytes(key).hex()}[/dim]")


@app.command("derive")
def derive_cmd(
    owner: str = typer.Argument(..., help="Owner identity (base58)"),
    role: str = typer.Argument(..., help="Role: profile, post"),
    index: Optional[int] = typer.Option(None, "--index", "-i", help="Post sequence index"),
):
    """Show the derived address of an identity's account."""
    try:
        program_id = Runtime(SocialConfig()).program_id
        address, nonce = derive(_address(owner), role, program_id, index=index)
    except SocialChainError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"{address} [dim](nonce {nonce})[/dim]")


@app.command()
def fund(
    owner: str = typer.Argument(..., help="Identity to credit (base58)"),
    lamports: Optional[int] = typer.Option(None, "--lamports", "-l", help="Amount to credit"),
):
    """Credit lamports to an identity so it can pay for storage."""
    address = _address(owner)
    state = _call(lambda rt: rt.fund(address, lamports))
    console.print(f"[green]✓[/green] {address} holds {state.lamports:,} lamports")


@app.command()
def init(
    owner: str = typer.Argument(..., help="Owner identity (base58)"),
    role: str = typer.Argument(..., help="Role: profile, post"),
):
    """Create an identity's profile or post log account."""
    address = _address(owner)
    _run(lambda rt: rt.initialize_user(address, role))
    console.print(f"[green]✓[/green] Initialized {role} for {address}")


@app.command()
def follow(
    owner: str = typer.Argument(..., help="Following identity (base58)"),
    target: str = typer.Argument(..., help="Identity to follow (base58)"),
):
    """Follow another identity."""
    owner_address, target_address = _address(owner), _address(target)
    result = _run(lambda rt: rt.follow(owner_address, target_address))
    console.print(f"[green]✓[/green] Following {result.profile.follow_count} accounts")


@app.command()
def unfollow(
    owner: str = typer.Argument(..., help="Following identity (base58)"),
    target: str = typer.Argument(..., help="Identity to unfollow (base58)"),
):
    """Stop following an identity."""
    owner_address, target_address = _address(owner), _address(target)
    result = _run(lambda rt: rt.unfollow(owner_address, target_address))
    console.print(f"[green]✓[/green] Following {result.profile.follow_count} accounts")


@app.command()
def followers(
    owner: str = typer.Argument(..., help="Identity (base58)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save result as JSON"),
):
    """List the identities an owner follows."""
    address = _address(owner)
    result = _run(lambda rt: rt.query_followers(address), output)

    table = Table(title=f"{address} follows {result.profile.follow_count}")
    table.add_column("#", style="dim")
    table.add_column("Address")
    for i, followed in enumerate(result.profile.follows):
        table.add_row(str(i), str(followed))
    console.print(table)


@app.command()
def post(
    owner: str = typer.Argument(..., help="Posting identity (base58)"),
    content: str = typer.Argument(..., help="Post content"),
):
    """Append a post."""
    address = _address(owner)
    result = _run(lambda rt: rt.post(address, content))
    if result.post_log is not None:
        console.print(f"[green]✓[/green] Post #{result.post_log.post_count} stored")
    else:
        console.print(f"[green]✓[/green] Post stored at {result.post.timestamp}")


@app.command()
def posts(
    owner: str = typer.Argument(..., help="Identity (base58)"),
    index: Optional[int] = typer.Option(None, "--index", "-i", help="Read one post account"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save result as JSON"),
    csv: Optional[Path] = typer.Option(None, "--csv", help="Save posts as CSV (needs pandas)"),
):
    """Show an identity's posts."""
    address = _address(owner)
    result = _run(lambda rt: rt.query_posts(address, index), output)

    if result.post_counter is not None:
        console.print(
            f"{address} has {result.post_counter.post_count} posts; "
            "read one with --index"
        )
        return

    entries = result.post_log.posts if result.post_log is not None else [result.post]
    table = Table(title=f"Posts by {address}")
    table.add_column("Timestamp", style="dim")
    table.add_column("Content")
    for entry in entries:
        table.add_row(str(entry.timestamp), entry.content)
    console.print(table)

    if csv and result.post_log is not None:
        save_posts_csv(result.post_log, csv, owner=str(address))
        console.print(f"[dim]Saved to {csv}[/dim]")


@app.command()
def account(
    address: str = typer.Argument(..., help="Account address (base58)"),
):
    """Show the raw stored state of an account."""
    target = _address(address)
    state = _call(lambda rt: rt.get_account(target))
    if state is None:
        console.print(f"[yellow]Account {target} does not exist[/yellow]")
        raise typer.Exit(1)

    table = Table(title=str(target), show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Owner", str(state.owner))
    table.add_row("Lamports", f"{state.lamports:,}")
    table.add_row("Size", f"{len(state.data):,} bytes")
    table.add_row("Head", state.data[:32].hex() or "-")
    console.print(table)


if __name__ == "__main__":
    app()
