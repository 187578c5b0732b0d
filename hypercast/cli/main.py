"""CLI commands for hypercast."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from hypercast import __version__
from hypercast.cli.telegram import telegram_app
from hypercast.errors import HypercastError
from hypercast.protocol.messages import CastId, Embed, FarcasterNetwork

app = typer.Typer(
    name="hypercast",
    help="hypercast - Farcaster client for a remote HyperSnap node",
    no_args_is_help=True,
)
app.add_typer(telegram_app, name="telegram")

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"hypercast v{__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
):
    """hypercast - post, read and react on Farcaster."""
    load_dotenv()
    setup_logging(verbose)


def fail(message: str, hint: str | None = None) -> typer.Exit:
    console.print(f"[red]Error: {escape(message)}[/red]")
    if hint:
        console.print(hint)
    return typer.Exit(1)


def run_async(work: Callable[[], Awaitable[Any]]) -> Any:
    """Run a coroutine, turning client errors into a clean exit."""
    try:
        return asyncio.run(work())
    except HypercastError as e:
        raise fail(str(e))


def parse_cast_ref(value: str) -> CastId:
    """Parse ``FID:HASH`` as typed on the command line."""
    fid, sep, hash_hex = value.partition(":")
    try:
        if not sep or not fid.strip().isdigit():
            raise ValueError(value)
        cast = CastId.from_hex(int(fid), hash_hex.strip())
    except ValueError:
        raise typer.BadParameter(f"expected FID:HASH, got {value!r}")
    if not cast.hash:
        raise typer.BadParameter(f"missing cast hash in {value!r}")
    return cast


async def _with_auth(work):
    from hypercast.auth import load_auth
    from hypercast.config import load_config

    auth = await load_auth(load_config())
    try:
        return await work(auth)
    finally:
        await auth.client.close()


async def _with_client(work):
    from hypercast.auth import create_client
    from hypercast.config import load_config

    config = load_config()
    client = create_client(config)
    try:
        return await work(config, client)
    finally:
        await client.close()


# ============================================================================
# Setup / Onboard
# ============================================================================


@app.command()
def onboard():
    """Interactive setup wizard for account, signer and node."""
    from hypercast.config import get_config_path, load_config, save_config
    from hypercast.crypto import identity_from_values

    config_path = get_config_path()

    # Environment overrides are not written back to disk
    try:
        config = load_config(environ={})
    except HypercastError as e:
        raise fail(str(e))
    if config_path.exists():
        console.print(f"[dim]Updating existing config at {config_path}[/dim]\n")

    # --- Step 1: Account ---
    console.print("[bold]Step 1:[/bold] Your Farcaster account\n")
    fid = typer.prompt("FID", type=int, default=config.account.fid or None)
    if fid <= 0:
        console.print("[red]FID must be a positive number.[/red]")
        raise typer.Exit(1)
    config.account.fid = fid
    console.print(f"  [green]>[/green] FID {fid}\n")

    # --- Step 2: Signer ---
    console.print("[bold]Step 2:[/bold] Choose your signer credential\n")
    console.print("  [cyan]1[/cyan]. Ed25519 private key (64 hex characters)")
    console.print("  [cyan]2[/cyan]. BIP-39 mnemonic (12 or 24 words)")
    console.print()

    choice = typer.prompt("Select credential type", type=int, default=1)
    if choice not in (1, 2):
        console.print("[red]Invalid selection.[/red]")
        raise typer.Exit(1)

    secret = typer.prompt(
        "Private key" if choice == 1 else "Mnemonic", hide_input=True
    ).strip()
    private_key, mnemonic = (secret, "") if choice == 1 else ("", secret)
    try:
        identity = identity_from_values(private_key, mnemonic)
    except HypercastError as e:
        raise fail(str(e))

    config.signer.private_key = private_key
    config.signer.mnemonic = mnemonic
    console.print(f"  [green]>[/green] Signer public key: [cyan]{identity.public_key_hex}[/cyan]")
    console.print("  [dim]This key must be registered as a signer for your FID.[/dim]\n")

    # --- Step 3: Node ---
    console.print("[bold]Step 3:[/bold] Node connection\n")
    http_addr = typer.prompt(
        "Node HTTP address", default=config.node.http_addr or "http://127.0.0.1:3381"
    ).strip()
    network = typer.prompt("Network", default=config.node.network or "mainnet").strip().lower()
    try:
        FarcasterNetwork.from_name(network)
    except KeyError:
        console.print(f"[red]Unknown network: {network}[/red]")
        raise typer.Exit(1)

    api_key = typer.prompt(
        "API key (leave blank if none)", default="", hide_input=True, show_default=False
    )
    config.node.http_addr = http_addr
    config.node.network = network
    if api_key.strip():
        config.node.api_key = api_key.strip()
    console.print(f"  [green]>[/green] {http_addr} ({network})\n")

    # --- Step 4: Save config ---
    save_config(config)
    console.print(f"[green]>[/green] Config saved to {config_path}")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("\nCheck the node: [cyan]hypercast node[/cyan]")
    console.print("Try it out:     [cyan]hypercast post \"gm\"[/cyan]")


# ============================================================================
# Identity
# ============================================================================


@app.command()
def whoami():
    """Show the configured FID and signer public key."""
    from hypercast.auth import require_fid
    from hypercast.config import load_config
    from hypercast.crypto import identity_from_values

    try:
        config = load_config()
        fid = require_fid(config)
        identity = identity_from_values(config.signer.private_key, config.signer.mnemonic)
    except HypercastError as e:
        raise fail(str(e), "Run [cyan]hypercast onboard[/cyan] to set up your account.")

    console.print(f"FID:        [cyan]{fid}[/cyan]")
    console.print(f"Public key: [cyan]{identity.public_key_hex}[/cyan]")


# ============================================================================
# Write commands
# ============================================================================


@app.command()
def post(
    text: str = typer.Argument(..., help="Cast text"),
    reply_to: str = typer.Option(None, "--reply-to", "-r", help="Reply to FID:HASH"),
    quote: str = typer.Option(None, "--quote", "-q", help="Quote FID:HASH"),
    embed: list[str] = typer.Option(None, "--embed", "-e", help="URL to embed (repeatable)"),
):
    """Publish a cast, reply or quote cast."""
    if not text.strip():
        raise fail("Cast text cannot be empty.")
    if reply_to and quote:
        raise fail("Use either --reply-to or --quote, not both.")

    parent = parse_cast_ref(reply_to) if reply_to else None
    embeds = [Embed.of_url(url) for url in embed or []]
    if quote:
        embeds.append(Embed.of_cast(parse_cast_ref(quote)))

    async def work(auth):
        from hypercast.actions import CastActions

        return await CastActions(auth).post(text, embeds=embeds, parent=parent)

    message = run_async(lambda: _with_auth(work))
    kind = "Reply" if parent else "Quote cast" if quote else "Cast"
    console.print(f"[green]>[/green] {kind} submitted")
    console.print(f"Hash: [cyan]{message.hash}[/cyan]")


@app.command()
def delete(cast_hash: str = typer.Argument(..., help="Hash of one of your casts")):
    """Remove one of your casts."""

    async def work(auth):
        from hypercast.actions import CastActions

        return await CastActions(auth).remove(cast_hash)

    try:
        CastId.from_hex(0, cast_hash)
    except ValueError:
        raise typer.BadParameter(f"not a hex hash: {cast_hash!r}")

    message = run_async(lambda: _with_auth(work))
    console.print("[green]>[/green] Cast removed")
    console.print(f"Hash: [cyan]{message.hash}[/cyan]")


# ============================================================================
# Read commands
# ============================================================================


@app.command()
def feed(
    fid: int = typer.Argument(None, help="FID to read (default: your own)"),
    limit: int = typer.Option(10, "--limit", "-n", help="Number of casts"),
):
    """Show recent casts by an account."""
    from hypercast.view import format_cast, format_profile, get_feed, get_profile

    async def work(config, client):
        target = fid or config.account.fid
        if target <= 0:
            raise fail("No FID given and FARCASTER_FID is not set.")
        casts = await get_feed(client, target, limit)
        profile = await get_profile(client, target) if casts else None
        return target, casts, profile

    target, casts, profile = run_async(lambda: _with_client(work))
    if not casts:
        console.print(f"No casts found for FID {target}.")
        return

    console.print(format_profile(profile), markup=False, highlight=False)
    for i, cast in enumerate(casts):
        console.print()
        console.print(format_cast(cast, profile, index=i), markup=False, highlight=False)
        console.print(f"[dim]{cast.cast_id}[/dim]")


@app.command()
def profile(fid: int = typer.Argument(None, help="FID to show (default: your own)")):
    """Show an account's profile."""
    from hypercast.view import format_profile, get_profile

    async def work(config, client):
        target = fid or config.account.fid
        if target <= 0:
            raise fail("No FID given and FARCASTER_FID is not set.")
        return await get_profile(client, target)

    found = run_async(lambda: _with_client(work))
    console.print(format_profile(found), markup=False, highlight=False)


@app.command()
def node():
    """Show node status."""
    from hypercast.view import format_node_info

    async def work(config, client):
        return await client.fetch_node_status()

    info = run_async(lambda: _with_client(work))
    console.print(format_node_info(info), markup=False, highlight=False)


# ============================================================================
# Bot Command
# ============================================================================


@app.command()
def bot():
    """Start the Telegram bot."""
    from hypercast.auth import load_auth
    from hypercast.bot import BotDispatcher
    from hypercast.channels import TelegramChannel
    from hypercast.config import load_config

    try:
        config = load_config()
    except HypercastError as e:
        raise fail(str(e))

    telegram = config.channels.telegram
    if not telegram.token:
        raise fail(
            "No Telegram bot token configured.",
            "Run [cyan]hypercast telegram onboard[/cyan] to set one up.",
        )
    if not telegram.allow_from:
        console.print(
            "[yellow]Warning: no allow-list, any Telegram user can act as your account[/yellow]"
        )

    console.print("Starting hypercast bot...")

    async def run():
        auth = await load_auth(config)
        channel = TelegramChannel(telegram.token, BotDispatcher(auth), telegram.allow_from)
        console.print(f"[green]>[/green] Signing as FID {auth.fid}")
        try:
            await channel.start()
        finally:
            await channel.stop()
            await auth.client.close()

    try:
        run_async(run)
    except KeyboardInterrupt:
        console.print("\nShutting down...")


# ============================================================================
# Status Command
# ============================================================================


@app.command()
def status():
    """Show configuration status."""
    from hypercast.config import get_config_path, load_config

    config_path = get_config_path()
    try:
        config = load_config()
    except HypercastError as e:
        raise fail(str(e))

    console.print("hypercast Status\n")

    console.print(
        f"Config:    {config_path} "
        f"{'[green]>[/green]' if config_path.exists() else '[red]x[/red]'}"
    )
    console.print(f"FID:       {config.account.fid or '[dim]not set[/dim]'}")

    if config.signer.private_key.strip():
        signer = "[green]private key[/green]"
    elif config.signer.mnemonic.strip():
        signer = "[green]mnemonic[/green]"
    else:
        signer = "[dim]not set[/dim]"
    console.print(f"Signer:    {signer}")

    console.print(f"Node:      {config.node.http_addr or '[dim]not set[/dim]'}")
    console.print(f"Network:   {config.node.network}")

    console.print(
        f"Telegram:  "
        f"{'[green]enabled[/green]' if config.channels.telegram.enabled else '[dim]disabled[/dim]'}"
    )

    if not (config.account.fid and config.has_credential and config.node.http_addr):
        console.print(
            "\n[yellow]Run [cyan]hypercast onboard[/cyan] to finish setup.[/yellow]"
        )


if __name__ == "__main__":
    app()
