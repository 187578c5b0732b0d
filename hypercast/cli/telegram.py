"""Telegram bot CLI commands."""

import typer
from rich.console import Console

from hypercast.config import get_config_path, load_config, save_config
from hypercast.errors import ConfigurationError

telegram_app = typer.Typer(
    name="telegram",
    help="Telegram bot front end.",
    no_args_is_help=True,
)

console = Console()


@telegram_app.command()
def onboard():
    """Interactive setup for the Telegram bot."""
    config_path = get_config_path()
    try:
        config = load_config(environ={})
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print("\n[bold]Telegram Bot Setup[/bold]\n")
    console.print("  1. Open Telegram and search for [cyan]@BotFather[/cyan]")
    console.print("  2. Send [cyan]/newbot[/cyan] and follow the prompts to create a bot")
    console.print("  3. Copy the bot token (looks like [dim]123456:ABC-xyz...[/dim])")
    console.print()

    # --- Bot token ---
    token = typer.prompt("Bot token", hide_input=True)
    if not token.strip():
        console.print("[red]Bot token cannot be empty.[/red]")
        raise typer.Exit(1)

    config.channels.telegram.token = token.strip()
    console.print("  [green]>[/green] Token saved\n")

    # --- User allow-list ---
    console.print("[bold]Restrict access[/bold] (strongly recommended)\n")
    console.print(
        "  Anyone allowed here can post, like and recast as your account.\n"
        "  To find your user ID, send [cyan]/start[/cyan] "
        "to [cyan]@userinfobot[/cyan] on Telegram.\n"
    )

    users = typer.prompt(
        "User IDs or @usernames, comma separated (blank allows everyone)", default=""
    )
    allow_from = [u.strip() for u in users.split(",") if u.strip()]
    config.channels.telegram.allow_from = allow_from
    if allow_from:
        console.print(f"  [green]>[/green] Access restricted to: {', '.join(allow_from)}\n")
    else:
        console.print(
            "  [yellow]>[/yellow] No restriction: any user can act as your account\n"
        )

    # --- Enable and save ---
    config.channels.telegram.enabled = True
    save_config(config)

    console.print(f"[green]>[/green] Config saved to {config_path}")
    console.print("\n[bold green]Telegram bot configured![/bold green]")
    console.print("Run [cyan]hypercast bot[/cyan] to start.\n")
