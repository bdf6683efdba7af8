"""
Session commands for the mlbv CLI: login, logout, status.
"""

import click

from .utils import (
    get_cli_context,
    get_session_manager,
    handle_errors,
    print_success,
)


@click.command()
@click.pass_context
@handle_errors
def login(ctx: click.Context) -> None:
    """
    Sign in to MLB.tv and store the session.

    In password mode the username/password come from the config file or
    MLBV_USERNAME/MLBV_PASSWORD, and are prompted for otherwise. In browser
    mode a sign-in URL is opened and the result is captured locally.
    """
    cli_ctx = get_cli_context(ctx)
    config = cli_ctx.config

    if (
        cli_ctx.session_manager is None
        and config.login_mode == "password"
        and not config.has_credentials
    ):
        config.username = config.username or click.prompt("MLB.tv username")
        config.password = config.password or click.prompt(
            "MLB.tv password", hide_input=True
        )

    session = get_session_manager(ctx).login()

    print_success("Logged in to MLB.tv")
    capabilities = sorted(c.value for c in session.entitlement_flags)
    click.echo(f"Access: {', '.join(capabilities) if capabilities else 'free content only'}")


@click.command()
@click.pass_context
@handle_errors
def logout(ctx: click.Context) -> None:
    """Delete the stored MLB.tv session."""
    if get_session_manager(ctx).logout():
        print_success("Logged out")
    else:
        click.echo("Not logged in")


@click.command()
@click.pass_context
@handle_errors
def status(ctx: click.Context) -> None:
    """Show whether a session is stored and when it expires."""
    info = get_session_manager(ctx).status()

    if info["logged_in"]:
        click.echo("Logged in: yes")
        click.echo(f"Expires:   {info['expires_at']}")
        if info["expired"]:
            click.echo("           (expired; refreshed on next use)")
        else:
            click.echo(f"           (in {info['expires_in_seconds'] // 60} minutes)")
    else:
        click.echo("Logged in: no")

    if "capabilities" in info:
        click.echo(f"Access:    {', '.join(info['capabilities']) or 'none'}")
    click.echo(f"Session:   {info['session_file']}")
