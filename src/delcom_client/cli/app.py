"""
Main CLI application entry point.

This module contains the Typer application and command handlers for
Delcom Client. The bearer token lives only in process memory, so every
command that needs it logs in first.
"""

from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional
import asyncio
import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from delcom_client import VERSION
from delcom_client.config.env_loader import EnvFileLoader, load_env_with_hierarchy
from delcom_client.config.settings import DelcomSettings, get_settings
from delcom_client.core.client.errors import InvalidFileError
from delcom_client.core.context import AppContext, create_app_context
from delcom_client.core.models import DetailedPost, ProfileUser
from delcom_client.media.image_file import materialize_image
from delcom_client.viewmodels.state import ActionResult

logger = logging.getLogger(__name__)

# Create the main Typer application
app = typer.Typer(
    name="delcom",
    help="Delcom Client - profile and post management for the Delcom API",
    add_completion=False,
    rich_markup_mode="rich",
)
profile_app = typer.Typer(help="View and edit your profile")
posts_app = typer.Typer(help="Manage your posts")
app.add_typer(profile_app, name="profile")
app.add_typer(posts_app, name="posts")

# Rich console for output
console = Console()

EmailOption = typer.Option(None, "--email", "-e", help="Account email (defaults to DELCOM_EMAIL)")
PasswordOption = typer.Option(None, "--password", "-p", help="Account password (defaults to DELCOM_PASSWORD)")


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"[bold blue]Delcom Client[/bold blue] version [green]{VERSION}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """
    Delcom Client - profile and post management for the Delcom API.
    """
    ctx.obj = {"debug": debug}


def load_settings(debug: bool = False) -> DelcomSettings:
    """Load .env files and settings, then configure logging."""
    load_env_with_hierarchy()
    settings = get_settings()
    if debug:
        settings.debug = True

    logging.basicConfig(
        level=getattr(logging, settings.effective_log_level),
        format="%(name)s:%(levelname)s:%(message)s",
    )
    logger.debug(f"Settings loaded: {settings.to_dict()}")
    return settings


def _is_debug(ctx: typer.Context) -> bool:
    return bool(ctx.obj and ctx.obj.get("debug"))


def _resolve_credentials(
    settings: DelcomSettings,
    email: Optional[str],
    password: Optional[str],
) -> Dict[str, str]:
    if not email and not password and settings.has_credentials:
        logger.debug("Using credentials from settings")
        return {"email": settings.email, "password": settings.password}

    email = email or settings.email or typer.prompt("Email")
    password = password or settings.password or typer.prompt("Password", hide_input=True)
    return {"email": email, "password": password}


def _report(result: ActionResult) -> None:
    """Print the outcome of an action; exit non-zero on failure."""
    if result.ok:
        if result.message:
            console.print(f"[green]✓[/green] {result.message}")
        return
    console.print(f"[red]Error:[/red] {result.message}")
    raise typer.Exit(1)


async def _run_signed_in(
    settings: DelcomSettings,
    email: Optional[str],
    password: Optional[str],
    action: Callable[[AppContext], Awaitable[None]],
) -> None:
    """Open a context, log in and run `action` inside it."""
    credentials = _resolve_credentials(settings, email, password)
    async with create_app_context(settings) as context:
        with console.status("[dim]Signing in...[/dim]"):
            result = await context.auth.login(credentials["email"], credentials["password"])
        _report(result)
        await action(context)


def _run(ctx: typer.Context, email: Optional[str], password: Optional[str], action) -> None:
    settings = load_settings(_is_debug(ctx))
    asyncio.run(_run_signed_in(settings, email, password, action))


def _resized(context: AppContext, image: Path) -> Path:
    """Resize a picked image for upload; exit with an error if it cannot be used."""
    settings = context.settings
    try:
        return materialize_image(image, settings.profile_image_size, settings.cache_dir)
    except InvalidFileError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)


# Rendering

def _render_profile(user: ProfileUser) -> None:
    lines = [
        f"[bold]Name:[/bold]  {user.name}",
        f"[bold]Email:[/bold] {user.email}",
        f"[bold]Phone:[/bold] {user.phone or '[dim]not set[/dim]'}",
        f"[bold]Photo:[/bold] {user.photo or '[dim]none[/dim]'}",
    ]
    if user.verified_at:
        lines.append(f"[dim]Verified {user.verified_at}[/dim]")
    console.print(Panel("\n".join(lines), title=f"Profile #{user.id}", border_style="blue"))


def _render_posts(posts) -> None:
    if not posts:
        console.print("[dim]No posts yet[/dim]")
        return

    table = Table(title="Your Posts", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Description", style="green")
    table.add_column("Likes", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("Updated", style="dim")

    for post in posts:
        table.add_row(
            str(post.id),
            post.description,
            str(len(post.likes)),
            str(len(post.comments)),
            post.updated_at,
        )
    console.print(table)


def _render_post(post: DetailedPost) -> None:
    body = [
        post.description,
        "",
        f"[dim]Cover:[/dim] {post.cover}",
        f"[dim]By {post.author.name} · {len(post.likes)} like(s)[/dim]",
    ]
    console.print(Panel("\n".join(body), title=f"Post #{post.id}", border_style="blue"))

    if post.comments:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Comment", style="green")
        table.add_column("Created", style="dim")
        for comment in post.comments:
            mine = " [cyan](you)[/cyan]" if post.my_comment and post.my_comment.id == comment.id else ""
            table.add_row(comment.comment + mine, comment.created_at)
        console.print(table)


# Commands

@app.command("version")
def version_command() -> None:
    """Show version information."""
    console.print(f"[bold blue]Delcom Client[/bold blue] version [green]{VERSION}[/green]")
    console.print(f"[dim]API: {DelcomSettings().base_url}[/dim]")


@app.command("config")
def config_command(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    settings = load_settings(_is_debug(ctx))

    table = Table(title="Current Configuration", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    for key, value in settings.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)

    env_loader = EnvFileLoader()
    env_file = env_loader.load_env_file()
    console.print(Panel(
        f"Environment File: {env_file or 'None found'}\n"
        f"Variables Loaded: {len(env_loader.get_loaded_vars())}",
        title="Environment Configuration",
        border_style="blue"
    ))


@app.command("register")
def register_command(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", prompt=True, help="Full name"),
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True, help="Password"
    ),
) -> None:
    """Create a new account."""
    settings = load_settings(_is_debug(ctx))

    async def _register() -> None:
        async with create_app_context(settings) as context:
            _report(await context.auth.register(name, email, password))

    asyncio.run(_register())


@profile_app.command("show")
def profile_show(
    ctx: typer.Context,
    email: Optional[str] = EmailOption,
    password: Optional[str] = PasswordOption,
) -> None:
    """Show your profile, including the locally stored phone number."""

    async def _show(context: AppContext) -> None:
        result = await context.profile.load_profile()
        _report(result)
        if result.value:
            _render_profile(result.value)

    _run(ctx, email, password, _show)


@profile_app.command("update")
def profile_update(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="New display name"),
    new_email: Optional[str] = typer.Option(None, "--new-email", help="New email address"),
    phone: Optional[str] = typer.Option(None, "--phone", help="Phone number, stored on this device only"),
    email: Optional[str] = EmailOption,
    password: Optional[str] = PasswordOption,
) -> None:
    """Update name, email or the device-local phone number."""

    async def _update(context: AppContext) -> None:
        profile = context.profile
        _report(await profile.load_profile())

        profile.enter_edit_mode()
        if name is not None:
            profile.temp_name.value = name
        if new_email is not None:
            profile.temp_email.value = new_email
        if phone is not None:
            profile.temp_phone.value = phone

        _report(await profile.update_profile())
        if profile.user.value:
            _render_profile(profile.user.value)

    _run(ctx, email, password, _update)


@profile_app.command("photo")
def profile_photo(
    ctx: typer.Context,
    image: Path = typer.Argument(..., help="Image file to upload"),
    email: Optional[str] = EmailOption,
    password: Optional[str] = PasswordOption,
) -> None:
    """Upload a new profile photo (resized before upload)."""

    async def _photo(context: AppContext) -> None:
        _report(await context.profile.update_profile_photo(_resized(context, image)))

    _run(ctx, email, password, _photo)


@posts_app.command("list")
def posts_list(
    ctx: typer.Context,
    email: Optional[str] = EmailOption,
    password: Optional[str] = PasswordOption,
) -> None:
    """List your posts."""

    async def _list(context: AppContext) -> None:
        _report(await context.posts.load_posts())
        _render_posts(context.posts.posts.value)

    _run(ctx, email, password, _list)


@posts_app.command("show")
def posts_show(
    ctx: typer.Context,
    post_id: int = typer.Argument(..., help="Post ID"),
    email: Optional[str] = EmailOption,
    password: Optional[str] = PasswordOption,
) -> None:
    """Show one post with its comments."""

    async def _show(context: AppContext) -> None:
        result = await context.posts.get_post(post_id)
        _report(result)
        _render_post(result.value)

    _run(ctx, email, password, _show)


@posts_app.command("add")
def posts_add(
    ctx: typer.Context,
    cover: Path = typer.Argument(..., help="Cover image file"),
    description: str = typer.Option(..., "--description", "-d", prompt=True, help="Post text"),
    email: Optional[str] = EmailOption,
    password: Optional[str] = PasswordOption,
) -> None:
    """Publish a new post."""

    async def _add(context: AppContext) -> None:
        result = await context.posts.add_post(_resized(context, cover), description)
        _report(result)
        console.print(f"[dim]New post id: {result.value}[/dim]")

    _run(ctx, email, password, _add)


@posts_app.command("edit")
def posts_edit(
    ctx: typer.Context,
    post_id: int = typer.Argument(..., help="Post ID"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New post text"),
    cover: Optional[Path] = typer.Option(None, "--cover", "-c", help="New cover image"),
    email: Optional[str] = EmailOption,
    password: Optional[str] = PasswordOption,
) -> None:
    """Change the description and/or the cover of a post."""

    async def _edit(context: AppContext) -> None:
        _report(await context.posts.load_posts())
        post = context.posts.find(post_id)
        if post is None:
            console.print("[red]Error:[/red] Post not found.")
            raise typer.Exit(1)

        editor = context.editor
        editor.open(post)
        if description is not None:
            editor.description.value = description
        editor.choose_cover(cover)

        outcome = await editor.save()
        if outcome.closed:
            console.print(f"[green]✓[/green] Post {post_id} updated")
            return

        for error in outcome.errors:
            console.print(f"[red]Error:[/red] {error}")
        if outcome.partial:
            console.print(
                f"[yellow]{outcome.succeeded} of {outcome.dispatched} change(s) were applied[/yellow]"
            )
        raise typer.Exit(1)

    _run(ctx, email, password, _edit)


@posts_app.command("delete")
def posts_delete(
    ctx: typer.Context,
    post_id: int = typer.Argument(..., help="Post ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    email: Optional[str] = EmailOption,
    password: Optional[str] = PasswordOption,
) -> None:
    """Delete a post."""
    if not yes:
        typer.confirm(f"Delete post {post_id}?", abort=True)

    async def _delete(context: AppContext) -> None:
        _report(await context.posts.delete_post(post_id))

    _run(ctx, email, password, _delete)


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
