"""Command-line interface for docker-pullator."""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Coroutine, List, Optional

import typer

from .config import DEFAULT_CONFIG_PATH, load_config, save_config
from .core.runtime import DockerExecutor
from .core.session import create_session
from .core.types import DEFAULT_HUB_URL, HubConfig, ImageIdentity
from .exceptions import PullatorError
from .operations.sync import ImageSynchronizer, PushReport
from .operations.tags import TagResponseCache, fetch_tags
from .utils.reference import parse_image_reference

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Track container images and mirror them to another registry.",
    no_args_is_help=True,
)


@dataclass
class Settings:
    config_path: Path = Path(DEFAULT_CONFIG_PATH)
    hub: HubConfig = field(default_factory=HubConfig)
    docker_binary: str = "docker"
    dry_run: bool = False

    def executor(self) -> DockerExecutor:
        return DockerExecutor(binary=self.docker_binary, dry_run=self.dry_run)


def parse_selection(text: str, choices: List[str]) -> List[str]:
    """Parse a comma-separated selection, keeping only known choices in input order."""
    selected: List[str] = []
    for item in text.split(","):
        item = item.strip()
        if not item or item in selected:
            continue
        if item not in choices:
            typer.echo(f"Ignoring unknown tag: {item}", err=True)
            continue
        selected.append(item)
    return selected


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    try:
        return asyncio.run(coro)
    except PullatorError as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e


def _finish(report: PushReport) -> None:
    typer.echo(f"Pushed {len(report.pushed)} image(s)")
    if not report.ok:
        for failure in [*report.failures, *report.clean_failures]:
            typer.echo(f"  {failure}", err=True)
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_PATH), "--config", "-c", help="Path to the config file"
    ),
    hub_url: str = typer.Option(
        DEFAULT_HUB_URL, "--hub-url", envvar="PULLATOR_HUB_URL", help="Tag listing API"
    ),
    docker_binary: str = typer.Option(
        "docker",
        "--docker-binary",
        envvar="PULLATOR_DOCKER_BINARY",
        help="Container runtime executable",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print runtime commands without running them"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Settings(
        config_path=config,
        hub=HubConfig(url=hub_url),
        docker_binary=docker_binary,
        dry_run=dry_run,
    )


async def _add(
    settings: Settings,
    identity: ImageIdentity,
    tags: List[str],
) -> None:
    store = await load_config(settings.config_path)

    if not tags:
        descriptors = await fetch_tags(identity, settings.hub)
        names = sorted((d.name for d in descriptors), reverse=True)
        if not names:
            typer.echo(f"No tags found for {identity}")
            return
        for name in names:
            typer.echo(f"  {name}")
        tags = parse_selection(typer.prompt("Tags to add (comma-separated)"), names)

    if not tags:
        typer.echo("Nothing selected")
        return

    profile = store.merge_tags(identity, tags)
    typer.echo(f"{profile.image}: {', '.join(profile.sorted_tags())}")
    await save_config(settings.config_path, store)


@app.command()
def add(
    ctx: typer.Context,
    image: Optional[str] = typer.Argument(
        None, help="Image reference, e.g. nginx:1.25 or bitnami/redis"
    ),
    library: Optional[str] = typer.Option(
        None, "--library", "-l", help="Library (namespace); empty for the default"
    ),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Repository name"),
    tags: Optional[List[str]] = typer.Option(None, "--tag", "-t", help="Tag to track"),
) -> None:
    """Add images and tags to the config."""
    tags = list(tags or [])

    if image:
        try:
            identity, tag = parse_image_reference(image)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="IMAGE") from e
        if tag:
            tags.append(tag)
    else:
        if library is None:
            library = typer.prompt("Library (empty for the default)", default="")
        if name is None:
            name = typer.prompt("Name")
        identity = ImageIdentity(library=library.strip() or None, repo=name.strip())

    _run(_add(ctx.obj, identity, tags))


async def _edit(settings: Settings) -> None:
    store = await load_config(settings.config_path)
    keys = store.keys()
    if not keys:
        typer.echo("No profiles to edit")
        return

    for key in keys:
        typer.echo(f"  {key}")
    key = typer.prompt("Profile to edit")
    while key not in keys:
        typer.echo(f"Unknown profile: {key}", err=True)
        key = typer.prompt("Profile to edit")

    identity = ImageIdentity.parse(key)
    current = store.get(identity).sorted_tags()
    answer = typer.prompt("Tags to keep (comma-separated)", default=",".join(current))
    store.replace_tags(identity, parse_selection(answer, current))

    if identity not in store:
        typer.echo(f"Removed {key}")
    await save_config(settings.config_path, store)


@app.command()
def edit(ctx: typer.Context) -> None:
    """Choose which tags of a profile to keep."""
    _run(_edit(ctx.obj))


@app.command("list")
def list_profiles(ctx: typer.Context) -> None:
    """Show tracked images and tags."""
    store = _run(load_config(ctx.obj.config_path))
    for _, profile in store.list():
        typer.echo(f"{profile.image}: {', '.join(profile.sorted_tags())}")


async def _pull(settings: Settings) -> None:
    store = await load_config(settings.config_path)
    await ImageSynchronizer(settings.executor(), TagResponseCache(fetch_tags)).pull(store)
    await save_config(settings.config_path, store)


@app.command()
def pull(ctx: typer.Context) -> None:
    """Pull every tracked tag."""
    _run(_pull(ctx.obj))


async def _clean(settings: Settings) -> bool:
    store = await load_config(settings.config_path)
    synchronizer = ImageSynchronizer(settings.executor(), TagResponseCache(fetch_tags))
    failures = await synchronizer.clean(store)
    await save_config(settings.config_path, store)
    return not failures


@app.command()
def clean(ctx: typer.Context) -> None:
    """Remove every tracked tag from the local runtime."""
    if not _run(_clean(ctx.obj)):
        raise typer.Exit(code=1)


async def _push(settings: Settings, registry: str, clean_after: bool, sync: bool) -> PushReport:
    store = await load_config(settings.config_path)
    async with await create_session(settings.hub) as session:
        synchronizer = ImageSynchronizer(
            settings.executor(),
            TagResponseCache.for_session(session, settings.hub),
            clean_after_push=clean_after,
        )
        if sync:
            report = await synchronizer.sync(store, registry)
        else:
            report = await synchronizer.push(store, registry)
    await save_config(settings.config_path, store)
    return report


@app.command()
def push(
    ctx: typer.Context,
    repo: str = typer.Option(..., "--repo", "-r", help="Registry to push the images to"),
    clean_after: bool = typer.Option(False, "--clean", help="Clean local images afterwards"),
) -> None:
    """Push tracked tags and their digest aliases to a registry."""
    _finish(_run(_push(ctx.obj, repo, clean_after, sync=False)))


@app.command()
def sync(
    ctx: typer.Context,
    repo: str = typer.Option(..., "--repo", "-r", help="Registry to push the images to"),
    clean_after: bool = typer.Option(False, "--clean", help="Clean local images afterwards"),
) -> None:
    """Pull every tracked tag, then push them all."""
    _finish(_run(_push(ctx.obj, repo, clean_after, sync=True)))


if __name__ == "__main__":
    app()
