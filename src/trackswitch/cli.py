"""Command-line interface for trackswitch."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from trackswitch import __version__
from trackswitch.backend import create_backend
from trackswitch.config import Config, load_config
from trackswitch.exceptions import TrackSwitchError
from trackswitch.shell.controller import MessageKind, ShellController
from trackswitch.shell.i18n import Localizer
from trackswitch.shell.picker import DialogFilePicker, FilePicker, PromptFilePicker
from trackswitch.utils.logger import get_logger, setup_logging

MESSAGE_COLORS = {
    MessageKind.INFO: None,
    MessageKind.SUCCESS: "green",
    MessageKind.ERROR: "red",
}


def _build_controller(config: Config, localizer: Localizer) -> ShellController:
    return ShellController(
        create_backend(config.backend),
        localizer,
        include_language=config.ui.include_language_in_output,
        unknown_language=config.ui.unknown_language,
    )


def _render_message(controller: ShellController) -> None:
    message = controller.message
    if message is None:
        return
    click.secho(message.text, fg=MESSAGE_COLORS[message.kind], err=message.is_error)


def _render_tracks(controller: ShellController) -> None:
    info = controller.video_info
    if info is None:
        return

    t = controller.localizer.translate
    click.echo(t("tracks.header", count=len(info.audio_tracks)))
    for track in info.audio_tracks:
        marker = "*" if track.index == controller.selected_index else " "
        parts = [f"  [{marker}] {t('tracks.track', index=track.index)}"]
        if track.language:
            parts.append(t("tracks.language", language=track.language))
        if track.title:
            parts.append(t("tracks.title", title=track.title))
        parts.append(t("tracks.codec", codec=track.codec))
        click.echo("  ".join(parts))


async def _run_switch(controller: ShellController, output: Optional[str]) -> Optional[str]:
    """Run a switch, advancing a progress bar as events arrive."""
    with click.progressbar(
        length=100,
        label=controller.localizer.translate("progress.label"),
        show_percent=True,
        show_eta=False,
    ) as bar:

        def _advance(_value: float) -> None:
            # The controller listener runs first, so display_progress is current
            bar.update(controller.display_progress - bar.pos)

        subscription = controller.channel.subscribe(_advance)
        try:
            return await controller.switch_track(output)
        finally:
            subscription.unsubscribe()


def _exit_for(controller: ShellController) -> None:
    if controller.message is not None and controller.message.is_error:
        sys.exit(1)
    sys.exit(0)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.option("--language", "-l", default=None, help="Display language (en, zh)")
@click.option(
    "--backend",
    "backend_mode",
    type=click.Choice(["local", "process"]),
    default=None,
    help="Run the media backend in-process or as a child process",
)
@click.pass_context
def cli(ctx, config, language, backend_mode):
    """trackswitch - make another embedded audio track the default."""
    try:
        cfg = load_config(config)
        if language:
            cfg.ui.language = language
        if backend_mode:
            cfg.backend.mode = backend_mode

        setup_logging(cfg.logging)
        localizer = Localizer.load(cfg.ui.language, cfg.ui.fallback_language)
    except (OSError, ValueError, ValidationError, TrackSwitchError) as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg
    ctx.obj["localizer"] = localizer


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False))
@click.pass_context
def inspect(ctx, file):
    """List the audio tracks of FILE."""
    controller = _build_controller(ctx.obj["config"], ctx.obj["localizer"])
    get_logger(__name__).debug("Inspecting", file=file)

    asyncio.run(controller.load_tracks(file))

    _render_tracks(controller)
    _render_message(controller)
    _exit_for(controller)


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--track", "-t", type=int, default=None, help="Track index (default: first track)")
@click.option("--output", "-o", default=None, help="Output path (default: derived from FILE)")
@click.pass_context
def switch(ctx, file, track, output):
    """Copy FILE with TRACK as the default audio track."""
    controller = _build_controller(ctx.obj["config"], ctx.obj["localizer"])

    async def _switch():
        controller.start()
        try:
            controller.video_path = file
            if await controller.load_tracks(file) is None:
                return
            if track is not None and not controller.select_track(track):
                return
            await _run_switch(controller, output)
        finally:
            controller.shutdown()

    asyncio.run(_switch())

    _render_message(controller)
    _exit_for(controller)


@cli.command()
@click.option(
    "--dialog/--prompt",
    default=False,
    help="Choose the file with a native dialog instead of a terminal prompt",
)
@click.pass_context
def pick(ctx, dialog):
    """Pick a video, choose a track and switch interactively."""
    config: Config = ctx.obj["config"]
    localizer: Localizer = ctx.obj["localizer"]
    controller = _build_controller(config, localizer)
    t = localizer.translate

    picker: FilePicker
    if dialog:
        picker = DialogFilePicker(
            config.ui.video_extensions,
            title=t("file.dialog_title"),
            filter_name=t("file.filter_name"),
        )
    else:
        picker = PromptFilePicker(
            config.ui.video_extensions,
            title=t("file.dialog_title"),
            filter_name=t("file.filter_name"),
            prompt=t("file.prompt"),
        )

    click.secho(t("app.title"), bold=True)
    click.echo(t("app.subtitle"))
    click.echo("")

    async def _pick():
        controller.start()
        try:
            if not await controller.select_file(picker):
                if controller.message is None:
                    click.echo(t("file.cancelled"))
                return

            click.echo(t("file.selected", path=controller.video_path))
            _render_tracks(controller)
            if not controller.can_switch:
                return

            _render_message(controller)
            choices = [str(track.index) for track in controller.video_info.audio_tracks]
            answer = click.prompt(
                t("tracks.prompt"),
                type=click.Choice(choices),
                default=str(controller.selected_index),
            )
            controller.select_track(int(answer))
            await _run_switch(controller, None)
        finally:
            controller.shutdown()

    asyncio.run(_pick())

    _render_message(controller)
    _exit_for(controller)


@cli.command()
def version():
    """Show version information."""
    click.echo(f"trackswitch v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
