"""``trackswitch-backend``: the media backend as a standalone command.

Every result is written to stdout as protocol messages (see
``trackswitch.backend.protocol``); logs go to stderr.
"""

import sys
from pathlib import Path

import click

from trackswitch import __version__
from trackswitch.backend import protocol
from trackswitch.config import load_config
from trackswitch.core.prober import TrackProber
from trackswitch.core.remuxer import TrackRemuxer
from trackswitch.exceptions import BackendError
from trackswitch.utils.logger import get_logger, setup_logging


def _emit(response: protocol.Response) -> None:
    click.echo(response.encode())


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.pass_context
def backend(ctx, config):
    """Probe and remux video files, speaking JSON lines on stdout."""
    try:
        cfg = load_config(config)
    except Exception as e:
        _emit(protocol.failure(f"Error loading configuration: {e}"))
        sys.exit(1)

    setup_logging(cfg.logging)
    prober = TrackProber(cfg.backend.ffprobe_path, cfg.backend.probe_timeout_seconds)
    ctx.ensure_object(dict)
    ctx.obj["prober"] = prober
    ctx.obj["remuxer"] = TrackRemuxer(
        prober, cfg.backend.ffmpeg_path, cfg.backend.switch_timeout_seconds
    )


@backend.command("get-tracks")
@click.argument("video_path")
@click.pass_context
def get_tracks(ctx, video_path):
    """List the audio tracks of VIDEO_PATH."""
    prober: TrackProber = ctx.obj["prober"]

    try:
        info = prober.inspect(video_path)
    except BackendError as e:
        _emit(protocol.failure(e.cause))
        sys.exit(1)

    _emit(protocol.success(protocol.TRACKS_RETRIEVED_MESSAGE, info.to_dict()))


@backend.command("switch-track")
@click.argument("input_path")
@click.argument("track_index", type=int)
@click.argument("output_path")
@click.pass_context
def switch_track(ctx, input_path, track_index, output_path):
    """Copy INPUT_PATH to OUTPUT_PATH with TRACK_INDEX as default audio."""
    remuxer: TrackRemuxer = ctx.obj["remuxer"]
    logger = get_logger(__name__)

    def _on_progress(percent: float) -> None:
        _emit(protocol.progress(percent))

    try:
        remuxer.switch(input_path, track_index, output_path, _on_progress)
    except BackendError as e:
        logger.debug("Switch failed", file=input_path, cause=e.cause)
        _emit(protocol.failure(e.cause))
        sys.exit(1)

    _emit(protocol.success(protocol.TRACK_SWITCHED_MESSAGE, {"outputPath": output_path}))


def main():
    """Entry point for the backend command."""
    backend(obj={})


if __name__ == "__main__":
    main()
