import glob
import pathlib

import typer
from parse import parse  # type: ignore[import-untyped]
from PIL import Image

from quadview.config import player, setup_logging
from quadview.container.errors import ParseError
from quadview.container.parse import from_path
from quadview.container.preset import dat, dat_msvc
from quadview.container.trace import dump_frames
from quadview.graphics.canvas import CanvasCompositor
from quadview.graphics.image import PillowDecoder
from quadview.playback.driver import CompositorDriver
from quadview.playback.loader import close_viewports, load_viewports
from quadview.utils.funcutils import flatten

app = typer.Typer()


def parse_size(value: str) -> tuple[int, int]:
    result = parse('{width:d}x{height:d}', value)
    if not result or result['width'] <= 0 or result['height'] <= 0:
        raise typer.BadParameter(f'expected WIDTHxHEIGHT but got {value!r}')
    return result['width'], result['height']


def check_animation_output(output: pathlib.Path) -> None:
    fmt = Image.registered_extensions().get(output.suffix.lower())
    if fmt not in Image.SAVE_ALL:
        raise typer.BadParameter(
            f'cannot write an animation to {output.name!r}',
            param_hint='--output',
        )


def expand(files: list[str]) -> list[str]:
    return sorted(set(flatten(glob.glob(r) or [r] for r in files)))


@app.callback()
def main(
    verbose: int = typer.Option(0, '--verbose', '-v', count=True),
) -> None:
    setup_logging(verbose)


@app.command()
def info(
    files: list[str] = typer.Argument(..., help='*.dat files to read from'),
    msvc: bool = typer.Option(False, help='read the padded MSVC layout'),
) -> None:
    cfg = dat_msvc if msvc else dat
    decoder = PillowDecoder()
    failed = False
    for filename in expand(files):
        try:
            container = from_path(filename, decoder, cfg=cfg)
        except ParseError as exc:
            typer.echo(f'{filename}: {exc}', err=True)
            failed = True
            continue
        with container:
            typer.echo(
                f'{filename}: version={container.info.version} '
                f'frames={len(container)} cycle={container.info.cycle_ms}ms'
            )
            for idx, frame in enumerate(container):
                width, height = frame.image.size
                typer.echo(
                    f'    <frame {idx} {frame.image.format} {width}x{height}'
                    f' delay={frame.delay_ms}ms />'
                )
    if failed:
        raise typer.Exit(code=1)


@app.command()
def extract(
    files: list[str] = typer.Argument(..., help='*.dat files to read from'),
    output: pathlib.Path = typer.Option(pathlib.Path('.'), '--output', '-o'),
    msvc: bool = typer.Option(False, help='read the padded MSVC layout'),
) -> None:
    cfg = dat_msvc if msvc else dat
    decoder = PillowDecoder()
    failed = False
    for filename in expand(files):
        stem = pathlib.Path(filename).stem
        sink = dump_frames(output, name=f'{stem}_{{index}}.bin')
        try:
            with from_path(filename, decoder, cfg=cfg, trace=sink) as container:
                typer.echo(f'{filename}: extracted {len(container)} frames')
        except ParseError as exc:
            typer.echo(f'{filename}: {exc}', err=True)
            failed = True
    if failed:
        raise typer.Exit(code=1)


@app.command()
def render(
    directory: pathlib.Path = typer.Argument(..., help='directory holding the viewport files'),
    output: pathlib.Path = typer.Option(..., '--output', '-o', help='animated image to write'),
    size: str = typer.Option(f'{player.width}x{player.height}', help='canvas size as WxH'),
    duration: int = typer.Option(1000, help='simulated run time in ms'),
    tick: int = typer.Option(player.tick_ms, help='timer interval in ms'),
    viewports: int = typer.Option(player.viewports),
    pattern: str = typer.Option(player.pattern, help='file name pattern, {index} is the viewport'),
    msvc: bool = typer.Option(False, help='read the padded MSVC layout'),
) -> None:
    width, height = parse_size(size)
    check_animation_output(output)
    try:
        config = player(
            viewports=viewports,
            pattern=pattern,
            tick_ms=tick,
            width=width,
            height=height,
            layout='dat_msvc' if msvc else 'dat',
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    # simulated clock, the run starts at t=0
    schedulers = load_viewports(directory, PillowDecoder(), config=config, clock=lambda: 0)
    compositor = CanvasCompositor(width, height)
    driver = CompositorDriver(schedulers, compositor)
    try:
        driver.redraw_all()
        frames = [compositor.snapshot()]
        durations = [0]
        for now in range(tick, duration + 1, tick):
            durations[-1] += tick
            if driver.on_timer(now):
                frames.append(compositor.snapshot())
                durations.append(0)
    finally:
        close_viewports(schedulers)

    durations[-1] = max(durations[-1], tick)
    frames[0].save(
        output,
        save_all=True,
        append_images=frames[1:],
        duration=durations,
        loop=0,
    )
    failed = sum(1 for s in schedulers if s.viewport.error)
    typer.echo(f'{output}: {len(frames)} frames, {failed} viewport(s) failed to load')


if __name__ == '__main__':
    app()
