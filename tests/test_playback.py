"""
Playback Tests
==============

Scheduler state machine, compositor driver fan-out and grid layout.
"""

import pytest

from conftest import build_container, file_header
from quadview.container.parse import parse
from quadview.playback.driver import CompositorDriver
from quadview.playback.layout import Rect, grid_layout
from quadview.playback.scheduler import PlaybackScheduler, Viewport


def make_container(decoder, nframes=3, cycle_ms=100):
    payloads = [f'frame-{idx}'.encode() for idx in range(nframes)]
    return parse(build_container(payloads, cycle_ms=cycle_ms), decoder)


class RecordingCompositor:
    def __init__(self):
        self.calls = []

    def on_redraw_requested(self, surface, image, rect):
        self.calls.append((surface, image.data if image else None, rect))


class TestScheduler:
    def test_unbound_is_noop(self):
        scheduler = PlaybackScheduler(clock=lambda: 0)

        assert not scheduler.playing
        assert scheduler.tick(10_000) is False
        assert scheduler.reset(10_000) is False
        assert scheduler.viewport.index == 0
        assert scheduler.viewport.current_frame() is None

    def test_bind_starts_at_first_frame(self, decoder):
        scheduler = PlaybackScheduler(clock=lambda: 500)
        scheduler.bind(make_container(decoder))

        assert scheduler.playing
        assert scheduler.viewport.index == 0
        assert scheduler.viewport.last_advance == 500

    def test_advances_after_delay(self, decoder):
        scheduler = PlaybackScheduler()
        scheduler.bind(make_container(decoder), now=0)

        assert scheduler.tick(99) is False
        assert scheduler.viewport.index == 0
        assert scheduler.tick(100) is True
        assert scheduler.viewport.index == 1
        assert scheduler.viewport.last_advance == 100

    def test_tick_is_idempotent_within_window(self, decoder):
        scheduler = PlaybackScheduler()
        scheduler.bind(make_container(decoder), now=0)
        assert scheduler.tick(150) is True

        assert [scheduler.tick(150) for _ in range(5)] == [False] * 5
        assert scheduler.tick(249) is False
        assert scheduler.tick(250) is True
        assert scheduler.viewport.index == 2

    def test_one_frame_per_tick_without_catch_up(self, decoder):
        scheduler = PlaybackScheduler()
        scheduler.bind(make_container(decoder), now=0)

        assert scheduler.tick(1_000) is True
        assert scheduler.viewport.index == 1
        assert scheduler.tick(1_000) is False

    @pytest.mark.parametrize('nframes', [1, 2, 5])
    def test_index_wraps(self, decoder, nframes):
        scheduler = PlaybackScheduler()
        scheduler.bind(make_container(decoder, nframes=nframes, cycle_ms=10), now=0)

        seen = []
        for step in range(1, nframes + 1):
            assert scheduler.tick(step * 10) is True
            seen.append(scheduler.viewport.index)

        assert seen[-1] == 0
        assert sorted(seen) == list(range(nframes))

    def test_empty_container_never_changes(self, decoder):
        scheduler = PlaybackScheduler()
        scheduler.bind(parse(file_header(0, 0), decoder), now=0)

        assert scheduler.playing
        assert not any(scheduler.tick(t) for t in range(0, 1000, 16))
        assert scheduler.viewport.index == 0
        assert scheduler.viewport.current_frame() is None

    def test_reset_returns_to_first_frame(self, decoder):
        scheduler = PlaybackScheduler()
        scheduler.bind(make_container(decoder), now=0)
        scheduler.tick(100)
        scheduler.tick(200)
        assert scheduler.viewport.index == 2

        assert scheduler.reset(230) is True
        assert scheduler.viewport.index == 0
        assert scheduler.viewport.last_advance == 230
        assert scheduler.tick(329) is False

    def test_reset_on_empty_container_reports_change(self, decoder):
        scheduler = PlaybackScheduler()
        scheduler.bind(parse(file_header(0, 50), decoder), now=0)
        assert scheduler.reset(10) is True

    def test_unbind_releases_container(self, decoder):
        scheduler = PlaybackScheduler()
        container = make_container(decoder)
        scheduler.bind(container, now=0)
        scheduler.tick(100)

        scheduler.unbind()

        assert not scheduler.playing
        assert container.closed
        assert decoder.live == []
        assert scheduler.tick(1_000) is False

    def test_rebind_releases_previous_container(self, decoder):
        scheduler = PlaybackScheduler()
        first = make_container(decoder, nframes=2)
        second = make_container(decoder, nframes=4)
        scheduler.bind(first, now=0)
        scheduler.tick(100)

        scheduler.bind(second, now=300)

        assert first.closed
        assert not second.closed
        assert len(decoder.live) == 4
        assert scheduler.viewport.index == 0
        assert scheduler.viewport.last_advance == 300


class TestCompositorDriver:
    def make_driver(self, decoder, delays=(100, 40, None, 0)):
        schedulers = []
        for idx, delay in enumerate(delays):
            scheduler = PlaybackScheduler(Viewport(surface=f'surface-{idx}', rect=Rect(idx, 0, 1, 1)))
            if delay is not None:
                scheduler.bind(make_container(decoder, nframes=2, cycle_ms=delay), now=0)
            schedulers.append(scheduler)
        compositor = RecordingCompositor()
        return CompositorDriver(schedulers, compositor, clock=lambda: 0), compositor

    def test_timer_redraws_changed_viewports_only(self, decoder):
        driver, compositor = self.make_driver(decoder)

        assert driver.on_timer(40) == [1, 3]
        assert compositor.calls == [
            ('surface-1', b'frame-1', Rect(1, 0, 1, 1)),
            ('surface-3', b'frame-1', Rect(3, 0, 1, 1)),
        ]

        compositor.calls.clear()
        assert driver.on_timer(100) == [0, 1, 3]
        assert [call[1] for call in compositor.calls] == [b'frame-1', b'frame-0', b'frame-0']

    def test_unbound_viewport_is_skipped(self, decoder):
        driver, compositor = self.make_driver(decoder)

        for now in range(0, 1000, 16):
            assert 2 not in driver.on_timer(now)
        assert all(call[0] != 'surface-2' for call in compositor.calls)

    def test_reset_redraws_every_playing_viewport(self, decoder):
        driver, compositor = self.make_driver(decoder)
        driver.on_timer(100)
        compositor.calls.clear()

        assert driver.on_reset(120) == [0, 1, 3]
        assert [call[1] for call in compositor.calls] == [b'frame-0'] * 3
        assert all(s.viewport.index == 0 for s in driver.schedulers)

    def test_relayout_assigns_grid_rects(self, decoder):
        driver, compositor = self.make_driver(decoder)

        assert driver.relayout(800, 600) == [0, 1, 3]
        assert [s.viewport.rect for s in driver.schedulers] == [
            Rect(0, 0, 400, 300),
            Rect(400, 0, 400, 300),
            Rect(0, 300, 400, 300),
            Rect(400, 300, 400, 300),
        ]
        assert len(compositor.calls) == 3

    def test_empty_container_redraws_blank_on_reset(self, decoder):
        scheduler = PlaybackScheduler(Viewport(surface='s'))
        scheduler.bind(parse(file_header(0, 10), decoder), now=0)
        compositor = RecordingCompositor()
        driver = CompositorDriver([scheduler], compositor)

        assert driver.on_timer(1_000) == []
        assert driver.on_reset(1_000) == [0]
        assert compositor.calls == [('s', None, None)]


class TestGridLayout:
    def test_quadrants(self):
        assert grid_layout(800, 600, 4) == [
            Rect(0, 0, 400, 300),
            Rect(400, 0, 400, 300),
            Rect(0, 300, 400, 300),
            Rect(400, 300, 400, 300),
        ]

    def test_odd_size_rounds_down(self):
        rects = grid_layout(801, 601, 4)
        assert {(r.width, r.height) for r in rects} == {(400, 300)}

    def test_explicit_columns(self):
        assert grid_layout(300, 100, 3, columns=3) == [
            Rect(0, 0, 100, 100),
            Rect(100, 0, 100, 100),
            Rect(200, 0, 100, 100),
        ]

    def test_partial_last_row(self):
        rects = grid_layout(300, 200, 5)
        assert len(rects) == 5
        assert rects[-1] == Rect(100, 100, 100, 100)

    def test_no_viewports(self):
        assert grid_layout(800, 600, 0) == []

    def test_box(self):
        assert Rect(10, 20, 30, 40).box == (10, 20, 40, 60)
