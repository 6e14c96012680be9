"""Tests for idle rotation and the frame scheduler."""

import pytest

from ideasphere.animation import ROTATION_STEP, AnimationScheduler, ManualFrameSource, advance
from ideasphere.interaction import InteractionController
from ideasphere.model import AutoRotating, Dragging, Idea, Inspecting, PointerTrack, ViewState


class TestAdvance:

    @pytest.mark.parametrize("ticks", [1, 2, 10, 333])
    def test_rotation_accumulates_per_tick(self, ticks):
        view = ViewState(0.2, 1.0, 1.5)
        out = advance(view, AutoRotating(), ticks)
        assert out.rotation_y == pytest.approx(1.0 + ROTATION_STEP * ticks)
        assert out.rotation_x == view.rotation_x
        assert out.zoom == view.zoom

    @pytest.mark.parametrize(
        "state", [Dragging(PointerTrack(0, 0)), Inspecting(Idea("a", "Alpha"))]
    )
    def test_frozen_outside_auto_rotation(self, state):
        view = ViewState(0.2, 1.0, 1.0)
        assert advance(view, state, 50) is view

    def test_zero_ticks_is_identity(self):
        view = ViewState()
        assert advance(view, AutoRotating(), 0) is view

    def test_custom_step(self):
        assert advance(ViewState(), AutoRotating(), 4, step=0.5).rotation_y == pytest.approx(2.0)


class TestManualFrameSource:

    def test_fire_without_start(self):
        source = ManualFrameSource()
        assert source.fire(3) == 0
        assert not source.active

    def test_fire_calls_callback(self):
        calls = []
        source = ManualFrameSource()
        source.start(lambda: calls.append(1))
        assert source.fire(3) == 3
        assert len(calls) == 3
        source.stop()
        assert source.fire() == 0


class TestAnimationScheduler:
    """Start/stop/close lifecycle driven by a manual source."""

    @pytest.fixture
    def controller(self):
        return InteractionController()

    @pytest.fixture
    def source(self):
        return ManualFrameSource()

    def test_ticks_rotate_while_running(self, controller, source):
        scheduler = AnimationScheduler(controller, source)
        scheduler.start()
        assert scheduler.running
        source.fire(10)
        assert scheduler.ticks == 10
        assert controller.view.rotation_y == pytest.approx(10 * ROTATION_STEP)

    def test_stop_halts_rotation(self, controller, source):
        scheduler = AnimationScheduler(controller, source)
        scheduler.start()
        source.fire(2)
        scheduler.stop()
        assert not scheduler.running
        assert not source.active
        before = controller.view
        assert not scheduler.tick()
        assert controller.view is before

    def test_restart_resumes(self, controller, source):
        scheduler = AnimationScheduler(controller, source)
        scheduler.start()
        scheduler.stop()
        scheduler.start()
        source.fire(3)
        assert controller.view.rotation_y == pytest.approx(3 * ROTATION_STEP)

    def test_start_twice_is_harmless(self, controller, source):
        scheduler = AnimationScheduler(controller, source)
        scheduler.start()
        scheduler.start()
        source.fire()
        assert scheduler.ticks == 1

    def test_close_is_final(self, controller, source):
        scheduler = AnimationScheduler(controller, source)
        scheduler.start()
        scheduler.close()
        assert scheduler.closed
        assert not source.active
        with pytest.raises(RuntimeError):
            scheduler.start()
        assert not scheduler.tick()

    def test_close_twice(self, controller, source):
        scheduler = AnimationScheduler(controller, source)
        scheduler.close()
        scheduler.close()
        assert scheduler.closed

    def test_dragging_freezes_rotation_but_frames_continue(self, controller, source):
        frames = []
        scheduler = AnimationScheduler(controller, source, on_frame=lambda: frames.append(1))
        scheduler.start()
        controller._set_state(Dragging(PointerTrack(0, 0)))
        before = controller.view
        source.fire(5)
        assert controller.view is before
        assert len(frames) == 5

    def test_reentrant_tick_is_skipped(self, controller, source):
        """A frame callback that ticks again does not advance a second time."""
        nested = []
        scheduler = AnimationScheduler(controller, source)
        scheduler.on_frame = lambda: nested.append(scheduler.tick())
        scheduler.start()
        source.fire()
        assert nested == [False]
        assert scheduler.ticks == 1
        assert controller.view.rotation_y == pytest.approx(ROTATION_STEP)

    def test_default_source_is_manual(self, controller):
        scheduler = AnimationScheduler(controller)
        assert isinstance(scheduler.source, ManualFrameSource)
