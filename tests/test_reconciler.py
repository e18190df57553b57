"""Tests for the reconciliation loop."""

import pytest

from layout_keeper.errors import ActuationError
from layout_keeper.geometry import Rect, Screen
from layout_keeper.layout_types import Layout, MatchingWindowInstance, WindowDescriptor
from layout_keeper.observation import RawWindow, build_layout
from layout_keeper.patterns import Exact, compile_pattern
from layout_keeper.positions import Maxed, Pos, Right
from layout_keeper.reconciler import MoveRequest, Reconciler

SCREEN = Screen(1, Rect(0, 0, 1920, 1080))
EXTERNAL = Screen(2, Rect(1920, 0, 2560, 1440))


def desired_window(owner, name, pos, screen_num=1):
    return WindowDescriptor(
        owner_name=compile_pattern(owner), name=compile_pattern(name), screen_num=screen_num, pos=pos
    )


def observed_window(owner, name, *instances):
    return WindowDescriptor(
        owner_name=Exact(owner),
        name=Exact(name),
        screen_num=instances[0].screen_num,
        pos=Pos(instances[0].bounds),
        instances=list(instances),
    )


def instance(bounds, screen_num=1, pid=42, wid=7):
    return MatchingWindowInstance(process_id=pid, window_id=wid, screen_num=screen_num, bounds=bounds)


class FakeActuator:
    def __init__(self, fail_ids=()):
        self.calls = []
        self.fail_ids = set(fail_ids)

    def move_window(self, process_id, window_id, target):
        self.calls.append((process_id, window_id, target))
        if window_id in self.fail_ids:
            raise ActuationError("AXUIElementSetAttributeValue failed: -25200")


def make_reconciler(observed_layouts, actuator=None, **kwargs):
    layouts = list(observed_layouts)
    sleeps = []

    def observe():
        return layouts.pop(0) if len(layouts) > 1 else layouts[0]

    reconciler = Reconciler(
        observe=observe, actuator=actuator or FakeActuator(), sleep=sleeps.append, **kwargs
    )
    return reconciler, sleeps


class TestPlanMoves:
    desired = Layout(
        screens=[SCREEN], windows=[desired_window("Terminal", "bash", Pos(Rect(0, 0, 800, 600)))]
    )

    def plan(self, bounds, screens=(SCREEN,)):
        observed = Layout(
            screens=list(screens), windows=[observed_window("Terminal", "bash", instance(bounds))]
        )
        reconciler, _ = make_reconciler([observed])
        return reconciler.plan_moves(self.desired, observed)

    def test_in_place_window_is_left_alone(self):
        assert self.plan(Rect(0, 0, 800, 600)) == []

    def test_three_pixel_drift_is_close_enough(self):
        assert self.plan(Rect(0, 0, 797, 600)) == []

    def test_five_pixel_drift_is_moved(self):
        assert self.plan(Rect(0, 0, 795, 600)) == [
            MoveRequest("Terminal", "bash", 42, 7, Rect(0, 0, 800, 600))
        ]

    def test_ten_pixel_drift_is_moved(self):
        assert len(self.plan(Rect(0, 0, 790, 600))) == 1

    def test_unmatched_windows_are_skipped(self):
        observed = Layout(
            screens=[SCREEN], windows=[observed_window("Mail", "Inbox", instance(Rect(5, 5, 300, 300)))]
        )
        reconciler, _ = make_reconciler([observed])
        matched = []
        reconciler.window_matched.connect(lambda owner, name: matched.append((owner, name)))

        assert reconciler.plan_moves(self.desired, observed) == []
        assert matched == []

    def test_each_duplicate_instance_is_evaluated(self):
        desired = Layout(screens=[SCREEN], windows=[desired_window("RustRover", "Find", Right(0.5))])
        observed = Layout(
            screens=[SCREEN],
            windows=[
                observed_window(
                    "RustRover",
                    "Find",
                    instance(Rect(960, 0, 960, 1080), pid=1, wid=11),
                    instance(Rect(10, 10, 400, 300), pid=1, wid=12),
                    instance(Rect(0, 0, 200, 200), pid=2, wid=13),
                )
            ],
        )
        reconciler, _ = make_reconciler([observed])

        requests = reconciler.plan_moves(desired, observed)

        assert [(r.process_id, r.window_id) for r in requests] == [(1, 12), (2, 13)]
        assert all(r.target == Rect(960, 0, 960, 1080) for r in requests)

    def test_desired_screen_resolved_against_live_screens(self):
        # The layout was saved with a 4K monitor that now has a different id
        saved_screens = [Screen(1, Rect(0, 0, 1920, 1080)), Screen(99, Rect(1920, 0, 2560, 1440))]
        desired = Layout(screens=saved_screens, windows=[desired_window("Slack", ".*", Maxed(), screen_num=2)])
        observed = Layout(
            screens=[SCREEN, EXTERNAL],
            windows=[observed_window("Slack", "general", instance(Rect(0, 0, 1000, 800)))],
        )
        reconciler, _ = make_reconciler([observed])

        (request,) = reconciler.plan_moves(desired, observed)

        assert request.owner_name == "Slack"
        assert request.name == "general"
        assert request.target == EXTERNAL.frame

    def test_current_position_uses_instance_screen(self):
        desired = Layout(
            screens=[SCREEN, EXTERNAL],
            windows=[desired_window("Terminal", "bash", Pos(Rect(100, 100, 800, 600)), screen_num=2)],
        )
        observed = Layout(
            screens=[SCREEN, EXTERNAL],
            windows=[observed_window("Terminal", "bash", instance(Rect(100, 100, 800, 600), screen_num=2))],
        )
        reconciler, _ = make_reconciler([observed])

        assert reconciler.plan_moves(desired, observed) == []

    def test_tolerance_is_configurable(self):
        observed = Layout(
            screens=[SCREEN], windows=[observed_window("Terminal", "bash", instance(Rect(0, 0, 795, 600)))]
        )
        reconciler, _ = make_reconciler([observed], tolerance=10)

        assert reconciler.plan_moves(self.desired, observed) == []


class TestReconcile:
    desired = Layout(
        screens=[SCREEN], windows=[desired_window("Terminal", "bash", Pos(Rect(0, 0, 800, 600)))]
    )

    @staticmethod
    def observed(bounds, wid=7):
        return Layout(
            screens=[SCREEN], windows=[observed_window("Terminal", "bash", instance(bounds, wid=wid))]
        )

    def test_two_passes_with_settle_between(self):
        actuator = FakeActuator()
        reconciler, sleeps = make_reconciler(
            [self.observed(Rect(500, 500, 300, 300)), self.observed(Rect(0, 0, 800, 600))], actuator
        )
        completed = []
        reconciler.pass_completed.connect(lambda n, moves: completed.append((n, moves)))

        report = reconciler.reconcile(self.desired)

        assert actuator.calls == [(42, 7, Rect(0, 0, 800, 600))]
        assert completed == [(1, 1), (2, 0)]
        assert sleeps == [0.5]
        assert report.passes == 2
        assert report.moved_count == 1
        assert report.failed_count == 0
        assert report.finished_at >= report.started_at

    def test_resize_that_did_not_stick_is_retried(self):
        actuator = FakeActuator()
        reconciler, _ = make_reconciler(
            [self.observed(Rect(500, 500, 300, 300)), self.observed(Rect(0, 0, 300, 300))], actuator
        )

        reconciler.reconcile(self.desired)

        assert actuator.calls == [(42, 7, Rect(0, 0, 800, 600))] * 2

    def test_actuation_failure_does_not_stop_the_pass(self):
        desired = Layout(
            screens=[SCREEN],
            windows=[
                desired_window("Mail", "Inbox", Maxed()),
                desired_window("Terminal", "bash", Pos(Rect(0, 0, 800, 600))),
            ],
        )
        observed = Layout(
            screens=[SCREEN],
            windows=[
                observed_window("Mail", "Inbox", instance(Rect(10, 10, 500, 500), wid=1)),
                observed_window("Terminal", "bash", instance(Rect(10, 10, 500, 500), wid=2)),
            ],
        )
        actuator = FakeActuator(fail_ids={1})
        reconciler, _ = make_reconciler([observed], actuator, passes=1)
        failed = []
        moved = []
        reconciler.window_move_failed.connect(lambda owner, name, reason: failed.append((owner, name)))
        reconciler.window_moved.connect(lambda owner, name, rect: moved.append((owner, name, rect)))

        report = reconciler.reconcile(desired)

        assert [c[1] for c in actuator.calls] == [1, 2]
        assert failed == [("Mail", "Inbox")]
        assert moved == [("Terminal", "bash", Rect(0, 0, 800, 600))]
        assert report.failed_count == 1
        assert report.moved_count == 1
        assert "-25200" in report.failures[0][1]

    @pytest.mark.parametrize("passes", [1, 3])
    def test_pass_count(self, passes):
        actuator = FakeActuator()
        reconciler, sleeps = make_reconciler(
            [self.observed(Rect(500, 500, 300, 300))], actuator, passes=passes, settle_interval=0.1
        )

        report = reconciler.reconcile(self.desired)

        assert report.passes == passes
        assert len(actuator.calls) == passes
        assert sleeps == [0.1] * (passes - 1)


def test_end_to_end_small_window_never_moves():
    desired = Layout(screens=[SCREEN], windows=[desired_window("Terminal", "bash", Maxed())])
    observed = build_layout(
        [RawWindow("Terminal", "bash", 42, 7, Rect(10, 10, 60, 60))], [SCREEN]
    )
    actuator = FakeActuator()
    reconciler, _ = make_reconciler([observed], actuator)

    reconciler.reconcile(desired)

    assert actuator.calls == []
