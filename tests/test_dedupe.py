import time

from swebot.dedupe import CommentDeduper


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_lifecycle_with_real_time():
    deduper = CommentDeduper(0.01)
    assert deduper.mark_if_new(1) is True
    assert deduper.mark_if_new(1) is False
    time.sleep(0.015)
    assert deduper.mark_if_new(1) is True


def test_default_ttl_is_one_hour():
    assert CommentDeduper(0).ttl == 3600.0
    assert CommentDeduper(-5).ttl == 3600.0


def test_distinct_ids_are_independent():
    clock = FakeClock()
    deduper = CommentDeduper(10, clock=clock)
    assert deduper.mark_if_new(1) is True
    assert deduper.mark_if_new(2) is True
    assert deduper.mark_if_new(1) is False
    assert deduper.mark_if_new(2) is False


def test_expiry_with_fake_clock():
    clock = FakeClock()
    deduper = CommentDeduper(10, clock=clock)
    assert deduper.mark_if_new(7) is True
    clock.now = 9.9
    assert deduper.mark_if_new(7) is False
    clock.now = 10.5
    assert deduper.mark_if_new(7) is True
    clock.now = 15.0
    assert deduper.mark_if_new(7) is False