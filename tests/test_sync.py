from tgrid.sync import SyncState


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_sync_times_out():
    clock = FakeClock()
    state = SyncState(clock)
    state.begin()
    clock.now = 0.05
    assert state.in_sync(100) is True
    clock.now = 0.2
    assert state.in_sync(100) is False
    assert state.active is False


def test_sync_end():
    clock = FakeClock()
    state = SyncState(clock)
    state.begin()
    state.end()
    assert state.in_sync(100) is False


def test_not_in_sync_initially():
    state = SyncState(FakeClock())
    assert state.in_sync(0) is False
    assert state.read_pending is False