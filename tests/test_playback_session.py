import time

from audioshelf.core.playback_session import PlaybackController, ThreadTickScheduler
from audioshelf.core.position_store import PlaybackPositionStore
from audioshelf.models.catalog import CatalogItem
from audioshelf.models.playback import PlayerState


def _controller(item, scheduler, start=0.0, persist=None):
    store = PlaybackPositionStore(persist=persist)
    if start:
        store.set_position(item.id, item, start)
    return PlaybackController(item, store, scheduler=scheduler), store


def test_starts_stopped_at_stored_position(short_item, scheduler):
    player, _ = _controller(short_item, scheduler, start=1.0)
    assert player.state is PlayerState.STOPPED
    assert player.position == 1.0
    assert scheduler.ticks == []


def test_tick_to_end_stops_playback(short_item, scheduler):
    player, store = _controller(short_item, scheduler, start=1.0)
    assert player.toggle() is PlayerState.PLAYING
    scheduler.fire()
    assert player.position == 2.0
    assert store.get_position("s1") == 2.0
    assert player.state is PlayerState.STOPPED
    assert scheduler.active == []


def test_each_tick_persists(short_item, scheduler, persist):
    player, _ = _controller(short_item, scheduler, persist=persist)
    player.play()
    scheduler.fire()
    assert persist.calls == [("playbacks", ["s1|1.00"])]


def test_pause_cancels_tick(short_item, scheduler):
    player, _ = _controller(short_item, scheduler)
    player.toggle()
    tick = scheduler.ticks[0]
    player.toggle()
    assert player.state is PlayerState.STOPPED
    assert tick.cancelled
    scheduler.fire(3)
    assert player.position == 0.0


def test_stale_tick_after_pause_is_dropped(short_item, scheduler):
    player, _ = _controller(short_item, scheduler)
    player.play()
    stale = scheduler.ticks[0].callback
    player.pause()
    player.play()
    stale()
    assert player.position == 0.0
    assert player.state is PlayerState.PLAYING


def test_seek_while_playing_keeps_state(scheduler):
    item = CatalogItem("l1", "Long", "Tester", "asset:l1", 100.0)
    player, _ = _controller(item, scheduler)
    player.play()
    assert player.seek(50) == 50
    assert player.state is PlayerState.PLAYING
    scheduler.fire()
    assert player.position == 51
    assert player.skip(-15) == 36
    assert player.state is PlayerState.PLAYING


def test_play_at_end_stays_stopped(short_item, scheduler):
    player, _ = _controller(short_item, scheduler, start=2.0)
    assert player.toggle() is PlayerState.STOPPED
    assert scheduler.ticks == []


def test_tick_when_stopped_is_noop(short_item, scheduler):
    player, _ = _controller(short_item, scheduler)
    player.tick()
    assert player.position == 0.0


def test_thread_ticker_stops_after_pause():
    item = CatalogItem("l1", "Long", "Tester", "asset:l1", 1000.0)
    store = PlaybackPositionStore()
    player = PlaybackController(item, store, scheduler=ThreadTickScheduler(), interval_sec=0.01)
    player.play()
    ticker = player._ticker
    deadline = time.monotonic() + 2.0
    while player.position < 3 and time.monotonic() < deadline:
        time.sleep(0.01)
    assert player.position >= 3
    player.pause()
    ticker.join(timeout=1.0)
    assert not ticker.alive
    paused_at = player.position
    time.sleep(0.1)
    assert player.position == paused_at
    assert store.get_position("l1") == paused_at
