import pytest

from audioshelf.core.catalog import SAMPLE_CATALOG
from audioshelf.core.position_store import PlaybackPositionStore

A1 = SAMPLE_CATALOG[0]


@pytest.mark.parametrize("raw", [-5, -0.01, 0, 1.5, 5380, 5480, 1e9])
def test_set_position_is_clamped(raw):
    store = PlaybackPositionStore()
    value = store.set_position("a1", A1, raw)
    assert 0 <= value <= A1.total_duration_seconds
    assert store.get_position("a1") == value


def test_clamp_bounds():
    store = PlaybackPositionStore()
    assert store.set_position("a1", A1, -5) == 0
    assert store.set_position("a1", A1, A1.total_duration_seconds + 100) == A1.total_duration_seconds


def test_unknown_id_is_zero():
    assert PlaybackPositionStore().get_position("a1") == 0.0


def test_skip_back_stops_at_zero():
    store = PlaybackPositionStore()
    assert store.set_position("a1", A1, 20) == 20
    assert store.skip("a1", A1, 20, -15) == 5
    assert store.skip("a1", A1, 5, -15) == 0


def test_every_set_persists_whole_mapping(persist):
    store = PlaybackPositionStore(persist=persist)
    store.set_position("a2", A1, 3)
    store.set_position("a1", A1, 12.345)
    assert persist.calls[-1] == ("playbacks", ["a1|12.35", "a2|3.00"])
    assert len(persist.calls) == 2


def test_load_parses_entries():
    store = PlaybackPositionStore.load(["a1|12.50", "a2|oops", "broken"])
    assert store.positions == {"a1": 12.5, "a2": 0.0}


def test_nan_keeps_current_position(persist):
    store = PlaybackPositionStore(persist=persist)
    store.set_position("a1", A1, 42)
    assert store.set_position("a1", A1, float("nan")) == 42
    assert store.skip("a1", A1, 42, float("nan")) == 42
    assert persist.calls[-1] == ("playbacks", ["a1|42.00"])


def test_nan_on_fresh_item_is_zero():
    assert PlaybackPositionStore().set_position("a1", A1, float("nan")) == 0.0


def test_clamp_loaded_only_touches_catalog_items():
    store = PlaybackPositionStore.load(["a1|99999.00", "a2|-5.00", "a3|12.00", "zz|1e30"])
    changed = store.clamp_loaded(SAMPLE_CATALOG)
    assert sorted(changed) == ["a1", "a2"]
    assert store.get_position("a1") == A1.total_duration_seconds
    assert store.get_position("a2") == 0.0
    assert store.get_position("a3") == 12.0
    assert store.get_position("zz") == 1e30
