import math

import pytest

from windowing import (
    CapacityViolation,
    NotReadyToSlide,
    SensorDataHandler,
    Window,
    WindowError,
)


def fill(window, values):
    for v in values:
        window.add_data(v, v * 10, v * 100)


def test_length_grows_up_to_capacity():
    window = Window(4, "accelerometer", 1)
    for n in range(1, 5):
        window.add_data(n, n, n)
        assert window.get_length() == min(n, 4)
    assert window.is_full()
    assert window.get_max_length() == 4


def test_add_to_full_window_raises():
    window = Window(3, "gyroscope")
    fill(window, [1, 2, 3])
    with pytest.raises(CapacityViolation):
        window.add_data(4, 4, 4)
    # nothing was appended on the failed call
    assert window.x == [1, 2, 3]
    assert len(window.y) == len(window.z) == 3


def test_slide_keeps_last_overlap_samples_in_order():
    window = Window(5, "accelerometer", overlap_size=2)
    fill(window, [1, 2, 3, 4, 5])
    window.slide()
    assert window.get_length() == 2
    assert window.x == [4, 5]
    assert window.y == [40, 50]
    assert window.z == [400, 500]


def test_slide_without_overlap_empties_window():
    window = Window(3, "accelerometer")
    fill(window, [1, 2, 3])
    window.slide()
    assert window.get_length() == 0
    assert not window.is_full()


def test_slide_before_full_raises():
    window = Window(3, "accelerometer", 1)
    fill(window, [1, 2])
    with pytest.raises(NotReadyToSlide):
        window.slide()
    assert window.x == [1, 2]


def test_extract_features_over_buffer():
    window = Window(3, "accelerometer")
    fill(window, [1, 2, 3])
    feats = window.extract_features()
    assert feats["x"] == {"mean": 2.0, "min": 1.0, "max": 3.0}
    assert feats["y"] == {"mean": 20.0, "min": 10.0, "max": 30.0}
    assert feats["z"]["max"] == 300.0


def test_extract_features_empty_window_is_nan():
    feats = Window(3, "gyroscope").extract_features()
    for axis in ("x", "y", "z"):
        assert all(math.isnan(v) for v in feats[axis].values())
        assert set(feats[axis]) == {"mean", "min", "max"}


def test_extract_features_is_idempotent():
    window = Window(4, "gyroscope", 2)
    fill(window, [3, -1, 7])
    assert window.extract_features() == window.extract_features()


def test_extract_features_includes_retained_overlap():
    window = Window(4, "accelerometer", overlap_size=2)
    fill(window, [1, 2, 3, 4])
    window.slide()
    fill(window, [10, 20])
    feats = window.extract_features()
    assert feats["x"] == {"mean": 9.25, "min": 3.0, "max": 20.0}


@pytest.mark.parametrize("size, overlap", [(0, 0), (-1, 0), (4, 4), (4, -1), (4, 7)])
def test_invalid_configuration(size, overlap):
    with pytest.raises(ValueError):
        Window(size, "accelerometer", overlap)


def test_repr_and_fill_ratio():
    window = Window(4, "accelerometer")
    fill(window, [1])
    assert repr(window) == "SlidingWindow(accelerometer, size=4, currentLength=1)"
    assert window.fill_ratio == 0.25


def test_handler_emits_on_capacity_then_every_step():
    handler = SensorDataHandler(window_size=4, overlap_size=1)
    emitted_at = []
    for i in range(1, 14):
        out = handler.handle_data((i, 0, 0), (0, i, 0))
        if out is not None:
            emitted_at.append(i)
    # first at capacity, then every capacity - overlap samples
    assert emitted_at == [4, 7, 10, 13]


def test_handler_summary_layout():
    handler = SensorDataHandler(window_size=2)
    assert handler.handle_data((1, 2, 3), (4, 5, 6)) is None
    out = handler.handle_data((3, 4, 5), (6, 7, 8))
    assert set(out) == {"accelerometer", "gyroscope"}
    assert out["accelerometer"]["x"] == {"mean": 2.0, "min": 1.0, "max": 3.0}
    assert out["gyroscope"]["z"] == {"mean": 7.0, "min": 6.0, "max": 8.0}
    assert handler.acc_window.get_length() == 0
    assert handler.gyro_window.get_length() == 0


def test_handler_rejects_bad_sample_without_advancing():
    handler = SensorDataHandler(window_size=3)
    with pytest.raises(ValueError):
        handler.handle_data((1, 2, 3), (1, 2))
    assert handler.acc_window.get_length() == 0
    assert handler.gyro_window.get_length() == 0


def test_handler_detects_unpaired_advancement():
    handler = SensorDataHandler(window_size=3)
    handler.acc_window.add_data(1, 1, 1)
    with pytest.raises(WindowError):
        handler.handle_data((1, 2, 3), (4, 5, 6))
