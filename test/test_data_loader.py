import pandas as pd
import pytest

from data_loader import iter_samples, load_recording
from preprocessing import interpolate_missing, invert_axes


def write_csv(path, text):
    path.write_text(text)
    return str(path)


def test_load_recording_interpolates_and_sorts(tmp_path):
    csv_path = write_csv(
        tmp_path / "rec.csv",
        "time,accX,accY,accZ,gyrX,gyrY,gyrZ\n"
        "2,3.0,0,0,0,0,0\n"
        "0,1.0,0,0,0,1.0,0\n"
        "1,,0,0,0,2.0,0\n",
    )
    df = load_recording(csv_path)
    assert df["time"].tolist() == [0.0, 1.0, 2.0]
    assert df["accX"].tolist() == [1.0, 2.0, 3.0]


def test_load_recording_without_time_keeps_row_order(tmp_path):
    csv_path = write_csv(
        tmp_path / "rec.csv",
        "accX,accY,accZ,gyrX,gyrY,gyrZ,extra\n"
        "1,2,3,4,5,6,x\n"
        "7,8,9,10,11,12,y\n",
    )
    df = load_recording(csv_path)
    assert list(df.columns) == ["accX", "accY", "accZ", "gyrX", "gyrY", "gyrZ"]
    samples = list(iter_samples(df))
    assert samples == [
        ((1.0, 2.0, 3.0), (4.0, 5.0, 6.0)),
        ((7.0, 8.0, 9.0), (10.0, 11.0, 12.0)),
    ]


def test_load_recording_inverts(tmp_path):
    csv_path = write_csv(
        tmp_path / "rec.csv",
        "accX,accY,accZ,gyrX,gyrY,gyrZ\n1,2,3,4,5,6\n",
    )
    df = load_recording(csv_path, invert=["gyrY"])
    assert df["gyrY"].tolist() == [-5.0]
    assert df["gyrX"].tolist() == [4.0]


def test_load_recording_missing_columns(tmp_path):
    csv_path = write_csv(tmp_path / "rec.csv", "accX,accY,accZ\n1,2,3\n")
    with pytest.raises(ValueError, match="gyrX"):
        load_recording(csv_path)


def test_interpolate_missing_all_nan_column():
    df = pd.DataFrame({"a": [1.0, None, 3.0], "b": [None, None, None]})
    out = interpolate_missing(df)
    assert out["a"].tolist() == [1.0, 2.0, 3.0]
    assert out["b"].tolist() == [0.0, 0.0, 0.0]


def test_invert_axes_unknown_column():
    with pytest.raises(ValueError):
        invert_axes(pd.DataFrame({"a": [1.0]}), ["b"])
