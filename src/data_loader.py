# Use to load recorded IMU sessions and replay them through the pipeline

import logging
from typing import Iterator, Sequence, Tuple

import pandas as pd

from constants import ACC_SENSORS, GYRO_SENSORS
from preprocessing import interpolate_missing, invert_axes

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ACC_SENSORS + GYRO_SENSORS


# returns one recording as a DataFrame (rows=time, cols=accX..gyrZ [+ time])
def load_recording(csv_path: str, invert: Sequence[str] = ()) -> pd.DataFrame:
    """
    Load a CSV recording with a header row.

    Required columns: accX, accY, accZ, gyrX, gyrY, gyrZ. A "time" column is
    kept if present and used to order the rows. Missing values are
    interpolated.
    """
    df = pd.read_csv(csv_path)
    df.columns = [str(c).strip() for c in df.columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{csv_path} is missing columns: {missing}")

    keep = (["time"] if "time" in df.columns else []) + REQUIRED_COLUMNS
    df = df[keep].astype(float)
    if "time" in df.columns:
        df = df.sort_values("time", kind="stable").reset_index(drop=True)

    df = interpolate_missing(df)
    if invert:
        df = invert_axes(df, invert)

    logger.info("Loaded recording %s: %d samples", csv_path, len(df))
    return df


# yield ((ax, ay, az), (gx, gy, gz)) per row, in row order
def iter_samples(
    df: pd.DataFrame,
) -> Iterator[Tuple[Tuple[float, float, float], Tuple[float, float, float]]]:
    acc_values = df[ACC_SENSORS].to_numpy(dtype=float)
    gyro_values = df[GYRO_SENSORS].to_numpy(dtype=float)
    for acc, gyro in zip(acc_values, gyro_values):
        yield tuple(float(v) for v in acc), tuple(float(v) for v in gyro)
