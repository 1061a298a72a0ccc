"""
Signal clean-up for recorded earable data:
- Handle missing values
- Flip axes the recording stores with the opposite sign
"""

from typing import Sequence

import pandas as pd


# Linearly interpolate missing values in the data frame
def interpolate_missing(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    # Linear interpolation along the time axis (rows)
    out = out.interpolate(method='linear', axis=0, limit_direction='both')
    # fill any remaining NaNs (all-NaN column)
    out = out.fillna(0.0)
    return out


# Negate the given columns, leaving the rest untouched
def invert_axes(df: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    out = df.copy()
    for col in columns:
        if col not in out.columns:
            raise ValueError(f"Cannot invert missing column: {col}")
        out[col] = -out[col]
    return out
