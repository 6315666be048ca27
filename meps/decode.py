"""Decode SAS transport (.ssp) files into DataFrames."""

import pandas as pd

from meps import config
from meps.errors import DecodeError


def read_xport(path_or_buffer, encoding=config.SSP_ENCODING) -> pd.DataFrame:
    """Read a SAS transport file from a path or binary stream.

    Raises
    ------
    DecodeError
        When the input is not a readable transport file.
    """
    try:
        return pd.read_sas(path_or_buffer, format="xport", encoding=encoding)
    except (ValueError, OSError, UnicodeDecodeError, EOFError) as exc:
        raise DecodeError(f"Not a SAS transport file: {exc}") from exc
