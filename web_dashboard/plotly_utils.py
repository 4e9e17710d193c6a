"""
Plotly Serialization Utilities for Flask
=========================================

Plotly's own JSON encoder may emit numpy arrays in a binary ``bdata`` form
that the browser bundle used by the dashboard cannot read. Figures are
converted to plain Python types before being sent.

USAGE:
------
    from web_dashboard.plotly_utils import serialize_plotly_figure

    fig = create_cumulative_pl_chart(series)
    return Response(serialize_plotly_figure(fig), mimetype='application/json')
"""

import base64
import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import numpy as np
import plotly.graph_objs as go

logger = logging.getLogger(__name__)

# Plotly typed-array dtype codes -> numpy dtypes
BDATA_DTYPES = {
    'f8': np.float64, 'f4': np.float32,
    'i8': np.int64, 'i4': np.int32, 'i2': np.int16, 'i1': np.int8,
    'u8': np.uint64, 'u4': np.uint32, 'u2': np.uint16, 'u1': np.uint8,
}


def to_native(obj: Any) -> Any:
    """Recursively convert numpy, Decimal and date values to JSON-native types."""
    if isinstance(obj, dict):
        if 'dtype' in obj and 'bdata' in obj:
            dtype = BDATA_DTYPES.get(obj['dtype'])
            if dtype is None:
                logger.warning(f"Unsupported typed array dtype: {obj['dtype']}")
                return []
            decoded = np.frombuffer(base64.b64decode(obj['bdata']), dtype=dtype)
            return decoded.tolist()
        return {k: to_native(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_native(item) for item in obj]
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return obj


def serialize_plotly_figure(fig: go.Figure) -> str:
    """Serialize a Plotly figure to a JSON string of plain values."""
    return json.dumps(to_native(fig.to_plotly_json()))
