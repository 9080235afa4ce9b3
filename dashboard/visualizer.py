"""
Chart and table configurations for the dashboard pages.

Builders take the rows returned by ``dashboard.data`` and return plain
dicts the frontend renders; nothing here queries the database.
"""
from typing import Any, Dict, List, Sequence

import pandas as pd
from pydantic import BaseModel

from utils.time_utils import format_date_to_local

from .utils.format_utils import generate_y_axis

CHART_HEIGHT_PX = 350
# Bars are drawn at a fixed height, not scaled to the revenue value
BAR_HEIGHT_PX = 100

def _records(rows: Sequence[Any]) -> List[Dict[str, Any]]:
    return [row.model_dump() if isinstance(row, BaseModel) else dict(row) for row in rows]

def get_revenue_chart(revenue: Sequence[Any]) -> Dict[str, Any]:
    """
    Generate the "Recent Revenue" bar chart configuration.

    Args:
        revenue: Revenue rows with ``month`` and ``revenue`` keys

    Returns:
        Dict containing the chart configuration, or a text placeholder
        when there is nothing to draw.
    """
    data = _records(revenue)
    if not data:
        return {"type": "text", "message": "No data available."}

    df = pd.DataFrame(data)
    y_axis_labels, top_label = generate_y_axis(data)

    return {
        "type": "bar",
        "title": "Recent Revenue",
        "subtitle": "Last 12 months",
        "height": CHART_HEIGHT_PX,
        "labels": df["month"].astype(str).tolist(),
        "bars": [
            {"month": month, "revenue": int(value), "height": BAR_HEIGHT_PX}
            for month, value in zip(df["month"], df["revenue"])
        ],
        "y_axis": {"labels": y_axis_labels, "top": top_label},
    }

def _table(data: List[Dict[str, Any]], columns: List[str], title: str) -> Dict[str, Any]:
    df = pd.DataFrame(data, columns=columns)
    return {
        "type": "table",
        "title": title,
        "columns": columns,
        "data": df.to_dict(orient="records"),
    }

def get_invoices_table(invoices: Sequence[Any]) -> Dict[str, Any]:
    """Table configuration for the invoices page; dates shown as e.g. 'Dec 6, 2022'."""
    data = _records(invoices)
    for row in data:
        row["date"] = format_date_to_local(row["date"])
    columns = ["id", "name", "email", "image_url", "amount", "date", "status"]
    return _table(data, columns, "Invoices")

def get_customers_table(customers: Sequence[Any]) -> Dict[str, Any]:
    """Table configuration for the customers page."""
    columns = ["id", "name", "email", "image_url", "total_invoices", "total_pending", "total_paid"]
    return _table(_records(customers), columns, "Customers")
