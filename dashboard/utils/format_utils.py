"""
Formatting helpers for dashboard values.

Amounts are stored in cents; everything here converts to display
strings or pagination hints and never touches the database.
"""
import math
from typing import Any, Dict, List, Sequence, Tuple, Union

import pandas as pd


ELLIPSIS = "..."

def format_currency(amount: Union[int, float, None]) -> str:
    """Format an amount in cents as US dollars, e.g. 123456 -> '$1,234.56'."""
    if amount is None or (isinstance(amount, float) and math.isnan(amount)):
        amount = 0
    dollars = float(amount) / 100
    if dollars < 0:
        return f"-${abs(dollars):,.2f}"
    return f"${dollars:,.2f}"

def generate_pagination(current_page: int, total_pages: int) -> List[Union[int, str]]:
    """Return the page links to show, with '...' standing in for skipped ranges."""
    # Seven or fewer pages: show them all
    if total_pages <= 7:
        return list(range(1, total_pages + 1))

    # Near the start: first 3, an ellipsis, and the last 2
    if current_page <= 3:
        return [1, 2, 3, ELLIPSIS, total_pages - 1, total_pages]

    # Near the end: first 2, an ellipsis, and the last 3
    if current_page >= total_pages - 2:
        return [1, 2, ELLIPSIS, total_pages - 2, total_pages - 1, total_pages]

    return [
        1,
        ELLIPSIS,
        current_page - 1,
        current_page,
        current_page + 1,
        ELLIPSIS,
        total_pages,
    ]

def generate_y_axis(revenue: Sequence[Dict[str, Any]]) -> Tuple[List[str], int]:
    """Build y-axis labels in thousands for the revenue chart.

    Returns:
        The labels from the top value down to '$0K', and the top value.
    """
    df = pd.DataFrame(list(revenue))
    if df.empty or "revenue" not in df.columns:
        return ["$0K"], 0

    highest_record = df["revenue"].max()
    top_label = int(math.ceil(highest_record / 1000) * 1000)
    labels = [f"${value // 1000}K" for value in range(top_label, -1, -1000)]
    return labels, top_label
