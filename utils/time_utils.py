from datetime import date, datetime
from typing import Union

from dateutil import parser

def format_date_to_local(value: Union[str, date, datetime], locale: str = "en-US") -> str:
    """Format a date for display, e.g. '2022-12-06' -> 'Dec 6, 2022'."""
    if isinstance(value, str):
        value = parser.isoparse(value)
    if locale != "en-US":
        # Only US English formatting is supported for now
        raise ValueError(f"Unsupported locale: {locale}")
    return f"{value.strftime('%b')} {value.day}, {value.year}"
