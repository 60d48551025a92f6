"""
Shared schema types
"""
from datetime import date
from typing import Annotated
from pydantic import BeforeValidator, PlainSerializer

from deskbook.utils.dates import parse_day

# YYYY-MM-DD on the wire, datetime.date in code
Day = Annotated[
    date,
    BeforeValidator(parse_day),
    PlainSerializer(lambda d: d.isoformat(), return_type=str),
]
