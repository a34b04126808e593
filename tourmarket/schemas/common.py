"""Shared schema field types."""
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from tourmarket.utils import as_utc

# SQLite returns naive datetimes; stored values are UTC
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]
