"""Shared schema field types."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from ..core.timezone_utils import ensure_utc

# Instants are always emitted as aware UTC, whatever the store hands back.
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
