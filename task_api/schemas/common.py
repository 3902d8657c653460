from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from ..models.base import to_aware_utc

# Timestamps leave the API as UTC with a "Z" suffix
UtcDatetime = Annotated[datetime, AfterValidator(to_aware_utc)]
