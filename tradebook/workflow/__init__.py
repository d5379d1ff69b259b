"""tradebook.workflow -- Temporal workflows for booking and status changes."""

from tradebook.workflow.types import (
    BookingOutcome as BookingOutcome,
)
from tradebook.workflow.types import (
    BookTradeInput as BookTradeInput,
)
from tradebook.workflow.types import (
    CancelTradeInput as CancelTradeInput,
)
from tradebook.workflow.types import (
    StatusUpdateInput as StatusUpdateInput,
)
