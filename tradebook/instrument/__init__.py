"""tradebook.instrument -- product enums, the Trade record and its lifecycle."""

from tradebook.instrument.lifecycle import (
    TRADE_TRANSITIONS as TRADE_TRANSITIONS,
)
from tradebook.instrument.lifecycle import (
    check_cancellable as check_cancellable,
)
from tradebook.instrument.lifecycle import (
    check_transition as check_transition,
)
from tradebook.instrument.trade import (
    Counterparty as Counterparty,
)
from tradebook.instrument.trade import (
    CounterpartyRequest as CounterpartyRequest,
)
from tradebook.instrument.trade import (
    Trade as Trade,
)
from tradebook.instrument.trade import (
    TradeBookingRequest as TradeBookingRequest,
)
from tradebook.instrument.types import (
    ExoticOptionType as ExoticOptionType,
)
from tradebook.instrument.types import (
    OptionType as OptionType,
)
from tradebook.instrument.types import (
    ProductType as ProductType,
)
from tradebook.instrument.types import (
    SwapType as SwapType,
)
from tradebook.instrument.types import (
    TradeStatus as TradeStatus,
)
