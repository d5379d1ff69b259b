"""tradebook.booking -- trade factory, business logic and the booking services."""

from tradebook.booking.business import (
    StatusHooks as StatusHooks,
)
from tradebook.booking.business import (
    apply_business_logic as apply_business_logic,
)
from tradebook.booking.business import (
    default_hooks as default_hooks,
)
from tradebook.booking.business import (
    default_premium as default_premium,
)
from tradebook.booking.business import (
    post_trade_checks as post_trade_checks,
)
from tradebook.booking.counterparties import (
    CounterpartyService as CounterpartyService,
)
from tradebook.booking.factory import (
    build_trade as build_trade,
)
from tradebook.booking.queries import (
    TradeQueryService as TradeQueryService,
)
from tradebook.booking.service import (
    TradeBookingService as TradeBookingService,
)
