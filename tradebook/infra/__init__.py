"""tradebook.infra -- configuration, repository protocols, in-memory adapters."""

from tradebook.infra.config import (
    AppConfig as AppConfig,
)
from tradebook.infra.config import (
    BookingLimits as BookingLimits,
)
from tradebook.infra.config import (
    DEFAULT_LIMITS as DEFAULT_LIMITS,
)
from tradebook.infra.config import (
    LoggingConfig as LoggingConfig,
)
from tradebook.infra.config import (
    TemporalConfig as TemporalConfig,
)
from tradebook.infra.config import (
    configure_logging as configure_logging,
)
from tradebook.infra.config import (
    load_config as load_config,
)
from tradebook.infra.memory_adapter import (
    InMemoryCounterpartyRepository as InMemoryCounterpartyRepository,
)
from tradebook.infra.memory_adapter import (
    InMemoryTradeRepository as InMemoryTradeRepository,
)
from tradebook.infra.protocols import (
    CounterpartyRepository as CounterpartyRepository,
)
from tradebook.infra.protocols import (
    TradeRepository as TradeRepository,
)
