"""tradebook.core -- result type, error values, time, money and calendar helpers."""

from tradebook.core.errors import (
    BookingError as BookingError,
)
from tradebook.core.errors import (
    InternalError as InternalError,
)
from tradebook.core.errors import (
    NotFoundError as NotFoundError,
)
from tradebook.core.errors import (
    PersistenceError as PersistenceError,
)
from tradebook.core.errors import (
    ValidationError as ValidationError,
)
from tradebook.core.result import (
    Err as Err,
)
from tradebook.core.result import (
    Ok as Ok,
)
from tradebook.core.result import (
    Result as Result,
)
from tradebook.core.result import (
    sequence as sequence,
)
from tradebook.core.result import (
    unwrap as unwrap,
)
from tradebook.core.types import (
    Clock as Clock,
)
from tradebook.core.types import (
    UtcDatetime as UtcDatetime,
)
