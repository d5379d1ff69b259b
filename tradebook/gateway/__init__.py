"""tradebook.gateway -- raw request parsing and the response envelope."""

from tradebook.gateway.parser import (
    parse_booking_request as parse_booking_request,
)
from tradebook.gateway.parser import (
    parse_counterparty_request as parse_counterparty_request,
)
from tradebook.gateway.parser import (
    request_to_dict as request_to_dict,
)
from tradebook.gateway.response import (
    ApiResponse as ApiResponse,
)
from tradebook.gateway.parser import (
    trade_to_dict as trade_to_dict,
)
