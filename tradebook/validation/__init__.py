"""tradebook.validation -- common rules, product validators, advisories."""

from tradebook.validation.advisories import (
    Advisory as Advisory,
)
from tradebook.validation.advisories import (
    log_advisories as log_advisories,
)
from tradebook.validation.common import (
    collect_advisories as collect_advisories,
)
from tradebook.validation.common import (
    validate_common as validate_common,
)
from tradebook.validation.common import (
    validate_currency_code as validate_currency_code,
)
from tradebook.validation.common import (
    validate_date_range as validate_date_range,
)
from tradebook.validation.products import (
    PRODUCT_VALIDATORS as PRODUCT_VALIDATORS,
)
from tradebook.validation.products import (
    ProductValidator as ProductValidator,
)
from tradebook.validation.products import (
    ProductValidatorRegistry as ProductValidatorRegistry,
)
from tradebook.validation.products import (
    validate_product as validate_product,
)
