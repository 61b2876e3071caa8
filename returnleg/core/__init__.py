"""returnleg.core: results, errors, numerics and dates."""

from returnleg.core.errors import FieldViolation as FieldViolation
from returnleg.core.errors import MissingObservableError as MissingObservableError
from returnleg.core.errors import PricingError as PricingError
from returnleg.core.errors import ReturnLegError as ReturnLegError
from returnleg.core.errors import ValidationError as ValidationError
from returnleg.core.numeric import RETURNLEG_DECIMAL_CONTEXT as RETURNLEG_DECIMAL_CONTEXT
from returnleg.core.numeric import NonEmptyStr as NonEmptyStr
from returnleg.core.numeric import PositiveDecimal as PositiveDecimal
from returnleg.core.result import Err as Err
from returnleg.core.result import Ok as Ok
from returnleg.core.result import Result as Result
from returnleg.core.result import unwrap as unwrap
from returnleg.core.types import FrozenMap as FrozenMap
from returnleg.core.types import UtcDatetime as UtcDatetime
