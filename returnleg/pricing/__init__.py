"""returnleg.pricing: payment sequencing for the asset return leg."""

from returnleg.pricing.balance import NotionalChangeEvent as NotionalChangeEvent
from returnleg.pricing.balance import NotionalChangeFeed as NotionalChangeFeed
from returnleg.pricing.balance import balance_at as balance_at
from returnleg.pricing.notional_schedule import NotionalFactor as NotionalFactor
from returnleg.pricing.notional_schedule import NotionalFactorSchedule as NotionalFactorSchedule
from returnleg.pricing.notional_schedule import build_notional_schedule as build_notional_schedule
from returnleg.pricing.payments import Payment as Payment
from returnleg.pricing.payments import PriceReturnPayment as PriceReturnPayment
from returnleg.pricing.payments import RecoveryReturnPayment as RecoveryReturnPayment
from returnleg.pricing.payments import ReferenceAmountPayment as ReferenceAmountPayment
from returnleg.pricing.payments import ScaledPayment as ScaledPayment
from returnleg.pricing.payments import compute_amount as compute_amount
from returnleg.pricing.payments import flatten as flatten
from returnleg.pricing.payments import scale_by as scale_by
from returnleg.pricing.protocols import NotionalChangeInfo as NotionalChangeInfo
from returnleg.pricing.protocols import PriceCalculator as PriceCalculator
from returnleg.pricing.protocols import TabulatedPriceCalculator as TabulatedPriceCalculator
from returnleg.pricing.recovery import merge_time_grids as merge_time_grids
from returnleg.pricing.recovery import recovery_returns as recovery_returns
from returnleg.pricing.sequencer import price_return_payments as price_return_payments
