"""returnleg.instrument: the asset return leg product and its schedule."""

from returnleg.instrument.return_leg import AssetReturnLeg as AssetReturnLeg
from returnleg.instrument.return_leg import ValuationPeriod as ValuationPeriod
from returnleg.instrument.return_leg import ValuationSchedule as ValuationSchedule
from returnleg.instrument.return_leg import normalize_value_dates as normalize_value_dates
from returnleg.instrument.return_leg import periodic_value_dates as periodic_value_dates
