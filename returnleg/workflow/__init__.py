"""returnleg.workflow: Temporal.io projection of return-leg payments."""

from returnleg.workflow.types import PaymentKind as PaymentKind
from returnleg.workflow.types import ProjectedPayment as ProjectedPayment
from returnleg.workflow.types import ProjectionInput as ProjectionInput
from returnleg.workflow.types import ProjectionOutput as ProjectionOutput
