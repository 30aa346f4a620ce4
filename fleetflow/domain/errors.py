"""
Error taxonomy shared by the lifecycle engines and the HTTP layer.

Each error carries the HTTP status and machine-readable ``code`` it is
rendered with, so handlers never need to inspect messages.
"""


class FleetFlowError(Exception):
    status_code = 500
    code = "SERVER_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class NotFound(FleetFlowError):
    """Referenced trip, vehicle, driver or maintenance record does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class InvalidStatus(FleetFlowError):
    """Status value outside the enumerated set for that entity."""

    status_code = 400
    code = "INVALID_STATUS"


class InvalidStateTransition(FleetFlowError):
    """Requested transition is illegal or a dependent asset fails its guard."""

    status_code = 409
    code = "INVALID_STATE_TRANSITION"


class InvalidCargo(FleetFlowError):
    status_code = 400
    code = "INVALID_CARGO"


class InvalidDriverState(FleetFlowError):
    status_code = 400
    code = "INVALID_DRIVER_STATE"


class LicenseExpired(FleetFlowError):
    status_code = 400
    code = "LICENSE_EXPIRED"


class ConstraintViolation(FleetFlowError):
    status_code = 409
    code = "CONSTRAINT_VIOLATION"
