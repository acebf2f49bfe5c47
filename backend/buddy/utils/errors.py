# /buddy/utils/errors.py

# Fault types raised by the oracle client. None of these ever reach the end
# user: flows and the router catch OracleFault and degrade to a safe default.


class OracleFault(Exception):
    """Base class for failures talking to the language-model oracle."""

    def __init__(self, message: str, model: str | None = None):
        super().__init__(message)
        self.model = model


class ExtractionFault(OracleFault):
    """The oracle failed, timed out, or returned output that could not be used."""


class RateLimitFault(OracleFault):
    """The oracle rejected the call with a rate-limit signal."""


class ModelDecommissionedFault(OracleFault):
    """The requested model id no longer exists upstream."""


# Faults that earn exactly one retry against the fallback model.
RETRYABLE_FAULTS = (RateLimitFault, ModelDecommissionedFault)
