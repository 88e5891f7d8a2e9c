"""
Error taxonomy for the harmony system.

All failures are local and recoverable. Both concrete errors subclass
ValueError so callers that already guard against bad values keep working.
"""


class HarmonyError(Exception):
    """Base class for harmony errors."""


class InvalidInputError(HarmonyError, ValueError):
    """Melody/rhythm input rejected before the pipeline runs."""


class EditRejectedError(HarmonyError, ValueError):
    """An editor operation was rejected; the prior state is unchanged."""
