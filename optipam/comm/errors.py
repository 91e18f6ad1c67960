"""
=======================================================
Errors and diagnostics (:mod:`optipam.comm.errors`)
=======================================================

.. autosummary::
   :toctree: generated/

   InvalidArgument        -- Malformed constructor or setter input.
   DomainError            -- Noise model or normalization outside its domain.
   DiagnosticKind         -- Kinds of non-fatal conditions.
   Diagnostic             -- Record of a non-fatal condition.
   warn                   -- Log a non-fatal condition and return its record.
"""

"""Errors and non-fatal diagnostics."""
import logging as logg
from enum import Enum
from typing import NamedTuple, Optional


class InvalidArgument(ValueError):
    """Malformed input (wrong lengths, M < 2, unknown level spacing)."""


class DomainError(ValueError):
    """A noise model returned a non-positive or non-finite value, or a normalization divisor is zero."""


class DiagnosticKind(Enum):
    ROOT_FIND_NOT_CONVERGED = "RootFindNotConverged"
    BER_TOLERANCE_EXCEEDED = "BERToleranceExceeded"


class Diagnostic(NamedTuple):
    """
    Non-fatal condition raised during level spacing optimization.

    Attributes
    ----------
    kind : DiagnosticKind
        Type of condition.
    message : str
        Human readable description.
    iteration : int, optional
        Outer iteration (starting at 1) where the condition occurred.
    level : int, optional
        Level index of the inner sweep where the condition occurred.
    """

    kind: DiagnosticKind
    message: str
    iteration: Optional[int] = None
    level: Optional[int] = None


def warn(kind, message, iteration=None, level=None):
    """
    Log a non-fatal condition and return its diagnostic record.

    Parameters
    ----------
    kind : DiagnosticKind
        Type of condition.
    message : str
        Description of the condition.
    iteration : int, optional
        Outer iteration where it occurred.
    level : int, optional
        Level index where it occurred.

    Returns
    -------
    Diagnostic
        The logged record.
    """
    logg.warning("%s: %s", kind.value, message)
    return Diagnostic(kind, message, iteration, level)
