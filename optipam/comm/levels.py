"""
======================================================================
PAM level spacing and decision thresholds (:mod:`optipam.comm.levels`)
======================================================================

.. autosummary::
   :toctree: generated/

   LevelSpacing             -- Level spacing strategy (selects the power adjustment rule)
   LevelSet                 -- Signal levels and decision thresholds of an M-PAM constellation
   equallySpacedLevels      -- Normalized equally-spaced levels and thresholds
   normLevels               -- Normalize levels and thresholds so that the last level is 1
   adjustLevels             -- Scale levels to a transmitted power and extinction ratio
   optimizeLevelSpacing     -- Level spacing optimization for a target BER under signal-dependent noise
"""

"""PAM level spacing and decision thresholds."""
import logging as logg
from enum import Enum
from typing import List, NamedTuple

import numpy as np
from scipy.optimize import brentq

from optipam.comm.errors import (
    DiagnosticKind,
    DomainError,
    InvalidArgument,
    warn,
)
from optipam.comm.metrics import Qfunc, berAWGN, noiseStdAt
from optipam.utils import extinctionRatio


class LevelSpacing(Enum):
    EQUALLY_SPACED = "equally-spaced"
    OPTIMIZED = "optimized"

    @classmethod
    def parse(cls, value):
        """Return the member for `value` (member or strategy string)."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgument(f"invalid level spacing option {value!r}") from None


class OptimizationResult(NamedTuple):
    levels: np.ndarray
    thresholds: np.ndarray
    tol: List[float]
    ber: float
    diagnostics: list


def _checkOrder(M):
    try:
        valid = not isinstance(M, bool) and int(M) == M and M >= 2
    except (TypeError, ValueError):
        valid = False

    if not valid:
        raise InvalidArgument(f"constellation order must be an integer >= 2, got {M!r}")
    return int(M)


def _asVector(x, n, name):
    x = np.array(x, dtype=np.float64)
    if x.size != n or np.count_nonzero(np.array(x.shape) > 1) > 1:
        raise InvalidArgument(f"set_levels: invalid number of {name}, expected {n}")
    return x.ravel()


def equallySpacedLevels(M):
    """
    Normalized equally-spaced levels and decision thresholds.

    Parameters
    ----------
    M : int
        Constellation order.

    Returns
    -------
    levels : np.array
        M levels from 0 to 1.
    thresholds : np.array
        M-1 thresholds halfway between adjacent levels.

    """
    M = _checkOrder(M)

    levels = np.arange(0, 2 * (M - 1) + 1, 2) / (2 * (M - 1))
    thresholds = np.arange(1, 2 * (M - 1), 2) / (2 * (M - 1))

    return levels, thresholds


def normLevels(levels, thresholds):
    """
    Normalize levels and decision thresholds so that the last level is 1.

    Parameters
    ----------
    levels : np.array
        Signal levels.
    thresholds : np.array
        Decision thresholds.

    Returns
    -------
    levels, thresholds : np.array
        Normalized levels and thresholds.

    """
    top = levels[-1]
    if top == 0 or not np.isfinite(top):
        raise DomainError(f"cannot normalize levels, last level is {top}")

    return levels / top, thresholds / top


def adjustLevels(levels, thresholds, Ptx, rexdB, spacing):
    """
    Scale levels and thresholds to a transmitted power and extinction ratio.

    Equally-spaced levels are restarted and mapped so that the lowest level
    satisfies the extinction ratio and the mean level equals Ptx. Optimized
    levels already enforce the extinction ratio, so they are only scaled.

    Parameters
    ----------
    levels : np.array
        Signal levels.
    thresholds : np.array
        Decision thresholds.
    Ptx : float
        Average transmitted power [W].
    rexdB : float
        Extinction ratio [dB], defined as Pmin/Pmax.
    spacing : LevelSpacing
        How the levels were produced.

    Returns
    -------
    Plevels, Pthresh : np.array
        Levels and decision thresholds at the transmitter.

    """
    if not Ptx > 0:
        raise InvalidArgument(f"transmitted power must be positive, got {Ptx}")

    rex = extinctionRatio(rexdB)
    spacing = LevelSpacing.parse(spacing)

    if spacing is LevelSpacing.EQUALLY_SPACED:
        levels, thresholds = equallySpacedLevels(len(levels))
        amean = np.mean(levels)

        Pmin = 2 * Ptx * rex / (1 + rex)  # power of the lowest level
        scale = (Ptx / amean) * (1 - rex) / (1 + rex)

        Plevels = levels * scale + Pmin
        Pthresh = thresholds * scale + Pmin
    else:
        amean = np.mean(levels)
        if amean == 0:
            raise DomainError("cannot scale levels with zero mean")

        Plevels = levels * Ptx / amean
        Pthresh = thresholds * Ptx / amean

    return Plevels, Pthresh


def _tailRoot(fun, scale, Pe, rootTol, maxExpand, origin=0.0):
    """
    Find δ >= 0 such that fun(δ) = 0, starting from δ = 0.

    fun(0) = 1/2 - Pe > 0 and fun tends to -Pe, so a bracket [0, hi] is
    found by doubling hi from `scale`. The root is then refined with Brent's
    method. A root is accepted only if |fun(δ)| <= rootTol*Pe, which rejects
    sign changes at discontinuities of the noise model.

    If no bracket is found within `maxExpand` doublings, or before origin + hi
    overflows, `scale` is returned as a bounded step.

    Returns
    -------
    δ : float
        Last iterate.
    converged : bool
        Whether δ is an accepted root.
    """
    f0 = fun(0.0)
    if f0 <= 0:
        return 0.0, f0 == 0

    hi = scale
    for _ in range(maxExpand):
        if not np.isfinite(origin + hi):
            return scale, False
        if fun(hi) <= 0:
            break
        hi *= 2
    else:
        return scale, False

    δ, r = brentq(fun, 0.0, hi, xtol=1e-12 * scale, full_output=True, disp=False)

    return δ, bool(r.converged) and abs(fun(δ)) <= rootTol * Pe


def _stepAbove(x, δ, converged):
    """x + δ, moved to the next float above x if δ is absorbed by rounding."""
    y = x + δ
    if y > x:
        return y, converged

    return np.nextafter(x, np.inf), False


def optimizeLevelSpacing(M, BERtarget, rexdB, noiseStd, param=None, verbose=False):
    """
    Level spacing and decision threshold optimization under signal-dependent Gaussian noise.

    Levels and thresholds are found so that every error tail has the same
    probability, which gives the target BER for Gray-mapped M-PAM. Starting
    from the lowest level, each threshold is placed where the upper tail of
    the level below equals the per-tail error probability, and each level is
    placed where its lower tail (with the noise evaluated at the new level)
    equals that probability. The lowest level is re-anchored to the
    extinction ratio with the last iterate of the highest level, and the
    sweep is repeated until the levels stop changing.

    A 1-D solution that is not accepted, or that does not move above the
    previous level or threshold, is reported as RootFindNotConverged and the
    value is still placed strictly above its predecessor. If the levels
    overflow, the previous iterate is returned.

    The levels and thresholds are referred to the input of `noiseStd`
    (e.g. the receiver, after any amplification).

    Parameters
    ----------
    M : int
        Constellation order.
    BERtarget : float
        Target bit error rate.
    rexdB : float
        Extinction ratio [dB], defined as Pmin/Pmax. -inf for zero-floor signaling.
    noiseStd : callable
        Noise standard deviation as a function of the signal level.
    param : optipam.utils.parameters, optional
        Optimization settings:

        - param.maxIter: maximum number of iterations [default: 20].

        - param.absTol: tolerance on the change of the levels for convergence [default: 1e-6].

        - param.maxBERerror: maximum relative error of the achieved BER [default: 1e-3].

        - param.rootTol: maximum residual of a 1-D solution relative to the per-tail error probability [default: 1e-6].

        - param.maxBracketExpansions: maximum number of bracket doublings in a 1-D solution [default: 200].
    verbose : bool, optional
        Log the tolerance of each iteration. The default is False.

    Returns
    -------
    OptimizationResult
        levels, thresholds, tolerance history, achieved BER and non-fatal diagnostics.

    """
    M = _checkOrder(M)
    if not 0 < BERtarget < 1:
        raise InvalidArgument(f"target BER must be in (0, 1), got {BERtarget}")
    if np.isnan(rexdB):
        raise InvalidArgument("extinction ratio is NaN")

    maxIter = getattr(param, "maxIter", 20)
    absTol = getattr(param, "absTol", 1e-6)
    maxBERerror = getattr(param, "maxBERerror", 1e-3)
    rootTol = getattr(param, "rootTol", 1e-6)
    maxExpand = getattr(param, "maxBracketExpansions", 200)

    # error probability under a single tail
    Pe = np.log2(M) * BERtarget * M / (2 * (M - 1))
    rex = extinctionRatio(rexdB)

    aopt = np.zeros(M)
    bopt = np.zeros(M - 1)
    diagnostics = []
    tol = []

    for it in range(1, maxIter + 1):
        apast = aopt.copy()
        bpast = bopt.copy()
        aopt[0] = aopt[-1] * rex
        diverged = False

        for level in range(M - 1):
            # threshold
            σ = noiseStdAt(noiseStd, aopt[level])
            dPthresh, converged = _tailRoot(
                lambda dP: Qfunc(dP / σ) - Pe, σ, Pe, rootTol, maxExpand, aopt[level]
            )
            bopt[level], converged = _stepAbove(aopt[level], dPthresh, converged)
            if not converged:
                diagnostics.append(
                    warn(
                        DiagnosticKind.ROOT_FIND_NOT_CONVERGED,
                        f"threshold optimization did not converge (iteration {it}, level {level})",
                        it,
                        level,
                    )
                )
            if not np.isfinite(bopt[level]):
                diverged = True
                break

            # next level
            b = bopt[level]
            dPlevel, converged = _tailRoot(
                lambda dP: Qfunc(dP / noiseStdAt(noiseStd, b + dP)) - Pe,
                noiseStdAt(noiseStd, b),
                Pe,
                rootTol,
                maxExpand,
                b,
            )
            aopt[level + 1], converged = _stepAbove(b, dPlevel, converged)
            if not converged:
                diagnostics.append(
                    warn(
                        DiagnosticKind.ROOT_FIND_NOT_CONVERGED,
                        f"level optimization did not converge (iteration {it}, level {level + 1})",
                        it,
                        level + 1,
                    )
                )
            if not np.isfinite(aopt[level + 1]):
                diverged = True
                break

        if diverged:
            diagnostics.append(
                warn(
                    DiagnosticKind.ROOT_FIND_NOT_CONVERGED,
                    f"levels diverged (iteration {it}), keeping the previous iterate",
                    it,
                )
            )
            aopt, bopt = apast, bpast
            break

        tol.append(float(np.linalg.norm(aopt - apast)))

        if verbose:
            logg.info("Level spacing optimization: iteration %2d, tolerance %.3e", it, tol[-1])

        if tol[-1] < absTol:
            break

    ber, _ = berAWGN(aopt, bopt, noiseStd)
    BERerror = abs(ber - BERtarget) / BERtarget

    if BERerror > maxBERerror:
        diagnostics.append(
            warn(
                DiagnosticKind.BER_TOLERANCE_EXCEEDED,
                f"BER error {BERerror:g} greater than maximum acceptable error {maxBERerror:g}",
                len(tol),
            )
        )

    return OptimizationResult(aopt, bopt, tol, ber, diagnostics)


class LevelSet:
    """
    Signal levels and decision thresholds of an M-PAM constellation.

    Parameters
    ----------
    M : int
        Constellation order.
    spacing : LevelSpacing or str, optional
        'equally-spaced' initializes normalized equally-spaced levels.
        'optimized' leaves the set empty until `optimize` is called.
        The default is 'equally-spaced'.
    """

    def __init__(self, M, spacing=LevelSpacing.EQUALLY_SPACED):
        self.M = _checkOrder(M)
        self.spacing = LevelSpacing.parse(spacing)
        self.diagnostics = []
        self.tol = []

        if self.spacing is LevelSpacing.EQUALLY_SPACED:
            self.levels, self.thresholds = equallySpacedLevels(self.M)
        else:
            self.levels = np.array([])
            self.thresholds = np.array([])

    def __repr__(self):
        return (
            f"LevelSet(M={self.M}, spacing={self.spacing.value!r}, "
            f"levels={self.levels!r}, thresholds={self.thresholds!r})"
        )

    @property
    def empty(self):
        return self.levels.size == 0

    def _checkPopulated(self):
        if self.empty:
            raise InvalidArgument("levels were not set, call optimize() or set_levels() first")

    def set_levels(self, levels, thresholds):
        """
        Set levels and decision thresholds.

        Only the number of levels (M) and thresholds (M-1) is checked; their
        order is the responsibility of the caller (see `is_monotonic`).
        """
        self.levels = _asVector(levels, self.M, "levels")
        self.thresholds = _asVector(thresholds, self.M - 1, "decision thresholds")

        return self

    def normalize(self):
        """Normalize levels and thresholds so that the last level is 1."""
        self._checkPopulated()
        self.levels, self.thresholds = normLevels(self.levels, self.thresholds)
        return self

    def is_monotonic(self):
        """True if levels and thresholds interleave in strictly increasing order."""
        if self.empty:
            return False
        points = np.empty(2 * self.M - 1)
        points[0::2] = self.levels
        points[1::2] = self.thresholds
        return bool(np.all(np.diff(points) > 0))

    def adjust(self, Ptx, rexdB):
        """
        Adjust levels to a transmitted power and extinction ratio.

        Parameters
        ----------
        Ptx : float
            Average transmitted power [W].
        rexdB : float
            Extinction ratio [dB], defined as Pmin/Pmax.

        Returns
        -------
        LevelSet
            self, with levels and thresholds at the transmitter.
        """
        self._checkPopulated()
        self.levels, self.thresholds = adjustLevels(
            self.levels, self.thresholds, Ptx, rexdB, self.spacing
        )
        return self

    def optimize(self, BERtarget, rexdB, noise_std, verbose=False, param=None):
        """
        Optimize levels and thresholds for a target BER (see `optimizeLevelSpacing`).

        Non-fatal conditions are available in `diagnostics` and the tolerance
        of each iteration in `tol`.

        Returns
        -------
        LevelSet
            self, with optimized levels and thresholds.
        """
        result = optimizeLevelSpacing(
            self.M, BERtarget, rexdB, noise_std, param=param, verbose=verbose
        )

        self.levels = result.levels
        self.thresholds = result.thresholds
        self.tol = result.tol
        self.diagnostics = result.diagnostics
        self.spacing = LevelSpacing.OPTIMIZED

        return self

    def ber_awgn(self, noise_std):
        """
        BER under signal-dependent Gaussian noise.

        Returns
        -------
        ber : float
            Total bit error rate.
        berk : np.array
            Contribution of each level to the BER.
        """
        self._checkPopulated()
        return berAWGN(self.levels, self.thresholds, noise_std)
