"""
=====================================================================
Analytic error probability metrics (:mod:`optipam.comm.metrics`)
=====================================================================

.. autosummary::
   :toctree: generated/

   Qfunc                    -- Calculate function Q(x)
   Qinv                     -- Inverse of the Q function
   noiseStdAt               -- Evaluate a noise model and check its domain
   serAWGN                  -- Conditional symbol error probability of each PAM level
   berAWGN                  -- BER of a PAM level set under signal-dependent Gaussian noise
   theoryBER                -- Theoretical (approx.) bit error probability of M-PAM in AWGN
   requiredPower            -- Received power required by a thermal noise limited receiver
"""

"""Analytic error probability metrics."""
import numpy as np
from scipy.special import erfc, erfcinv

from optipam.comm.errors import DomainError
from optipam.utils import W2dBm


def Qfunc(x):
    """
    Calculate function Q(x).

    Parameters
    ----------
    x : scalar or np.array
        function input.

    Returns
    -------
    scalar or np.array
        value of Q(x).

    """
    return 0.5 * erfc(x / np.sqrt(2))


def Qinv(p):
    """
    Inverse of the Q function.

    Parameters
    ----------
    p : scalar or np.array
        Tail probability in (0, 1).

    Returns
    -------
    scalar or np.array
        x such that Q(x) = p.

    """
    return np.sqrt(2) * erfcinv(2 * p)


def noiseStdAt(noiseStd, P):
    """
    Evaluate a noise model at signal level P.

    Parameters
    ----------
    noiseStd : callable
        Noise standard deviation as a function of the signal level.
    P : float
        Signal level.

    Returns
    -------
    float
        Noise standard deviation at P.

    Raises
    ------
    DomainError
        If the noise model returns a non-positive or non-finite value.

    """
    σ = float(noiseStd(P))

    if not np.isfinite(σ) or σ <= 0:
        raise DomainError(f"noise standard deviation at level {P:g} is {σ:g}")

    return σ


def serAWGN(levels, thresholds, noiseStd):
    """
    Conditional symbol error probability of each PAM level.

    The noise standard deviation is evaluated at the transmitted level. The
    lowest level only has an upper error tail and the highest level only has
    a lower error tail.

    Parameters
    ----------
    levels : np.array
        M signal levels.
    thresholds : np.array
        M-1 decision thresholds.
    noiseStd : callable
        Noise standard deviation as a function of the signal level.

    Returns
    -------
    ser : np.array
        P(error | level k) for k = 0, ..., M-1.

    """
    levels = np.asarray(levels, dtype=np.float64)
    thresholds = np.asarray(thresholds, dtype=np.float64)
    M = levels.size

    ser = np.zeros(M)
    for k in range(M):
        σ = noiseStdAt(noiseStd, levels[k])
        if k < M - 1:
            ser[k] += Qfunc((thresholds[k] - levels[k]) / σ)
        if k > 0:
            ser[k] += Qfunc((levels[k] - thresholds[k - 1]) / σ)

    return ser


def berAWGN(levels, thresholds, noiseStd):
    """
    BER of a PAM level set under signal-dependent Gaussian noise.

    Assumes equiprobable symbols and Gray mapping, so that each symbol error
    causes a single bit error.

    Parameters
    ----------
    levels : np.array
        M signal levels.
    thresholds : np.array
        M-1 decision thresholds.
    noiseStd : callable
        Noise standard deviation as a function of the signal level.

    Returns
    -------
    ber : float
        Total bit error rate.
    berk : np.array
        Contribution of the kth level to the BER, i.e.
        P(error | level k)P(level k)/log2(M).

    """
    ser = serAWGN(levels, thresholds, noiseStd)
    M = ser.size

    berk = ser / M / np.log2(M)

    return np.sum(berk), berk


def theoryBER(M, EbN0):
    """
    Theoretical (approx.) bit error probability of equally-spaced M-PAM in AWGN channel.

    Parameters
    ----------
    M : int
        Modulation order.
    EbN0 : scalar
        Signal-to-noise ratio (SNR) per bit in dB.

    Returns
    -------
    Pb : scalar
        Theoretical probability of bit error.

    References
    ----------
    [1] Proakis, J. G., & Salehi, M. Digital Communications (5th Edition). McGraw-Hill Education, 2008.
    """
    EbN0lin = 10 ** (EbN0 / 10)
    k = np.log2(M)

    Ps = (2 * (M - 1) / M) * Qfunc(np.sqrt(6 * k / (M**2 - 1) * EbN0lin))

    return Ps / k


def requiredPower(M, Rb, N0, BERtarget, R=1):
    """
    Received power required to reach a target BER with a thermal noise limited receiver.

    Equally-spaced levels starting at zero (infinite extinction ratio) are
    assumed.

    Parameters
    ----------
    M : int
        Modulation order.
    Rb : float
        Bit rate [b/s].
    N0 : float
        One-sided thermal noise power spectral density [A²/Hz].
    BERtarget : float
        Target bit error rate.
    R : float, optional
        Photodiode responsivity [A/W]. The default is 1.

    Returns
    -------
    float
        Required average received power [dBm].

    """
    b = np.log2(M)
    Pe = M * BERtarget * b / (2 * (M - 1))

    Preq = (M - 1) * np.sqrt(Rb * N0 / (2 * R**2 * b)) * Qinv(Pe)

    return W2dBm(Preq)
