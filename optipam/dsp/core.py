"""
==================================================================
Core digital signal processing utilities (:mod:`optipam.dsp.core`)
==================================================================

.. autosummary::
   :toctree: generated/

   normFilterCoeffs       -- Normalize FIR coefficients to unit response at the symbol center.
   rrcFilterTaps          -- Generate Root-Raised Cosine (RRC) filter coefficients.
   rcFilterTaps           -- Generate Raised Cosine (RC) filter coefficients.
   pulseShape             -- Generate a pulse shaping filter.
   upsample               -- Upsample a signal by inserting zeros between samples.
   firFilter              -- Causal FIR filtering (group delay is kept).
"""

"""Digital signal processing utilities."""
import logging as logg

import numpy as np
from numba import njit
from scipy import signal

from optipam.comm.errors import DomainError, InvalidArgument


def normFilterCoeffs(h):
    """
    Normalize the coefficients of a FIR filter so that its impulse response at t = 0 is 1.

    For odd-length filters the reference is the central tap. For even-length
    filters the reference is the mean of the two central taps.

    Parameters
    ----------
    h : np.array
        Filter coefficients.

    Returns
    -------
    np.array
        Normalized filter coefficients.

    Raises
    ------
    DomainError
        If the reference tap value is zero or the filter is empty.
    """
    h = np.asarray(h, dtype=np.float64).ravel()
    n = h.size

    if n == 0:
        raise DomainError("cannot normalize an empty filter")

    if n % 2 == 0:
        h0 = (h[n // 2 - 1] + h[n // 2]) / 2
    else:
        h0 = h[(n - 1) // 2]

    if h0 == 0 or not np.isfinite(h0):
        raise DomainError(f"reference tap of the filter is {h0}, cannot normalize")

    return h / h0


@njit
def rrcFilterTaps(t, alpha, Ts):
    """
    Generate Root-Raised Cosine (RRC) filter coefficients.

    Parameters
    ----------
    t : np.array
        Time values.
    alpha : float
        RRC roll-off factor.
    Ts : float
        Symbol period.

    Returns
    -------
    coeffs : np.array
        RRC filter coefficients.

    References
    ----------
    [1] Proakis, J. G., & Salehi, M. (2008). Digital Communications (5th Edition). McGraw-Hill Education.
    """
    π = np.pi
    coeffs = np.zeros(len(t), dtype=np.float64)

    for i in range(len(t)):
        x = t[i] / Ts
        if x == 0:
            coeffs[i] = 1 + alpha * (4 / π - 1)
        elif alpha > 0 and abs(x) == 1 / (4 * alpha):
            coeffs[i] = (alpha / np.sqrt(2)) * (
                (1 + 2 / π) * np.sin(π / (4 * alpha))
                + (1 - 2 / π) * np.cos(π / (4 * alpha))
            )
        else:
            num = np.sin(π * x * (1 - alpha)) + 4 * alpha * x * np.cos(π * x * (1 + alpha))
            coeffs[i] = num / (π * x * (1 - (4 * alpha * x) ** 2))

    return coeffs / Ts


@njit
def rcFilterTaps(t, alpha, Ts):
    """
    Generate Raised Cosine (RC) filter coefficients.

    Parameters
    ----------
    t : np.array
        Time values.
    alpha : float
        RC roll-off factor.
    Ts : float
        Symbol period.

    Returns
    -------
    coeffs : np.array
        RC filter coefficients.

    References
    ----------
    [1] Proakis, J. G., & Salehi, M. (2008). Digital Communications (5th Edition). McGraw-Hill Education.
    """
    π = np.pi
    coeffs = np.zeros(len(t), dtype=np.float64)

    for i in range(len(t)):
        x = t[i] / Ts
        if alpha > 0 and abs(x) == 1 / (2 * alpha):
            coeffs[i] = π / 4 * np.sinc(1 / (2 * alpha))
        else:
            coeffs[i] = np.sinc(x) * np.cos(π * alpha * x) / (1 - (2 * alpha * x) ** 2)

    return coeffs / Ts


def pulseShape(param):
    """
    Generate a pulse shaping filter.

    Parameters
    ----------
    param : optipam.utils.parameters
        Pulse shaping parameters:
        - param.pulseType : string ('rect', 'rrc', 'rc')
            Type of pulse shaping filter. The default is 'rect'.

        - param.SpS : int, optional
            Number of samples per symbol. The default is 1.

        - param.nFilterTaps : int, optional
            Number of filter coefficients of rrc and rc filters. The default is 65.

        - param.rollOff : float, optional
            Rolloff of rrc and rc filters. The default is 0.1.

    Returns
    -------
    filterCoeffs : np.array
        Array of filter coefficients with unit response at the symbol center.

    """
    pulseType = getattr(param, "pulseType", "rect")
    SpS = int(getattr(param, "SpS", 1))
    nFilterTaps = int(getattr(param, "nFilterTaps", 65))
    rollOff = getattr(param, "rollOff", 0.1)

    if SpS < 1:
        raise InvalidArgument("pulseShape: SpS must be a positive integer")

    # symmetric time grid centered at t = 0
    t = (np.arange(nFilterTaps) - (nFilterTaps - 1) / 2) / SpS

    if pulseType == "rect":
        pulse = np.ones(SpS)
    elif pulseType == "rrc":
        pulse = rrcFilterTaps(t, rollOff, 1.0)
    elif pulseType == "rc":
        pulse = rcFilterTaps(t, rollOff, 1.0)
    else:
        raise InvalidArgument(f"pulseShape: invalid pulse type {pulseType!r}")

    return normFilterCoeffs(pulse)


def upsample(x, factor):
    """
    Upsample a signal by inserting zeros between samples.

    Parameters
    ----------
    x : np.array
        Input signal to upsample.
    factor : int
        Upsampling factor. `factor - 1` zeros are inserted after each sample.

    Returns
    -------
    xUp : np.array
        The upsampled signal.
    """
    x = np.asarray(x)
    xUp = np.zeros(factor * x.shape[0], dtype=x.dtype)
    xUp[0::factor] = x

    return xUp


def firFilter(h, x):
    """
    Causal FIR filtering.

    The filter group delay is not removed, so the output has the same length
    as the input and sample n depends only on inputs up to n.

    Parameters
    ----------
    h : np.array
        Coefficients of the FIR filter.
    x : np.array
        Input signal.

    Returns
    -------
    y : np.array
        Output (filtered) signal.
    """
    if len(h) > len(x):
        logg.warning("firFilter: filter is longer than the input signal")

    return signal.lfilter(h, 1, x)
