"""
========================================
General utilities (:mod:`optipam.utils`)
========================================

.. autosummary::
   :toctree: generated/

   parameters             -- Class to be used as a struct of parameters.
   lin2dB                 -- Convert linear value to dB (decibels).
   dB2lin                 -- Convert dB (decibels) to a linear value.
   dBm2W                  -- Convert dBm to Watts.
   W2dBm                  -- Convert Watts to dBm.
   extinctionRatio        -- Convert an extinction ratio in dB to Pmin/Pmax.
   ber2Qfactor            -- Convert bit error rate (BER) to Q factor in dB.
"""

"""General utilities."""
import numpy as np
from scipy.special import erfcinv


class parameters:
    """
    Basic class to be used as a struct of parameters

    """

    def view(self):
        """
        Prints the attributes and their values in either standard or scientific notation.

        """
        for attr, value in self.__dict__.items():
            if isinstance(value, (int, float)) and (value > 10000 or 0 < abs(value) < 1e-3):
                print(f"{attr}: {value:.2e}")
            else:
                print(f"{attr}: {value}")


def lin2dB(x):
    """
    Convert linear value to dB (decibels).

    Parameters
    ----------
    x : float
        The linear value to be converted to dB.

    Returns
    -------
    float
        The value converted to dB, i.e 10log10(x).
    """
    return 10 * np.log10(x)


def dB2lin(x):
    """
    Convert dB (decibels) to a linear value.

    Parameters
    ----------
    x : float
        The value in dB to be converted to a linear value.

    Returns
    -------
    float
        The linear value.
    """
    return 10 ** (x / 10)


def dBm2W(x):
    """
    Convert dBm to Watts.

    Parameters
    ----------
    x : float
        The power value in dBm to be converted to Watts.

    Returns
    -------
    float
        The power value in Watts.
    """
    return 1e-3 * 10 ** (x / 10)


def W2dBm(x):
    """
    Convert Watts to dBm.

    Parameters
    ----------
    x : float
        The power value in Watts.

    Returns
    -------
    float
        The power value in dBm.
    """
    return 10 * np.log10(x / 1e-3)


def extinctionRatio(rexdB):
    """
    Convert an extinction ratio in dB to the linear ratio Pmin/Pmax.

    The sign of `rexdB` is ignored, so -10 dB and 10 dB both give 0.1.
    An infinite extinction ratio gives 0 (ideal zero-floor signaling).

    Parameters
    ----------
    rexdB : float
        Extinction ratio in dB.

    Returns
    -------
    float
        Pmin/Pmax.
    """
    return float(10 ** (-np.abs(rexdB) / 10))


def ber2Qfactor(ber):
    """
    Converts a bit error rate (BER) to a Q factor in dB.

    Parameters
    ----------
    ber : float
        The bit error rate to be converted.

    Returns
    -------
    float
        The Q factor corresponding to the input BER.
    """
    return lin2dB(np.sqrt(2) * erfcinv(2 * ber))
