"""
=========================================================
M-PAM modulation format (:mod:`optipam.comm.pam`)
=========================================================

.. autosummary::
   :toctree: generated/

   PAM                      -- M-PAM modulation with equally-spaced or optimized levels
"""

"""M-PAM modulation format."""
import copy
import logging as logg

import numpy as np
import pandas as pd

from optipam.comm.errors import InvalidArgument
from optipam.comm.levels import LevelSet, LevelSpacing
from optipam.comm.metrics import requiredPower
from optipam.comm.modulation import pamDemodulate, pamModulate
from optipam.dsp.core import firFilter, normFilterCoeffs, pulseShape, upsample
from optipam.utils import parameters


class PAM:
    """
    M-PAM modulation format for intensity modulation and direct detection links.

    Parameters
    ----------
    M : int
        Constellation size.
    Rb : float
        Bit rate [b/s].
    level_spacing : str or LevelSpacing
        'equally-spaced' or 'optimized'. With 'optimized', `optimize` must be
        called before the levels are used.
    pulse_shape : optipam.utils.parameters, optional
        Pulse shape descriptor. Either `pulse_shape.h` holds the pulse
        shaping filter coefficients, or the filter is generated by
        `optipam.dsp.core.pulseShape` from `pulseType`, `SpS`, `rollOff`
        and `nFilterTaps`. `SpS` is the number of samples per symbol
        [default: rectangular pulse with SpS = 1].

    Examples
    --------
    >>> mpam = PAM(4, 112e9, 'optimized')
    >>> mpam.optimize(1.8e-4, -10, lambda P: np.sqrt(1e-4 + 1e-2 * P))
    >>> mpam.adjust(1e-3, -10)
    """

    def __init__(self, M, Rb, level_spacing, pulse_shape=None):
        self.levelSet = LevelSet(M, level_spacing)
        self.M = self.levelSet.M
        self.Rb = Rb

        if pulse_shape is None:
            pulse_shape = parameters()
            pulse_shape.pulseType = "rect"
            pulse_shape.SpS = 1
        elif callable(pulse_shape):
            raise InvalidArgument("PAM: pulse_shape must be a parameters object, not a function")
        else:
            pulse_shape = copy.copy(pulse_shape)

        if getattr(pulse_shape, "h", None) is None:
            pulse_shape.h = pulseShape(pulse_shape)

        pulse_shape.SpS = int(getattr(pulse_shape, "SpS", 1))
        pulse_shape.h = normFilterCoeffs(pulse_shape.h)

        self.pulse_shape = pulse_shape

    def __repr__(self):
        return f"PAM(M={self.M}, Rb={self.Rb:g}, level_spacing={self.level_spacing.value!r})"

    @property
    def Rs(self):
        """Symbol rate [baud]."""
        return self.Rb / np.log2(self.M)

    @property
    def level_spacing(self):
        return self.levelSet.spacing

    @property
    def optimize_level_spacing(self):
        """True if levels are optimized."""
        return self.levelSet.spacing is LevelSpacing.OPTIMIZED

    @property
    def levels(self):
        return self.levelSet.levels

    @property
    def thresholds(self):
        return self.levelSet.thresholds

    @property
    def diagnostics(self):
        """Non-fatal conditions of the last level spacing optimization."""
        return self.levelSet.diagnostics

    def summary(self):
        """
        Table summarizing the PAM parameters.

        Returns
        -------
        pd.DataFrame
            Variables, values and units indexed by parameter name.
        """
        return pd.DataFrame(
            {
                "Variable": ["M", "Rs", "level_spacing", "pulse_shape.pulseType"],
                "Value": [
                    self.M,
                    self.Rs / 1e9,
                    self.level_spacing.value,
                    getattr(self.pulse_shape, "pulseType", "custom"),
                ],
                "Unit": ["", "Gbaud", "", ""],
            },
            index=["PAM order", "Symbol rate", "Level spacing", "Pulse shape"],
        )

    def set_levels(self, levels, thresholds):
        """Set levels and decision thresholds (only their number is checked). Returns self."""
        self.levelSet.set_levels(levels, thresholds)
        return self

    def normalize(self):
        """Normalize levels and thresholds so that the last level is 1. Returns self."""
        self.levelSet.normalize()
        return self

    def adjust(self, Ptx, rexdB):
        """
        Adjust levels to the transmitted power Ptx [W] and extinction ratio rexdB [dB].

        Equally-spaced levels get the extinction ratio floor, optimized levels
        are only scaled since the extinction ratio is enforced by `optimize`.
        Returns self.
        """
        self.levelSet.adjust(Ptx, rexdB)
        return self

    def optimize(self, BERtarget, rexdB, noise_std, verbose=False, param=None):
        """
        Optimize level spacing and decision thresholds for a target BER.

        Parameters
        ----------
        BERtarget : float
            Target BER.
        rexdB : float
            Extinction ratio [dB], defined as Pmin/Pmax.
        noise_std : callable
            Noise standard deviation as a function of the signal level.
        verbose : bool, optional
            Log the convergence of the optimization. The default is False.
        param : optipam.utils.parameters, optional
            Optimization settings (see `optipam.comm.levels.optimizeLevelSpacing`).

        Returns
        -------
        PAM
            self, with levels and thresholds referred to the input of `noise_std`.
        """
        if not self.optimize_level_spacing:
            logg.info("PAM: optimizing levels of an equally-spaced PAM, level spacing is now 'optimized'")

        self.levelSet.optimize(BERtarget, rexdB, noise_std, verbose=verbose, param=param)
        return self

    def ber_awgn(self, noise_std):
        """
        BER in AWGN channel where the noise std is given by the function noise_std.

        Returns
        -------
        ber : float
            Total BER.
        berk : np.array
            BER of the kth level, i.e. p(error | level k)p(level k)/log2(M).
        """
        return self.levelSet.ber_awgn(noise_std)

    def required_power(self, N0, BERtarget):
        """Received power [dBm] to reach BERtarget with a thermal noise limited receiver (R = 1 A/W)."""
        return requiredPower(self.M, self.Rb, N0, BERtarget)

    def modulate(self, dataTX):
        """
        Generate PAM symbols.

        Parameters
        ----------
        dataTX : array of ints
            Transmitted symbols from 0 to M-1.

        Returns
        -------
        np.array
            Signal levels at the symbol rate.
        """
        self.levelSet._checkPopulated()
        return pamModulate(dataTX, self.levels)

    def demodulate(self, yd):
        """
        Demodulate PAM signal at the symbol rate.

        Parameters
        ----------
        yd : np.array
            PAM signal at the symbol rate.

        Returns
        -------
        np.array of ints
            Detected symbols.
        """
        self.levelSet._checkPopulated()
        return pamDemodulate(yd, self.thresholds)

    def signal(self, dataTX):
        """
        Generate pulse shaped PAM signal.

        The group delay of the pulse shaping filter is not removed.

        Parameters
        ----------
        dataTX : array of ints
            Transmitted symbols from 0 to M-1.

        Returns
        -------
        xt : np.array
            Pulse shaped signal with pulse_shape.SpS samples per symbol.
        xd : np.array
            Symbols at the symbol rate.
        """
        xd = self.modulate(dataTX)
        ximp = upsample(xd, self.pulse_shape.SpS)
        xt = firFilter(self.pulse_shape.h, ximp)

        return xt, xd
