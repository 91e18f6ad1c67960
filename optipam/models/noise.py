"""
==========================================================================
Signal-dependent receiver noise models (:mod:`optipam.models.noise`)
==========================================================================

.. autosummary::
   :toctree: generated/

   thermalNoiseStd       -- Thermal noise limited receiver (signal independent)
   pinNoiseStd           -- p-i-n receiver with thermal, shot and dark current noise
   apdNoiseStd           -- Avalanche photodiode receiver with excess shot noise
   preampNoiseStd        -- Optically pre-amplified receiver with beat noise
   referredNoiseStd      -- Refer a noise model to normalized levels, optionally with ISI

Each function returns a callable noise_std(I) giving the standard deviation
of the receiver noise [A] when the noiseless photocurrent is I [A].
"""

"""Signal-dependent receiver noise models."""
import logging as logg

import numpy as np
import scipy.constants as const

from optipam.dsp.core import normFilterCoeffs
from optipam.utils import dB2lin


def thermalNoiseStd(N0, B):
    """
    Thermal noise limited receiver.

    Parameters
    ----------
    N0 : float
        One-sided thermal noise power spectral density [A²/Hz].
    B : float
        Receiver noise bandwidth [Hz].

    Returns
    -------
    callable
        noise_std(I) = sqrt(N0*B).
    """
    assert N0 > 0, "Thermal noise PSD should be a positive scalar"
    assert B > 0, "Noise bandwidth should be a positive scalar"

    σT = np.sqrt(N0 * B)

    return lambda I: σT


def _thermalVariance(param, B):
    N0 = getattr(param, "N0", None)

    if N0 is not None:
        return N0 * B

    Tc = getattr(param, "Tc", 25)
    RL = getattr(param, "RL", 50)
    T = Tc + 273.15  # temperature in Kelvin

    return 4 * const.k * T * B / RL


def pinNoiseStd(param=None):
    """
    p-i-n receiver noise.

    Parameters
    ----------
    param : optipam.utils.parameters, optional
        Parameters of the receiver.

        - param.Id: dark current [A][default: 10e-9 A]

        - param.B: receiver noise bandwidth [Hz][default: 30e9 Hz]

        - param.N0: one-sided thermal noise PSD [A²/Hz]. If not given, the
          thermal noise of the load resistance is used [default: None]

        - param.Tc: temperature [°C][default: 25°C]

        - param.RL: load resistance [Ω][default: 50Ω]

    Returns
    -------
    callable
        noise_std(I) = sqrt(σT² + 2q(I + Id)B).

    References
    ----------
    [1] G. P. Agrawal, Fiber-Optic Communication Systems. Wiley, 2021.
    """
    Id = getattr(param, "Id", 10e-9)
    B = getattr(param, "B", 30e9)

    assert B > 0, "Noise bandwidth should be a positive scalar"
    assert Id >= 0, "Dark current should be non-negative"

    σ2_T = _thermalVariance(param, B)
    q = const.e

    def noise_std(I):
        # shot noise of the signal and dark currents
        σ2_s = 2 * q * (I + Id) * B
        return np.sqrt(σ2_T + σ2_s)

    return noise_std


def apdNoiseStd(param=None):
    """
    Avalanche photodiode (APD) receiver noise.

    Shot noise of the signal and dark currents is multiplied by the avalanche
    gain and by the McIntyre excess noise factor
    F = ka*G + (1 - ka)*(2 - 1/G). The photocurrent I is taken after the
    avalanche gain, so the primary photocurrent is I/G.

    Parameters
    ----------
    param : optipam.utils.parameters, optional
        Parameters of the receiver.

        - param.G: avalanche gain (linear) [default: 10]

        - param.ka: impact ionization factor [default: 0.09]

        - param.Id: primary dark current [A][default: 10e-9 A]

        - param.B: receiver noise bandwidth [Hz][default: 30e9 Hz]

        - param.N0, param.Tc, param.RL: thermal noise (see `pinNoiseStd`)

    Returns
    -------
    callable
        noise_std(I) = sqrt(σT² + 2qG²F(I/G + Id)B).

    References
    ----------
    [1] R. J. McIntyre, "Multiplication noise in uniform avalanche diodes," IEEE Transactions on Electron Devices, vol. ED-13, no. 1, pp. 164-168, 1966.
    """
    G = getattr(param, "G", 10)
    ka = getattr(param, "ka", 0.09)
    Id = getattr(param, "Id", 10e-9)
    B = getattr(param, "B", 30e9)

    assert G >= 1, "APD gain should be a scalar >= 1"
    assert 0 <= ka <= 1, "Impact ionization factor should be in [0, 1]"
    assert B > 0, "Noise bandwidth should be a positive scalar"

    F = ka * G + (1 - ka) * (2 - 1 / G)  # excess noise factor

    σ2_T = _thermalVariance(param, B)
    q = const.e

    def noise_std(I):
        σ2_s = 2 * q * G**2 * F * (I / G + Id) * B
        return np.sqrt(σ2_T + σ2_s)

    return noise_std


def preampNoiseStd(param=None):
    """
    Optically pre-amplified receiver noise.

    Includes thermal noise, signal-spontaneous and spontaneous-spontaneous
    beat noise with ASE in a single polarization. The photocurrent I is
    taken after amplification.

    Parameters
    ----------
    param : optipam.utils.parameters, optional
        Parameters of the receiver.

        - param.G: amplifier gain [dB][default: 20 dB]

        - param.NF: amplifier noise figure [dB][default: 5 dB]

        - param.Fc: optical carrier frequency [Hz][default: 193.1 THz]

        - param.R: photodiode responsivity [A/W][default: 1 A/W]

        - param.B: electrical noise bandwidth (one-sided) [Hz][default: 30e9 Hz]

        - param.Bopt: optical filter noise bandwidth [Hz][default: 4*B]

        - param.N0, param.Tc, param.RL: thermal noise (see `pinNoiseStd`)

    Returns
    -------
    callable
        noise_std(I).

    References
    ----------
    [1] R. -J. Essiambre,et al, "Capacity Limits of Optical Fiber Networks," in Journal of Lightwave Technology, vol. 28, no. 4, pp. 662-701, 2010.
    """
    G = getattr(param, "G", 20)
    NF = getattr(param, "NF", 5)
    Fc = getattr(param, "Fc", 193.1e12)
    R = getattr(param, "R", 1)
    B = getattr(param, "B", 30e9)
    Bopt = getattr(param, "Bopt", 4 * B)

    assert NF >= 3, "The minimal amplifier noise figure is 3 dB"
    assert R > 0, "PD responsivity should be a positive scalar"

    if Bopt < B:
        logg.warning("preampNoiseStd: optical bandwidth narrower than electrical bandwidth")

    G_lin = dB2lin(G)
    NF_lin = dB2lin(NF)
    nsp = (G_lin * NF_lin - 1) / (2 * (G_lin - 1))

    # ASE PSD per polarization referred to the photocurrent
    S = R * (G_lin - 1) * nsp * const.h * Fc

    σ2_T = _thermalVariance(param, B)
    σ2_sp_sp = 2 * S**2 * Bopt * B * (1 - B / (2 * Bopt))

    def noise_std(I):
        σ2_sig_sp = 2 * I * S * B
        return np.sqrt(σ2_T + σ2_sig_sp + σ2_sp_sp)

    return noise_std


def referredNoiseStd(noise_std, scale, h=None):
    """
    Refer a noise model to normalized levels.

    Levels normalized to the highest level are mapped back to physical
    photocurrent with `scale`. When the sampled pulse response `h` is given,
    the photocurrent includes the worst-case intersymbol interference of
    all other taps at the highest level.

    Parameters
    ----------
    noise_std : callable
        Noise model in physical units.
    scale : float
        Photocurrent of the normalized level 1 [A].
    h : np.array, optional
        Sampled pulse response at the symbol rate.

    Returns
    -------
    callable
        noise_std'(P) = noise_std(scale*(P*h0 + sum(h) - h0))/scale.
    """
    assert scale > 0, "scale should be a positive scalar"

    if h is None:
        h0, isi = 1.0, 0.0
    else:
        h = normFilterCoeffs(h)
        h0 = 1.0
        isi = np.sum(h) - h0

    return lambda P: noise_std(scale * (P * h0 + isi)) / scale
