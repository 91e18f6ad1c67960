"""
==============================================================
BER versus transmitted power sweeps (:mod:`optipam.comm.sweep`)
==============================================================

.. autosummary::
   :toctree: generated/

   berVsPower               -- Analytic BER of a PAM link for a range of transmitted powers
"""

"""BER versus transmitted power sweeps."""
import copy
import logging as logg
from concurrent.futures import ThreadPoolExecutor

import numpy as np
from tqdm import tqdm

from optipam.utils import dBm2W


def _berAtPower(mpam, Ptx, rexdB, noise_std):
    # each point owns its level set
    mpam = copy.deepcopy(mpam)
    mpam.adjust(Ptx, rexdB)
    return mpam.ber_awgn(noise_std)[0]


def berVsPower(mpam, PtxdBm, rexdB, noise_std, linkGain=1.0, param=None):
    """
    Analytic BER of a PAM link for a range of transmitted powers.

    For each transmitted power the levels of a private copy of `mpam` are
    adjusted to Ptx*linkGain (i.e. referred to the input of `noise_std`)
    and the BER is computed with `PAM.ber_awgn`. `mpam` is not modified.

    Parameters
    ----------
    mpam : optipam.comm.pam.PAM
        PAM modulation with levels set (equally-spaced or optimized).
    PtxdBm : np.array
        Transmitted powers [dBm].
    rexdB : float
        Extinction ratio [dB], defined as Pmin/Pmax.
    noise_std : callable
        Noise standard deviation as a function of the received signal level.
    linkGain : float, optional
        Gain from transmitted optical power to received signal level (e.g.
        fiber attenuation x amplifier gain x responsivity). The default is 1.
    param : optipam.utils.parameters, optional
        Sweep options:

        - param.nWorkers: number of worker threads [default: 1]

        - param.prgsBar: show a progress bar [default: False]

        - param.stopAtZero: stop once the BER underflows to 0 (sequential sweeps only) [default: False]

    Returns
    -------
    ber : np.array
        BER at each transmitted power. Points skipped by `stopAtZero` are 0.

    """
    nWorkers = getattr(param, "nWorkers", 1)
    prgsBar = getattr(param, "prgsBar", False)
    stopAtZero = getattr(param, "stopAtZero", False)

    Ptx = dBm2W(np.atleast_1d(np.asarray(PtxdBm, dtype=np.float64))) * linkGain
    ber = np.zeros(Ptx.size)

    if nWorkers > 1:
        if stopAtZero:
            logg.warning("berVsPower: stopAtZero is ignored in parallel sweeps")

        with ThreadPoolExecutor(max_workers=nWorkers) as executor:
            futures = [
                executor.submit(_berAtPower, mpam, P, rexdB, noise_std) for P in Ptx
            ]
            for k, future in enumerate(tqdm(futures, disable=not (prgsBar))):
                ber[k] = future.result()
    else:
        for k in tqdm(range(Ptx.size), disable=not (prgsBar)):
            ber[k] = _berAtPower(mpam, Ptx[k], rexdB, noise_std)

            if stopAtZero and ber[k] == 0:
                logg.info("berVsPower: BER reached 0 at %.2f dBm", np.atleast_1d(PtxdBm)[k])
                break

    return ber
