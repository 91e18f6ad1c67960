# ---
# jupyter:
#   jupytext:
#     formats: ipynb,py:light
#     text_representation:
#       extension: .py
#       format_name: light
#       format_version: '1.5'
#   kernelspec:
#     display_name: Python 3 (ipykernel)
#     language: python
#     name: python3
# ---

# # Equally-spaced vs. optimized 4-PAM with an optically pre-amplified receiver

# +
import logging as logg

import numpy as np
import pandas as pd

from optipam.comm.pam import PAM
from optipam.comm.sweep import berVsPower
from optipam.models.noise import preampNoiseStd
from optipam.utils import parameters, W2dBm
# -

logg.basicConfig(level=logg.INFO)

# +
# simulation parameters
M = 4              # order of the modulation format
Rb = 112e9         # bit rate
BERtarget = 1.8e-4 # target BER
rexdB = -15        # extinction ratio (Pmin/Pmax) in dB
linkAttdB = 4      # fiber link attenuation in dB

# receiver: amplifier + photodiode + TIA
paramRx = parameters()
paramRx.G = 20            # amplifier gain [dB]
paramRx.NF = 5            # amplifier noise figure [dB]
paramRx.R = 1             # responsivity [A/W]
paramRx.B = Rb / np.log2(M) / 2  # electrical noise bandwidth [Hz]
paramRx.Bopt = 4 * paramRx.B     # optical filter noise bandwidth [Hz]
paramRx.N0 = (30e-12) ** 2       # thermal noise PSD [A²/Hz]
paramRx.view()

noise_std = preampNoiseStd(paramRx)

# gain from transmitted power to photocurrent
linkGain = 10 ** (-linkAttdB / 10) * 10 ** (paramRx.G / 10) * paramRx.R
# -

# ### Level spacing optimization
#
# Optimized levels are found at the receiver (photocurrent), where the noise
# model is defined.

# +
mpamOpt = PAM(M, Rb, "optimized")
mpamOpt.optimize(BERtarget, rexdB, noise_std, verbose=True)

print(mpamOpt.summary())
print("Levels (mA):", 1e3 * mpamOpt.levels)
print("Thresholds (mA):", 1e3 * mpamOpt.thresholds)

# transmitted power that produces these levels
PtxOpt = np.mean(mpamOpt.levels) / linkGain
print(f"Required transmitted power (optimized): {W2dBm(PtxOpt):.2f} dBm")
# -

# ### BER vs. transmitted power

# +
PtxdBm = np.arange(-22, -8, 0.5)

paramSweep = parameters()
paramSweep.prgsBar = True
paramSweep.nWorkers = 4

mpamEq = PAM(M, Rb, "equally-spaced")

ber = pd.DataFrame(
    {
        "equally-spaced": berVsPower(mpamEq, PtxdBm, rexdB, noise_std, linkGain, paramSweep),
        "optimized": berVsPower(mpamOpt, PtxdBm, rexdB, noise_std, linkGain, paramSweep),
    },
    index=pd.Index(PtxdBm, name="Ptx (dBm)"),
)

print(np.log10(ber))
