import unittest
import numpy as np
import scipy.constants as const
from optipam.models.noise import (
    apdNoiseStd,
    pinNoiseStd,
    preampNoiseStd,
    referredNoiseStd,
    thermalNoiseStd,
)
from optipam.utils import parameters


class TestNoiseModels(unittest.TestCase):
    def test_thermal(self):
        noise = thermalNoiseStd(1e-22, 25e9)

        self.assertAlmostEqual(noise(0), np.sqrt(2.5e-12))
        self.assertEqual(noise(0), noise(1e-3))

    def test_pin_with_given_N0(self):
        param = parameters()
        param.N0 = 1e-22
        param.B = 25e9
        param.Id = 0

        noise = pinNoiseStd(param)
        I = 1e-3

        np.testing.assert_allclose(noise(0) ** 2, 1e-22 * 25e9, rtol=1e-12)
        np.testing.assert_allclose(
            noise(I) ** 2 - noise(0) ** 2, 2 * const.e * I * 25e9, rtol=1e-9
        )

    def test_pin_thermal_from_load(self):
        param = parameters()
        param.B = 10e9
        param.Tc = 25
        param.RL = 50
        param.Id = 5e-9

        noise = pinNoiseStd(param)
        σ2_T = 4 * const.k * 298.15 * 10e9 / 50
        σ2_dark = 2 * const.e * 5e-9 * 10e9

        np.testing.assert_allclose(noise(0) ** 2, σ2_T + σ2_dark, rtol=1e-12)
        self.assertGreater(noise(1e-3), noise(1e-4))

    def test_apd_excess_noise(self):
        param = parameters()
        param.G = 10
        param.ka = 0.09
        param.Id = 10e-9
        param.B = 25e9
        param.N0 = 1e-22

        noise = apdNoiseStd(param)
        I = 1e-3
        F = 0.09 * 10 + 0.91 * (2 - 1 / 10)
        σ2 = 1e-22 * 25e9 + 2 * const.e * 10**2 * F * (I / 10 + 10e-9) * 25e9

        np.testing.assert_allclose(noise(I) ** 2, σ2, rtol=1e-12)

    def test_apd_unit_gain_is_pin(self):
        param = parameters()
        param.G = 1
        param.B = 25e9
        param.N0 = 1e-22

        apd, pin = apdNoiseStd(param), pinNoiseStd(param)

        for I in [0, 1e-4, 1e-3]:
            self.assertAlmostEqual(apd(I) / pin(I), 1.0, places=12)

    def test_preamp_beat_noise(self):
        param = parameters()
        param.G = 20
        param.NF = 5
        param.B = 25e9
        param.Bopt = 100e9
        param.N0 = 1e-22

        noise = preampNoiseStd(param)
        I = 1e-3

        # signal-spontaneous beat noise grows linearly with the photocurrent
        np.testing.assert_allclose(
            noise(2 * I) ** 2 - noise(0) ** 2, 2 * (noise(I) ** 2 - noise(0) ** 2), rtol=1e-9
        )
        # spontaneous-spontaneous beat noise above the thermal floor
        self.assertGreater(noise(0) ** 2, 1e-22 * 25e9)

    def test_referred_noise(self):
        noise = pinNoiseStd()
        scale = 2e-3

        referred = referredNoiseStd(noise, scale)
        np.testing.assert_allclose(referred(0.5), noise(1e-3) / scale, rtol=1e-12)

        referred = referredNoiseStd(noise, scale, h=np.array([0.2, 2.0, 0.2]))
        np.testing.assert_allclose(referred(0.5), noise(scale * 0.7) / scale, rtol=1e-12)


if __name__ == "__main__":
    unittest.main()
