import unittest
import numpy as np
import pandas as pd
from optipam.comm.errors import InvalidArgument
from optipam.comm.levels import LevelSpacing
from optipam.comm.pam import PAM
from optipam.models.noise import pinNoiseStd, thermalNoiseStd
from optipam.utils import parameters


class TestPAM(unittest.TestCase):
    def setUp(self):
        self.pulse = parameters()
        self.pulse.pulseType = "rect"
        self.pulse.SpS = 4

    def test_constructor(self):
        mpam = PAM(4, 112e9, "equally-spaced", self.pulse)

        self.assertEqual(mpam.M, 4)
        self.assertEqual(mpam.Rs, 56e9)
        self.assertIs(mpam.level_spacing, LevelSpacing.EQUALLY_SPACED)
        self.assertFalse(mpam.optimize_level_spacing)
        np.testing.assert_allclose(mpam.levels, [0, 1 / 3, 2 / 3, 1])
        np.testing.assert_array_equal(mpam.pulse_shape.h, np.ones(4))

    def test_constructor_invalid(self):
        with self.assertRaises(InvalidArgument):
            PAM(4, 112e9, "random", self.pulse)
        with self.assertRaises(InvalidArgument):
            PAM(1, 112e9, "equally-spaced", self.pulse)
        with self.assertRaises(InvalidArgument):
            PAM(4, 112e9, "equally-spaced", lambda n: n >= 0)

    def test_pulse_taps_are_normalized(self):
        pulse = parameters()
        pulse.h = np.array([0.5, 2.0, 0.5])
        pulse.SpS = 2

        mpam = PAM(2, 10e9, "equally-spaced", pulse)

        np.testing.assert_allclose(mpam.pulse_shape.h, [0.25, 1, 0.25])
        # descriptor of the caller is left untouched
        np.testing.assert_array_equal(pulse.h, [0.5, 2.0, 0.5])

    def test_optimized_requires_optimization(self):
        mpam = PAM(4, 112e9, "optimized")

        self.assertTrue(mpam.optimize_level_spacing)
        with self.assertRaises(InvalidArgument):
            mpam.modulate([0, 1])
        with self.assertRaises(InvalidArgument):
            mpam.ber_awgn(lambda P: 0.1)

    def test_optimize_adjust_ber(self):
        param = parameters()
        param.N0 = (30e-12) ** 2
        param.B = 28e9
        noise = pinNoiseStd(param)

        mpam = PAM(4, 112e9, "optimized")
        self.assertIs(mpam.optimize(1.8e-4, -10, noise), mpam)
        self.assertEqual(mpam.diagnostics, [])
        np.testing.assert_allclose(mpam.ber_awgn(noise)[0], 1.8e-4, rtol=1e-3)

        # scaling back to the same mean keeps the BER
        Prx = np.mean(mpam.levels)
        self.assertIs(mpam.adjust(Prx, -10), mpam)
        np.testing.assert_allclose(mpam.ber_awgn(noise)[0], 1.8e-4, rtol=1e-3)

    def test_modulate_demodulate(self):
        mpam = PAM(8, 100e9, "equally-spaced", self.pulse)
        mpam.adjust(1e-3, -12)
        dataTX = np.random.randint(0, 8, 500)

        xd = mpam.modulate(dataTX)
        np.testing.assert_array_equal(mpam.demodulate(xd), dataTX)

    def test_modulate_requires_power_of_two_order(self):
        mpam = PAM(3, 10e9, "equally-spaced", self.pulse)

        # analysis works for any order
        self.assertGreater(mpam.ber_awgn(lambda P: 0.1)[0], 0)
        with self.assertRaises(InvalidArgument):
            mpam.modulate([0, 1, 2])
        with self.assertRaises(InvalidArgument):
            mpam.demodulate(mpam.levels)

    def test_signal(self):
        mpam = PAM(4, 100e9, "equally-spaced", self.pulse)
        dataTX = np.random.randint(0, 4, 100)

        xt, xd = mpam.signal(dataTX)

        self.assertEqual(xt.size, 4 * dataTX.size)
        # rectangular pulse holds each level for one symbol period
        np.testing.assert_allclose(xt.reshape(-1, 4), np.tile(xd[:, None], (1, 4)))

    def test_set_levels_and_normalize(self):
        mpam = PAM(2, 10e9, "equally-spaced")
        self.assertIs(mpam.set_levels([1e-4, 1e-3], [5e-4]), mpam)
        self.assertIs(mpam.normalize(), mpam)

        np.testing.assert_allclose(mpam.levels, [0.1, 1])
        np.testing.assert_allclose(mpam.thresholds, [0.5])

    def test_required_power(self):
        mpam = PAM(4, 100e9, "equally-spaced")
        N0 = (30e-12) ** 2
        PreqdBm = mpam.required_power(N0, 1e-4)

        mpam.adjust(1e-3 * 10 ** (PreqdBm / 10), -np.inf)
        ber, _ = mpam.ber_awgn(thermalNoiseStd(N0, mpam.Rs / 2))

        np.testing.assert_allclose(ber, 1e-4, rtol=1e-9)

    def test_summary(self):
        table = PAM(4, 112e9, "optimized", self.pulse).summary()

        self.assertIsInstance(table, pd.DataFrame)
        self.assertEqual(table.loc["PAM order", "Value"], 4)
        self.assertEqual(table.loc["Symbol rate", "Value"], 56)
        self.assertEqual(table.loc["Level spacing", "Value"], "optimized")
        self.assertEqual(table.loc["Pulse shape", "Value"], "rect")


if __name__ == "__main__":
    unittest.main()
