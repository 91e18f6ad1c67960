import unittest
import numpy as np
from optipam.comm.errors import DomainError
from optipam.comm.levels import LevelSet
from optipam.comm.metrics import (
    Qfunc,
    Qinv,
    berAWGN,
    requiredPower,
    serAWGN,
    theoryBER,
)
from optipam.models.noise import thermalNoiseStd
from optipam.utils import ber2Qfactor, dBm2W


class TestCommunicationMetrics(unittest.TestCase):
    def test_Qfunc(self):
        self.assertAlmostEqual(Qfunc(0), 0.5)
        np.testing.assert_allclose(Qfunc(np.array([1.0, 3.0])), [0.15865525393, 1.3498980316e-3], rtol=1e-9)
        # no cancellation in the far tail
        np.testing.assert_allclose(Qfunc(10.0), 7.61985302416e-24, rtol=1e-9)

    def test_Qinv(self):
        x = np.array([0.5, 1.0, 3.7, 7.0])
        np.testing.assert_allclose(Qinv(Qfunc(x)), x, rtol=1e-9)

    def test_binary_ber_constant_noise(self):
        for σ in [0.05, 0.1, 0.3]:
            with self.subTest(σ=σ):
                ls = LevelSet(2)
                Δ = ls.levels[1] - ls.levels[0]
                ber, berk = ls.ber_awgn(lambda P: σ)

                np.testing.assert_allclose(ber, Qfunc(Δ / (2 * σ)), rtol=1e-12)
                np.testing.assert_allclose(berk, [ber / 2, ber / 2], rtol=1e-12)

    def test_ser_interior_levels_have_two_tails(self):
        levels, thresholds = LevelSet(4).levels, LevelSet(4).thresholds
        ser = serAWGN(levels, thresholds, lambda P: 0.1)
        tail = Qfunc((1 / 6) / 0.1)

        np.testing.assert_allclose(ser, [tail, 2 * tail, 2 * tail, tail], rtol=1e-12)

    def test_noise_evaluated_at_level(self):
        levels = np.array([0.0, 1.0])
        thresholds = np.array([0.5])
        ser = serAWGN(levels, thresholds, lambda P: 0.1 + 0.1 * P)

        np.testing.assert_allclose(ser, [Qfunc(0.5 / 0.1), Qfunc(0.5 / 0.2)], rtol=1e-12)

    def test_equally_spaced_ber_matches_closed_form(self):
        M = 8
        σ = 0.03
        ls = LevelSet(M)
        Δ = ls.levels[1] - ls.levels[0]

        ber, _ = berAWGN(ls.levels, ls.thresholds, lambda P: σ)
        expected = 2 * (M - 1) / M * Qfunc(Δ / (2 * σ)) / np.log2(M)

        np.testing.assert_allclose(ber, expected, rtol=1e-12)

    def test_nonpositive_noise(self):
        ls = LevelSet(4)
        with self.assertRaises(DomainError):
            ls.ber_awgn(lambda P: 0.0)
        with self.assertRaises(DomainError):
            ls.ber_awgn(lambda P: -0.1)

    def test_theoryBER_binary(self):
        EbN0 = np.arange(0, 12, 2.0)
        np.testing.assert_allclose(theoryBER(2, EbN0), Qfunc(np.sqrt(2 * 10 ** (EbN0 / 10))), rtol=1e-12)

    def test_required_power(self):
        M, Rb, N0, BERtarget = 4, 100e9, (30e-12) ** 2, 1e-4

        PreqdBm = requiredPower(M, Rb, N0, BERtarget)

        # thermal noise in the Nyquist bandwidth of the symbol rate
        noise = thermalNoiseStd(N0, Rb / np.log2(M) / 2)
        ls = LevelSet(M).adjust(dBm2W(PreqdBm), -np.inf)

        np.testing.assert_allclose(ls.ber_awgn(noise)[0], BERtarget, rtol=1e-9)

    def test_ber2Qfactor(self):
        self.assertAlmostEqual(ber2Qfactor(Qfunc(6.0)), 10 * np.log10(6.0), places=6)


if __name__ == "__main__":
    unittest.main()
