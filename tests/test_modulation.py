import unittest
import numpy as np
from optipam.comm.errors import InvalidArgument
from optipam.comm.levels import LevelSet
from optipam.comm.modulation import bin2gray, grayCode, gray2bin, pamDemodulate, pamModulate


class TestModulationFunctions(unittest.TestCase):
    def test_GrayCode(self):
        # Test GrayCode function for different values of n
        for n in range(1, 6):
            with self.subTest(n=n):
                result = grayCode(n)
                self.assertEqual(len(result), 2**n)
                self.assertEqual(len(result[0]), n)
                self.assertEqual(len(set(result)), 2**n)

    def test_gray_conversions(self):
        n = np.arange(256)
        np.testing.assert_array_equal(bin2gray(np.arange(4)), [0, 1, 3, 2])
        np.testing.assert_array_equal(gray2bin(bin2gray(n)), n)
        np.testing.assert_array_equal(bin2gray(gray2bin(n)), n)

    def test_adjacent_levels_differ_in_one_bit(self):
        g = bin2gray(np.arange(16))
        for k in range(15):
            self.assertEqual(bin(int(g[k] ^ g[k + 1])).count("1"), 1)

    def test_pamModulate(self):
        levels = LevelSet(4).levels
        result = pamModulate([0, 1, 3, 2], levels)
        np.testing.assert_allclose(result, levels)

    def test_pamModulate_out_of_range(self):
        levels = LevelSet(4).levels
        with self.assertRaises(InvalidArgument):
            pamModulate([0, 4], levels)
        with self.assertRaises(InvalidArgument):
            pamModulate([-1], levels)

    def test_non_power_of_two_order(self):
        ls = LevelSet(3)
        with self.assertRaises(InvalidArgument):
            pamModulate([0, 1, 2], ls.levels)
        with self.assertRaises(InvalidArgument):
            pamDemodulate(ls.levels, ls.thresholds)

    def test_pamDemodulate(self):
        ls = LevelSet(8)
        symbols = np.random.randint(0, 8, 1000)

        samples = pamModulate(symbols, ls.levels)
        noisy = samples + np.random.uniform(-0.05, 0.05, samples.size)

        np.testing.assert_array_equal(pamDemodulate(noisy, ls.thresholds), symbols)

    def test_pamDemodulate_ties_go_to_upper_level(self):
        ls = LevelSet(4)
        result = pamDemodulate(ls.thresholds, ls.thresholds)
        np.testing.assert_array_equal(result, [1, 3, 2])


if __name__ == '__main__':
    unittest.main()
