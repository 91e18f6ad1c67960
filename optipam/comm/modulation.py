"""
==============================================================
PAM modulation utilities (:mod:`optipam.comm.modulation`)
==============================================================

.. autosummary::
   :toctree: generated/

   grayCode                 -- Gray code generator
   bin2gray                 -- Convert binary-coded integers to Gray-coded integers
   gray2bin                 -- Convert Gray-coded integers to binary-coded integers
   pamModulate              -- Map Gray-coded symbols to PAM levels
   pamDemodulate            -- Threshold detection of PAM samples to Gray-coded symbols
"""

"""PAM modulation utilities."""
import numpy as np

from optipam.comm.errors import InvalidArgument


def _checkGrayOrder(M, name):
    # Gray mapping is a permutation of 0..M-1 only for M = 2^k
    if M < 2 or M & (M - 1):
        raise InvalidArgument(f"{name}: Gray mapping requires M to be a power of 2, got M = {M}")


def grayCode(n):
    """
    Gray code generator.

    Parameters
    ----------
    n : int
        length of the codeword in bits.

    Returns
    -------
    code : list
           list of binary strings of the gray code.

    """
    return [bin(val)[2:].zfill(n) for val in bin2gray(np.arange(1 << n))]


def bin2gray(n):
    """
    Convert binary-coded integers to Gray-coded integers.

    Parameters
    ----------
    n : int or array of ints
        Binary-coded integers (e.g. the position of a PAM level).

    Returns
    -------
    np.array of ints
        Gray-coded integers.

    """
    n = np.asarray(n, dtype=np.int64)
    return n ^ (n >> 1)


def gray2bin(g):
    """
    Convert Gray-coded integers to binary-coded integers.

    Parameters
    ----------
    g : int or array of ints
        Gray-coded integers.

    Returns
    -------
    np.array of ints
        Binary-coded integers.

    """
    n = np.array(g, dtype=np.int64)
    shift = n >> 1
    while np.any(shift):
        n ^= shift
        shift >>= 1
    return n


def pamModulate(symbols, levels):
    """
    Map Gray-coded symbols to PAM levels.

    Parameters
    ----------
    symbols : array of ints
        Symbols from 0 to M-1.
    levels : np.array
        M signal levels in increasing order, with M a power of 2.

    Returns
    -------
    np.array
        Signal level of each symbol.

    """
    levels = np.asarray(levels, dtype=np.float64)
    symbols = np.asarray(symbols, dtype=np.int64).ravel()
    _checkGrayOrder(levels.size, "pamModulate")

    if np.any(symbols < 0) or np.any(symbols >= levels.size):
        raise InvalidArgument(f"pamModulate: symbols must be integers from 0 to {levels.size - 1}")

    return levels[gray2bin(symbols)]


def pamDemodulate(samples, thresholds):
    """
    Threshold detection of PAM samples to Gray-coded symbols.

    A sample equal to a threshold is decided in favor of the upper level.

    Parameters
    ----------
    samples : np.array
        Received samples at the symbol rate.
    thresholds : np.array
        M-1 decision thresholds in increasing order.

    Returns
    -------
    np.array of ints
        Detected symbols from 0 to M-1.

    """
    samples = np.asarray(samples, dtype=np.float64).ravel()
    thresholds = np.asarray(thresholds, dtype=np.float64).ravel()
    _checkGrayOrder(thresholds.size + 1, "pamDemodulate")

    position = np.sum(samples[:, None] >= thresholds[None, :], axis=1)

    return bin2gray(position)
