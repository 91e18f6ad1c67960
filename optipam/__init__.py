"""Optical PAM level spacing optimization and analytic BER."""

__version__ = "0.1.0"
