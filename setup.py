# Authors: OptiPAM contributors
# License: BSD 3-Clause

from setuptools import setup

DISTNAME = "OptiPAM"
DESCRIPTION = "Level spacing optimization and analytic BER of optical M-PAM links"
LONG_DESCRIPTION = open("README.md", encoding="utf8").read()
MAINTAINER = "OptiPAM contributors"
LICENSE = "BSD 3-Clause"
VERSION = "0.1.0"

setup(
    name=DISTNAME,
    maintainer=MAINTAINER,
    description=DESCRIPTION,
    license=LICENSE,
    version=VERSION,
    packages=["optipam", "optipam.comm", "optipam.dsp", "optipam.models"],
    install_requires=[
        "numpy>=1.9.2",
        "scipy>=1.4.0",
        "tqdm>=4.64.1",
        "numba>=0.54.1",
        "pandas>=2.0.0",
    ],
    extras_require={"test": ["pytest"]},
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Telecommunications Industry",
        "Operating System :: Unix",
        "Programming Language :: Python",
        "Topic :: Scientific/Engineering",
    ],
    python_requires=">=3.8",
)
