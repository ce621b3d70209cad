import re

from setuptools import setup

with open("README.rst") as readme:
    long_description = readme.read()

with open("txbuilder/__init__.py") as init:
    __version__ = re.search(r'__version__ = "([^"]+)"', init.read()).group(1)

setup(
    name="bitcoin-txbuilder",
    version=__version__,
    description="Build and sign raw legacy Bitcoin transactions from UTXOs",
    long_description=long_description,
    license="MIT",
    keywords="bitcoin transaction utxo signing raw",
    python_requires=">=3.9",
    install_requires=[
        "base58check>=1.0.2,<2.0",
        "ecdsa>=0.16,<1.0",
        "bech32>=1.2,<2.0",
        "loguru>=0.7",
        "ripemd-hash>=1.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    packages=["txbuilder"],
    zip_safe=False,
)
