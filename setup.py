# setup.py
from setuptools import setup, find_packages

setup(
    name="pbrtscene",
    version="0.1.0",
    description="PBRT-v3 scene parser, scene graph and round-trip writer",
    packages=find_packages(include=["pbrtscene", "pbrtscene.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20.0",
        "Pillow>=9.0.0",
        "lark>=1.1.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "pbrtscene=pbrtscene.cli:main",
        ],
    },
)
