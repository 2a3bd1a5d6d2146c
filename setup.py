"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/lumos-robotics/lumosbuild"
KEYWORDS = "embedded arm stm32 arduino compiler toolchain firmware microcontroller"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="lumosbuild",
        version="0.1.0",
        description="Firmware build driver for Lumos STM32 boards",
        maintainer="Lumos Robotics",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        package_data={"lumosbuild": ["boards/*.json"]},
        include_package_data=True,
        install_requires=["psutil"],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["lumos = lumosbuild.cli:main"]},
    )
