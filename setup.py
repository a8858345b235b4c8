"""
Setup script for the PreQC MultiQC plugin.

This package registers the PreQC per tile quality module as a MultiQC plugin
so it can be discovered and loaded by MultiQC.
"""

from setuptools import setup

setup(
    name="preqc-multiqc",
    version="1.0.0",
    description="MultiQC plugin for PreQC per tile sequence quality reports",
    license="MIT",
    python_requires=">=3.10",
    packages=["preqc_multiqc", "preqc_multiqc.modules"],
    install_requires=[
        "multiqc>=1.22",
        "pandas>=1.0",
        "numpy>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "multiqc.modules.v1": [
            "preqc_per_tile = preqc_multiqc.modules.per_tile_quality:MultiqcModule",
        ],
        "multiqc.hooks.v1": [
            "execution_start = preqc_multiqc.hooks:execution_start",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
    ],
)
