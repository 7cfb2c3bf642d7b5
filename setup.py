"""
Setup script for tiny-hist.
"""

from setuptools import setup, find_packages

setup(
    name="tiny-hist",
    version="0.1.0",
    description="Streaming fixed-width histograms with average shifted histogram smoothing",
    packages=find_packages(include=["tiny_hist", "tiny_hist.*"]),
    package_data={"tiny_hist": ["py.typed"]},
    python_requires=">=3.8",
)
