# setup.py
from setuptools import setup, find_packages

setup(
    name="bvfit3d",
    version="1.0.0",
    description="Bounding volume fitting (OBB, RSS, kIOS, OBBRSS) for collision BVHs",
    packages=find_packages(include=["bvfit3d", "bvfit3d.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20.0",
        "numba>=0.55.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
