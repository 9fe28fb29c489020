from setuptools import setup

setup(
    name="tilenav",
    version="0.1.0",
    description="Platform navigation graphs and path search for 2D tile worlds",
    zip_safe=False,
    packages=["tilenav"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "networkx",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "tilenav = tilenav.cli:main",
        ],
    },
)
