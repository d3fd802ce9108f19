from setuptools import setup, find_packages

setup(
    name="peerchat",
    version="1.0.0",
    description="Peer-to-peer UDP text chat with self-echo suppression",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "colorama",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "peerchat = peerchat.client:main",
        ],
    },
    python_requires=">=3.10",
)
