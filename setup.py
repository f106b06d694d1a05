from setuptools import setup, find_packages

setup(
    name = "pds-harvest",
    version = "0.1.0",
    packages = find_packages(include = ["harvest", "harvest.*"]),
    install_requires=[
        "aiofiles",
        "loguru",
        "pydantic>=2.0",
        "PyYAML",
        "tqdm",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio==1.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "harvest = harvest.pipeline:cli",
        ],
    },
    python_requires = ">=3.9",
)
