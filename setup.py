from setuptools import setup, find_packages

setup(
    name="repograph",
    version="0.1.0",
    description="Lint and graph crate dependencies spanning several repositories.",
    license="GPL-3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "rich>=13.0.0",
        "tomli>=1.1.0; python_version < '3.11'",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "repograph=repograph.modules.cli:main",
        ],
    },
)
