from setuptools import setup, find_packages

setup(
    name="connect4_engine",
    version="0.1",
    description="Time-bounded alpha-beta move selection for Connect Four",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "scripts": ["rich"],
        "test": ["pytest"],
    },
)
