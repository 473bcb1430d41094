from setuptools import setup, find_packages

setup(
    name="bucketeer",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["pyyaml", "requests"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["bucketeer = bucketeer.cli:main"]},
)
