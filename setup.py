from setuptools import setup, find_packages

setup(
    name="identspell",
    version="0.3.2",
    description="identspell — spell-check comments, strings and camelCase identifiers via aspell/hunspell",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyspellchecker>=0.7",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "identspell=identspell.main:main",
        ],
    },
)
