"""identspell — spell-checking front end for source code and text."""

__version__ = "0.3.2"
