"""Building blocks of the es extensible shell: terms, trees, lexing, matching, splitting, formatting, variables and signals."""

__version__ = "0.9.2"