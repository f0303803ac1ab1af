"""lintstep — review linter offenses one at a time and fix them with a precise preview."""

__version__ = "0.1.0"
