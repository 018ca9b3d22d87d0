"""snipcut - cut-list engine for short-form video editing."""

__version__ = "0.1.0"
