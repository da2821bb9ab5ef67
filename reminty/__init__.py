"""reminty: JSX component parser and UI idiom detector."""

__version__ = "0.1.0"
