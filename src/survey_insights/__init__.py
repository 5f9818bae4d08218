"""School survey statistics, question-type inference and narrated reports."""

__version__ = "0.1.0"
