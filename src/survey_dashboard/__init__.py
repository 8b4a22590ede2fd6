"""
Survey results dashboard backend.

Turns CSV survey exports into respondent records and the aggregate figures
the dashboard renders (question ranking, Likert distributions, executive
summary).
"""

__version__ = "0.1.0"
