"""Forecaster package.

Modules
-------
forecaster — forecast(), trend_direction(), confidence() — pure functions.
"""
