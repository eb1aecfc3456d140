"""Indicator calculator package.

Modules
-------
calculator — rsi(), moving_average(), rsi_zone() — pure functions, no I/O.
"""
