"""Signal rules package.

Modules
-------
rules — decide() + build_recommendation(): decision table over indicator outputs.
"""
