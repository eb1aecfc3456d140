"""Price series ingestion from local files.

Modules
-------
series_loader — parse_price_csv(), parse_price_json(), load_price_series().
"""
