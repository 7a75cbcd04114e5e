"""File validation and spreadsheet decoding."""
