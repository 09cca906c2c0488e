"""Domain types: point records, collections and the loader contract."""
