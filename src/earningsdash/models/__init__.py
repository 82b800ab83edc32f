"""Models package — records, aggregates, goals and export outcomes."""
