"""Project scheduling toolkit for construction task networks."""
