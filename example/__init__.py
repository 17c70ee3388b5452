"""Example consumer of the envirotron override engine."""
