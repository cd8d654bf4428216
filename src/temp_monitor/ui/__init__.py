"""User interface layer: the tempmon command line."""
