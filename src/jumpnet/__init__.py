"""jumpnet — learn which files belong together from how you move between them."""

__version__ = "0.1.0"
