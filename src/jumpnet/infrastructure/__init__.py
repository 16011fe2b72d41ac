"""Infrastructure layer: codec, save scheduling, storage, networkx view."""
