"""Tree conversion, radial layout and selection state."""
