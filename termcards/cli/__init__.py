"""Console front-end for the card games."""
