"""Web framework middleware."""
