"""HTTP front end for the tallying engine."""
