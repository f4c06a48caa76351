"""BookCrew web front end."""
