"""Host adapters for the editing core."""
