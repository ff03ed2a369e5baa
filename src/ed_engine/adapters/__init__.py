"""Host adapters that feed input into an interpreter session."""
