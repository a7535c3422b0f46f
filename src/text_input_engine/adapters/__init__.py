"""Host adapters translating UI toolkit events into engine commands."""
