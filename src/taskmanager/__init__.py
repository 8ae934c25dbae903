"""Natural-language task parsing and AI task enhancement."""
