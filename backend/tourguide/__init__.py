"""Virtual tour guide backend."""
