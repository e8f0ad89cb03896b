"""Built-in sub-commands of the ``modkit`` CLI."""
