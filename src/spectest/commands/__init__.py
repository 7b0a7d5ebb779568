"""Built-in CLI commands: ``make``, ``list``, ``init`` and ``config``."""
