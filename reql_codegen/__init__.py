"""Source generator for the RethinkDB C# driver."""

__version__ = "0.1.0"
