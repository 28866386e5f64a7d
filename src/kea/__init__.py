"""kea - personal double-entry bookkeeping ledger."""

__version__ = "0.3.0"


# Import main lazily to avoid circular dependencies
def __getattr__(name):
    if name == "main":
        from kea.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
