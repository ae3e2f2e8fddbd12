"""docspace: hierarchical folder/file namespace over flat document stores."""

__version__ = "0.1.0"
