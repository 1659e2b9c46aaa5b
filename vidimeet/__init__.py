"""Random-pairing video chat signalling relay."""

__version__ = "1.0.0"
