"""
Exception hierarchy for the map builders.

Argument conflicts and validation failures are raised synchronously, before
the operation log is touched. An unsupported scale kind is a programming
error and is not meant to be caught.
"""


class LeafletWidgetError(Exception):
    """Base class for errors raised by leaflet_widget."""
    pass


class ArgumentConflictError(LeafletWidgetError, ValueError):
    """Two mutually exclusive arguments were supplied together."""
    pass


class UnknownProviderError(LeafletWidgetError, ValueError):
    """A tile provider name is not present in the provider registry."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(
            f"Unknown tile provider '{provider}'; either use a known provider "
            "or pass check=False to add_provider_tiles()"
        )


class UnsupportedScaleError(LeafletWidgetError, TypeError):
    """A color scale carries a kind outside numeric/bin/quantile/factor."""
    pass
