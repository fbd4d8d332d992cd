"""nminus: pick a dependency version a fixed distance behind the latest release."""

from .versioning import Constraints, ResolutionRequest, Resolver, get_new_value

__version__ = "0.1.0"

__all__ = ["Constraints", "ResolutionRequest", "Resolver", "get_new_value", "__version__"]
