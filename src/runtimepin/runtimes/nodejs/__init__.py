from .nodejs import PINNED_VERSION, create_installer, load_resolver

__all__ = ["PINNED_VERSION", "create_installer", "load_resolver"]
