"""hirescreen - authentication and session core for the candidate-screening backend."""

__all__ = ["AuthConfig", "AuthService", "InMemoryAuthStore"]
__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy imports so importing the package does not pull in bcrypt/jwt."""
    if name == "AuthConfig":
        from hirescreen.config import AuthConfig

        return AuthConfig
    if name == "AuthService":
        from hirescreen.auth.service import AuthService

        return AuthService
    if name == "InMemoryAuthStore":
        from hirescreen.store.memory import InMemoryAuthStore

        return InMemoryAuthStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
