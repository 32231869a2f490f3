"""
Credential verifier interface.

LoginGuard never inspects secrets itself. A verifier checks the identifier
and secret against whatever credential store the deployment uses and
returns a truthy payload (typically a user or session representation) on
success, or a falsy value when the credentials do not match. Any exception
it raises is treated as a system failure, not a failed login.
"""
import importlib
import inspect
from abc import ABC, abstractmethod
from typing import Any

from loginguard.core.exceptions import ConfigurationError


class ICredentialVerifier(ABC):
    """Interface for credential verification backends."""

    @abstractmethod
    async def verify_credentials(self, identifier: str, secret: str) -> Any:
        """
        Check a secret for an identifier.

        Returns:
            Truthy verification payload on success, falsy on mismatch
        """
        pass


def load_credential_verifier(path: str) -> ICredentialVerifier:
    """
    Import a verifier from a ``module:attribute`` path.

    The attribute may be a verifier instance, a verifier class, or a
    zero-argument factory returning a verifier.

    Raises:
        ConfigurationError: If the path cannot be imported or does not
            resolve to a verifier
    """
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise ConfigurationError(
            f"Credential verifier path must look like 'module:attribute', got {path!r}",
            setting="CREDENTIAL_VERIFIER",
        )

    try:
        module = importlib.import_module(module_name)
        target = getattr(module, attribute)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(
            f"Cannot load credential verifier {path!r}: {e}",
            setting="CREDENTIAL_VERIFIER",
        ) from e

    if inspect.isclass(target) or (callable(target) and not hasattr(target, "verify_credentials")):
        target = target()

    verify = getattr(target, "verify_credentials", None)
    if verify is None or not inspect.iscoroutinefunction(verify):
        raise ConfigurationError(
            f"{path!r} does not provide an async verify_credentials(identifier, secret)",
            setting="CREDENTIAL_VERIFIER",
        )
    return target
