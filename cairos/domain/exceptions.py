from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class UnauthenticatedError(DomainError):
    """Missing, unknown or disabled credential."""


class ProviderTokenRejectedError(UnauthenticatedError):
    """The identity provider refused the access token."""


class InvalidStateError(DomainError):
    """OAuth state is unknown, expired or was already used."""


class AuthorizationCodeRejectedError(DomainError):
    """The identity provider refused the authorization code."""


class AuthorizationNotGrantedError(DomainError):
    """The provider redirected back with an error or without a code."""


class NoPrimaryEmailError(DomainError):
    """The identity provider returned no usable email."""


class UpstreamUnavailableError(DomainError):
    """Network failure talking to the identity provider or the backend."""


class UpstreamTimeoutError(UpstreamUnavailableError):
    """The identity provider or the backend did not answer in time."""


class UpstreamProtocolError(DomainError):
    """Unexpected response shape from the identity provider or the backend."""


class StorageError(DomainError):
    """Persistence failure."""


class DeviceFlowError(DomainError):
    """Device authorization ended without a token."""


class DeviceFlowExpiredError(DeviceFlowError):
    """The device code expired before the user authorized it."""


class DeviceFlowDeniedError(DeviceFlowError):
    """The provider reported a terminal error while polling."""


class DeviceFlowAbortedError(DeviceFlowError):
    """The device flow was cancelled locally."""
