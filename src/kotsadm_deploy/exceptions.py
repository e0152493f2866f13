"""Custom exceptions for kotsadm-deploy.

This module defines the exception hierarchy used throughout the application.
Every exception carries an ``ErrorKind`` tag so callers can branch on the
kind of failure without matching error messages.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories raised by this package."""

    UNSUPPORTED_STORE_KIND = "unsupported-store-kind"
    INCOMPLETE_EXTERNAL_CONFIG = "incomplete-external-config"
    MALFORMED_BOOLEAN_FIELD = "malformed-boolean-field"
    MANAGED_ELEMENT_MISSING = "managed-element-missing"
    RESOURCE_NOT_FOUND = "resource-not-found"
    CLUSTER_API = "cluster-api"
    CLUSTER_CONNECTION = "cluster-connection"
    SECRET_PARSING = "secret-parsing"


class KotsadmError(Exception):
    """Base exception for all kotsadm-deploy errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all kotsadm-deploy errors with a single
    except clause if desired.
    """

    kind: ErrorKind


class UnsupportedStoreKindError(KotsadmError):
    """Raised when an object store type is not one of the recognized kinds."""

    kind = ErrorKind.UNSUPPORTED_STORE_KIND

    def __init__(self, store_kind: str) -> None:
        self.store_kind = store_kind
        super().__init__(f"unsupported object store type: {store_kind}")


class IncompleteExternalConfigError(KotsadmError):
    """Raised when an external object store is missing required settings.

    An external store needs an access key id, a secret access key and a
    bucket name. The endpoint is optional.
    """

    kind = ErrorKind.INCOMPLETE_EXTERNAL_CONFIG

    def __init__(self, required_fields: tuple[str, ...], missing_fields: tuple[str, ...]) -> None:
        self.required_fields = required_fields
        self.missing_fields = missing_fields
        super().__init__(
            f'when object store is "external", each of {", ".join(required_fields)} must be set'
        )


class MalformedBooleanFieldError(KotsadmError):
    """Raised when a persisted boolean flag cannot be parsed.

    The options being loaded may already hold values applied before the
    malformed key was reached.
    """

    kind = ErrorKind.MALFORMED_BOOLEAN_FIELD

    def __init__(self, key: str, raw_value: str) -> None:
        self.key = key
        self.raw_value = raw_value
        super().__init__(f'parse {key} key of secretData: invalid boolean value "{raw_value}"')


class ManagedElementMissingError(KotsadmError):
    """Raised when an existing resource lacks the element this tool manages.

    This typically means:
    - The resource was created by another actor under the same name
    - The managed container or port was renamed or removed by hand
    """

    kind = ErrorKind.MANAGED_ELEMENT_MISSING

    def __init__(self, resource_kind: str, name: str, element: str) -> None:
        self.resource_kind = resource_kind
        self.name = name
        self.element = element
        super().__init__(f"{resource_kind} {name} has no managed element named {element!r}")


class ResourceNotFoundError(KotsadmError):
    """Raised by the cluster API when a requested resource does not exist."""

    kind = ErrorKind.RESOURCE_NOT_FOUND

    def __init__(self, resource_kind: str, namespace: str | None, name: str) -> None:
        self.resource_kind = resource_kind
        self.namespace = namespace
        self.name = name
        location = f"{namespace}/{name}" if namespace else name
        super().__init__(f"{resource_kind} {location} not found")


class ClusterApiError(KotsadmError):
    """Raised when a Kubernetes API call fails for a reason other than not-found.

    The original exception is kept in ``cause`` and chained as ``__cause__``.
    """

    kind = ErrorKind.CLUSTER_API

    def __init__(self, operation: str, resource_kind: str, name: str, cause: Exception) -> None:
        self.operation = operation
        self.resource_kind = resource_kind
        self.name = name
        self.cause = cause
        super().__init__(f"failed to {operation} {resource_kind} {name}: {cause}")


class ClusterConnectionError(KotsadmError):
    """Raised when connection to the Kubernetes cluster fails.

    This can occur when:
    - The kubeconfig is invalid or missing
    - The cluster is unreachable
    - Authentication fails

    Attributes:
        operation: The API operation in flight, if the failure happened on a call.
        resource_kind: Kind of the resource the call was for.
        name: Name of the resource the call was for.
    """

    kind = ErrorKind.CLUSTER_CONNECTION

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        resource_kind: str | None = None,
        name: str | None = None,
    ) -> None:
        self.operation = operation
        self.resource_kind = resource_kind
        self.name = name
        super().__init__(message)


class SecretParsingError(KotsadmError):
    """Raised when a secret file or payload cannot be parsed.

    This can occur when:
    - The file does not exist
    - The file is not valid YAML
    - The YAML does not represent a Kubernetes secret
    - A data value is not valid base64
    - A persisted value is not valid UTF-8
    """

    kind = ErrorKind.SECRET_PARSING
