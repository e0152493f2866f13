"""Object store configuration model.

This module validates and defaults ``StorageOptions`` and converts them to
and from the flat key/value payload persisted in the object store secret.
"""

import dataclasses
import uuid
from collections.abc import Callable, Mapping
from types import MappingProxyType

from icecream import ic

from kotsadm_deploy.exceptions import (
    IncompleteExternalConfigError,
    MalformedBooleanFieldError,
    SecretParsingError,
    UnsupportedStoreKindError,
)
from kotsadm_deploy.models import StorageOptions, StoreKind

# Persisted secret keys, in the order they are loaded
KEY_TYPE = "type"
KEY_ACCESS_KEY = "accesskey"
KEY_SECRET_KEY = "secretkey"
KEY_BUCKET_NAME = "bucketname"
KEY_ENDPOINT = "endpoint"
KEY_BUCKET_IN_PATH = "bucket-in-path"

SECRET_KEYS: tuple[str, ...] = (
    KEY_TYPE,
    KEY_ACCESS_KEY,
    KEY_SECRET_KEY,
    KEY_BUCKET_NAME,
    KEY_ENDPOINT,
    KEY_BUCKET_IN_PATH,
)

# Defaults applied to unset fields of an internal store
INTERNAL_DEFAULTS: Mapping[str, str] = MappingProxyType(
    {
        "bucket_name": "kotsadm",
        "endpoint": "http://kotsadm-minio:9000",
    }
)

# CLI flag names reported when an external store is incomplete
EXTERNAL_REQUIRED_FLAGS: tuple[str, ...] = (
    "object-store-access-key-id",
    "object-store-secret-access-key",
    "object-store-bucket-name",
)

_TRUE_VALUES = frozenset({"1", "t", "T", "true", "TRUE", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "false", "FALSE", "False"})


def new_token() -> str:
    """Return a random, unguessable token for generated credentials."""
    return str(uuid.uuid4())


def parse_bool(key: str, raw: str) -> bool:
    """Parse a persisted boolean flag.

    Accepts the usual spellings of true and false ("1", "t", "true",
    "TRUE", "True" and their false counterparts).

    Args:
        key: The secret key the value was read from (for error messages).
        raw: The raw string value.

    Returns:
        The parsed boolean.

    Raises:
        MalformedBooleanFieldError: If the value is not a recognized boolean.

    """
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise MalformedBooleanFieldError(key, raw)


def _store_kind(value: str) -> StoreKind:
    try:
        return StoreKind(value)
    except ValueError:
        raise UnsupportedStoreKindError(value) from None


def validate(
    options: StorageOptions,
    *,
    defaults: Mapping[str, str] = INTERNAL_DEFAULTS,
    token_factory: Callable[[], str] = new_token,
) -> StorageOptions:
    """Validate object store options and fill in defaults.

    The input is not modified; a fully populated copy is returned.

    For an internal store, an unset bucket name and endpoint are taken from
    ``defaults`` and missing credentials are generated with ``token_factory``.
    For an external store, access key, secret key and bucket name must all
    be set while the endpoint may stay empty.

    Args:
        options: The options to validate.
        defaults: Default values for internal stores, keyed by field name.
        token_factory: Generator for missing internal credentials.

    Returns:
        The normalized options.

    Raises:
        UnsupportedStoreKindError: If the store kind is not recognized.
        IncompleteExternalConfigError: If an external store lacks a required field.

    """
    kind = _store_kind(options.store_kind)

    match kind:
        case StoreKind.INTERNAL:
            normalized = dataclasses.replace(
                options,
                store_kind=kind,
                bucket_name=options.bucket_name or defaults["bucket_name"],
                endpoint=options.endpoint or defaults["endpoint"],
                access_key_id=options.access_key_id or token_factory(),
                secret_access_key=options.secret_access_key or token_factory(),
            )
        case StoreKind.EXTERNAL:
            provided = (options.access_key_id, options.secret_access_key, options.bucket_name)
            missing = tuple(
                flag for flag, value in zip(EXTERNAL_REQUIRED_FLAGS, provided, strict=True) if not value
            )
            if missing:
                raise IncompleteExternalConfigError(EXTERNAL_REQUIRED_FLAGS, missing)
            normalized = dataclasses.replace(options, store_kind=kind)

    ic(normalized.store_kind, normalized.bucket_name, normalized.endpoint)
    return normalized


def to_secret_data(options: StorageOptions) -> dict[str, bytes]:
    """Convert options to the persisted secret payload.

    Args:
        options: The options to convert.

    Returns:
        A mapping with one entry per persisted key.

    """
    return {
        KEY_TYPE: StoreKind(options.store_kind).value.encode(),
        KEY_ACCESS_KEY: options.access_key_id.encode(),
        KEY_SECRET_KEY: options.secret_access_key.encode(),
        KEY_BUCKET_NAME: options.bucket_name.encode(),
        KEY_ENDPOINT: options.endpoint.encode(),
        KEY_BUCKET_IN_PATH: b"true" if options.bucket_in_path else b"false",
    }


def _decode(data: Mapping[str, bytes], key: str) -> str:
    try:
        return data[key].decode()
    except UnicodeDecodeError as err:
        raise SecretParsingError(f"Secret key '{key}' is not valid UTF-8") from err


def load_secret_data(options: StorageOptions, data: Mapping[str, bytes]) -> None:
    """Overlay persisted values onto existing options in place.

    Keys present in ``data`` overwrite the matching field. Absent keys leave
    the current value untouched, so secrets written by older versions keep
    the in-memory defaults for fields they never stored.

    Loading is not atomic: if a value fails to parse, fields processed
    before it have already been applied.

    Args:
        options: The options to update.
        data: The persisted secret payload.

    Raises:
        UnsupportedStoreKindError: If the persisted type is not recognized.
        MalformedBooleanFieldError: If the bucket-in-path flag is not a boolean.
        SecretParsingError: If a value is not valid UTF-8.

    """
    if KEY_TYPE in data:
        options.store_kind = _store_kind(_decode(data, KEY_TYPE))
    if KEY_ACCESS_KEY in data:
        options.access_key_id = _decode(data, KEY_ACCESS_KEY)
    if KEY_SECRET_KEY in data:
        options.secret_access_key = _decode(data, KEY_SECRET_KEY)
    if KEY_BUCKET_NAME in data:
        options.bucket_name = _decode(data, KEY_BUCKET_NAME)
    if KEY_ENDPOINT in data:
        options.endpoint = _decode(data, KEY_ENDPOINT)
    if KEY_BUCKET_IN_PATH in data:
        options.bucket_in_path = parse_bool(KEY_BUCKET_IN_PATH, _decode(data, KEY_BUCKET_IN_PATH))
