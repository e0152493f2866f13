"""Secret payload parsing utilities.

This module decodes secret data as returned by the Kubernetes API and
parses secrets exported to YAML files.
"""

import base64
import binascii
from collections.abc import Mapping
from typing import Any

import yaml

from kotsadm_deploy.exceptions import SecretParsingError


def decode_secret_data(data: Mapping[str, str] | None) -> dict[str, bytes]:
    """Decode the base64 ``data`` section of a secret.

    Args:
        data: The ``data`` mapping of a secret manifest, possibly None.

    Returns:
        The decoded values keyed by field name.

    Raises:
        SecretParsingError: If a value is not valid base64.

    """
    decoded: dict[str, bytes] = {}
    for key, value in (data or {}).items():
        try:
            decoded[key] = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as err:
            raise SecretParsingError(f"Secret key '{key}' is not valid base64") from err
    return decoded


def secret_payload(secret: Mapping[str, Any]) -> dict[str, bytes]:
    """Return the decoded payload of a secret manifest.

    Values under ``stringData`` take precedence over ``data``, matching how
    the API server merges them on write.
    """
    payload = decode_secret_data(secret.get("data"))
    for key, value in (secret.get("stringData") or {}).items():
        payload[key] = str(value).encode()
    return payload


def parse_secret_file(secret_path: str) -> dict[str, Any]:
    """Parse a YAML file holding a single Kubernetes secret.

    Args:
        secret_path: Path to the secret file.

    Returns:
        The parsed secret manifest.

    Raises:
        SecretParsingError: If the file does not exist, is empty, contains
            multiple documents, contains malformed YAML, or is not a Secret.

    """
    try:
        with open(secret_path) as stream:
            docs = [doc for doc in yaml.safe_load_all(stream) if doc is not None]
    except FileNotFoundError as err:
        raise SecretParsingError(f"Secret file '{secret_path}' does not exist") from err
    except yaml.YAMLError as err:
        raise SecretParsingError(f"Secret file '{secret_path}' contains malformed YAML: {err}") from err

    if len(docs) != 1:
        raise SecretParsingError(
            f"File '{secret_path}' contains {len(docs)} YAML documents. Exactly one secret is expected."
        )
    secret = docs[0]
    if not isinstance(secret, dict) or secret.get("kind") != "Secret":
        raise SecretParsingError(f"File '{secret_path}' does not contain a Kubernetes Secret")
    return secret
