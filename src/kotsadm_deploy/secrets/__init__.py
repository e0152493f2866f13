"""Secrets management subpackage.

This package contains the object store secret codec, secret payload
parsing and the postgres credential secret.
"""

from kotsadm_deploy.secrets.codec import SecretCodec, hydrate_from_file
from kotsadm_deploy.secrets.parsing import decode_secret_data, parse_secret_file, secret_payload
from kotsadm_deploy.secrets.postgres import ensure_postgres_secret

__all__ = [
    # codec
    "SecretCodec",
    "hydrate_from_file",
    # parsing
    "decode_secret_data",
    "parse_secret_file",
    "secret_payload",
    # postgres
    "ensure_postgres_secret",
]
