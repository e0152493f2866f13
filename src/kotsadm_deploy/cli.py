#!/usr/bin/env python
"""Command-line interface for kotsadm-deploy.

This module provides the CLI entry point, turning command-line options
into ``DeployOptions`` and either applying them to a cluster or rendering
them to YAML files.
"""

from pathlib import Path

import click
from icecream import ic

from kotsadm_deploy import __version__, console
from kotsadm_deploy.cluster import Cluster
from kotsadm_deploy.deploy import Kotsadm, load_storage_options, render_manifests
from kotsadm_deploy.exceptions import KotsadmError
from kotsadm_deploy.models import DeployOptions, StorageOptions, StoreKind
from kotsadm_deploy.secrets import hydrate_from_file
from kotsadm_deploy.storage import validate


def render(deploy_options: DeployOptions, output_dir: str) -> None:
    """Write the rendered manifests to a directory.

    Args:
        deploy_options: The deploy-time options.
        output_dir: Directory to write into, created if missing.

    """
    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)
    rendered = render_manifests(deploy_options)
    for filename, document in rendered.items():
        (target / filename).write_text(document)
        console.step(f"Wrote {console.highlight(console.escape(str(target / filename)))}")
    console.success(f"Rendered {len(rendered)} manifests to {console.highlight(console.escape(str(target)))}")


def apply(deploy_options: DeployOptions, cluster: Cluster) -> None:
    """Deploy to the cluster and print a summary."""
    with console.spinner("Reconciling kotsadm resources..."):
        results = Kotsadm(cluster, deploy_options).deploy()

    console.newline()
    console.summary_panel(
        "kotsadm deployed",
        {resource: result.value for resource, result in results.items()},
    )


@click.command(help="Deploy the kotsadm admin console into a Kubernetes namespace")
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option("--select", required=False, is_flag=True, default=False, help="prompt for context select")
@click.option("--namespace", "-n", default="default", show_default=True, help="namespace to deploy to")
@click.option("--openshift", is_flag=True, help="target is OpenShift; do not set a fixed user id")
@click.option("--host-network", is_flag=True, hidden=True, help="run kotsadm pods on the host network")
@click.option(
    "--object-store",
    type=click.Choice([kind.value for kind in StoreKind]),
    default=StoreKind.INTERNAL.value,
    show_default=True,
    help="object store backend",
)
@click.option("--object-store-access-key-id", default="", help="object store access key id")
@click.option("--object-store-secret-access-key", default="", help="object store secret access key")
@click.option("--object-store-bucket-name", default="", help="object store bucket name")
@click.option("--object-store-endpoint", default="", help="object store endpoint")
@click.option("--object-store-bucket-in-path", is_flag=True, help="address the bucket path-style")
@click.option("--registry", envvar="KOTSADM_REGISTRY", default="kotsadm", show_default=True, help="kotsadm image registry")
@click.option("--tag", envvar="KOTSADM_TAG", default="latest", show_default=True, help="kotsadm image tag")
@click.option("--from-secret-file", required=False, help="exported object store secret to load settings from")
@click.option("--render", "render_dir", required=False, help="write manifests to this directory instead of applying")
def cli(
    version: bool,
    debug: bool,
    select: bool,
    namespace: str,
    openshift: bool,
    host_network: bool,
    object_store: str,
    object_store_access_key_id: str,
    object_store_secret_access_key: str,
    object_store_bucket_name: str,
    object_store_endpoint: str,
    object_store_bucket_in_path: bool,
    registry: str,
    tag: str,
    from_secret_file: str | None,
    render_dir: str | None,
) -> None:
    """Process CLI arguments and deploy or render kotsadm.

    Raises:
        click.ClickException: If configuration or a cluster call fails.

    """
    if not debug:
        ic.disable()

    if version:
        click.echo(__version__)
        return

    requested = StorageOptions(
        store_kind=object_store,
        access_key_id=object_store_access_key_id,
        secret_access_key=object_store_secret_access_key,
        bucket_name=object_store_bucket_name,
        endpoint=object_store_endpoint,
        bucket_in_path=object_store_bucket_in_path,
    )

    try:
        storage = validate(requested)
        cluster = None if render_dir else Cluster(select_context=select)
        if cluster is not None:
            storage = load_storage_options(cluster, namespace, storage)
        if from_secret_file:
            hydrate_from_file(storage, from_secret_file)
        ic(storage.store_kind, storage.bucket_name, storage.endpoint)

        deploy_options = DeployOptions(
            namespace=namespace,
            storage=storage,
            is_openshift=openshift,
            use_host_network=host_network,
            registry=registry,
            tag=tag,
        )

        if cluster is None:
            render(deploy_options, render_dir)
        else:
            apply(deploy_options, cluster)
    except KotsadmError as e:
        console.error(str(e))
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
