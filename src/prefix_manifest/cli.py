"""Command-line interface for prefix-manifest.

This module provides a CLI for building a partitioned manifest of the
objects under an S3 prefix.

Commands:
    - list: List a prefix and print the manifest partitions
"""

import json
from typing import Annotated, Optional

import typer

from . import __version__
from .objectstorage.clients import S3ClientConfig, S3ClientManager
from .schemas import ListingConfig
from .unified import build_manifest, next_config_diff

app = typer.Typer(
    name="prefix-manifest",
    help="Incremental object listing and partitioned manifests.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"prefix-manifest {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    Prefix-Manifest: list an object store prefix into per-task file lists.
    """
    pass


def _format_size(total_bytes: int) -> str:
    if total_bytes >= 1024**3:
        return f"{total_bytes / (1024**3):.2f} GB"
    elif total_bytes >= 1024**2:
        return f"{total_bytes / (1024**2):.2f} MB"
    elif total_bytes >= 1024:
        return f"{total_bytes / 1024:.2f} KB"
    return f"{total_bytes} bytes"


@app.command("list")
def list_cmd(
    path: Annotated[str, typer.Argument(help="S3 path to list (s3://bucket/prefix)")],
    last_path: Annotated[
        Optional[str],
        typer.Option("--last-path", help="Resume listing after this object path"),
    ] = None,
    stop_when_file_not_found: Annotated[
        bool,
        typer.Option(
            "--stop-when-file-not-found", help="Fail if the prefix holds no file"
        ),
    ] = False,
    min_task_size: Annotated[
        int, typer.Option("--min-task-size", help="Minimum bytes per task")
    ] = 0,
    max_task_count: Annotated[
        Optional[int], typer.Option("--max-task-count", help="Maximum number of tasks")
    ] = None,
    path_match_pattern: Annotated[
        Optional[str],
        typer.Option("--path-match-pattern", help="Regex listed paths must match"),
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the manifest as JSON")
    ] = False,
    # S3 options
    access_key_id: Annotated[
        Optional[str], typer.Option("--access-key-id", help="AWS access key ID")
    ] = None,
    secret_access_key: Annotated[
        Optional[str],
        typer.Option("--secret-access-key", help="AWS secret access key"),
    ] = None,
    session_token: Annotated[
        Optional[str], typer.Option("--session-token", help="AWS session token")
    ] = None,
    region_name: Annotated[
        str, typer.Option("--region", help="AWS region name")
    ] = "us-east-1",
    endpoint_url: Annotated[
        Optional[str], typer.Option("--endpoint-url", help="Custom S3 endpoint URL")
    ] = None,
    aws_profile: Annotated[
        Optional[str], typer.Option("--aws-profile", help="AWS CLI profile name")
    ] = None,
) -> None:
    """
    List objects under a prefix and print the partitioned manifest.

    Examples:
        prefix-manifest list s3://bucket/logs/ --aws-profile myprofile
        prefix-manifest list s3://bucket/logs/ --last-path logs/2024-01-31.gz \
            --min-task-size 1048576 --json
    """
    try:
        bucket, prefix = S3ClientManager.parse_s3_path(path)
        config = ListingConfig(
            bucket=bucket,
            path_prefix=prefix or None,
            last_path=last_path,
            stop_when_file_not_found=stop_when_file_not_found,
            min_task_size=min_task_size,
            max_task_count=max_task_count,
            path_match_pattern=path_match_pattern,
        )
        client_manager = S3ClientManager(
            S3ClientConfig(
                access_key_id=access_key_id,
                secret_access_key=secret_access_key,
                session_token=session_token,
                region_name=region_name,
                endpoint_url=endpoint_url,
                aws_profile=aws_profile,
            )
        )

        manifest = build_manifest(client_manager.store_client(), config)
        diff = next_config_diff(config, manifest)

        if as_json:
            payload = {"manifest": manifest.to_dict(), "config_diff": diff}
            typer.echo(json.dumps(payload))
            return

        if not manifest.entries:
            typer.echo("No files found.")
        else:
            size = _format_size(manifest.total_bytes)
            typer.echo(
                f"Found {len(manifest):,} files ({size}) "
                f"in {manifest.task_count} tasks:"
            )
            for partition in manifest.partitions:
                typer.echo(f"Task {partition.task_index}:")
                for entry_path in manifest.partition_paths(partition.task_index):
                    typer.echo(f"  {entry_path}")
        if "last_path" in diff:
            typer.echo(f"Next last_path: {diff['last_path']}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
