"""
Command-line interface for QR document signing.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from qrsign.common.config import Config
from qrsign.common.exceptions import QRSignError
from qrsign.core.context import CryptoContext
from qrsign.core.signing import (
    WIRE_DELIMITER,
    encode_qr_envelope,
    encode_wire_payload,
    hash_document,
)
from qrsign.core.verification import decode_qr_envelope
from qrsign.server import start_server

FILE_ARG = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
def cli() -> None:
    """QR document signing CLI"""


@cli.command("hash")
@click.argument("file", type=FILE_ARG)
def hash_cmd(file: Path) -> None:
    """Print the SHA-256 hex digest of FILE"""
    click.echo(hash_document(file.read_bytes()))


@cli.command()
@click.option(
    "--out",
    "out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the public key PEM to this file",
)
def keygen(out: Path | None) -> None:
    """Generate an RSA-2048 key pair and print its public key"""
    context = CryptoContext()
    try:
        pair = context.generate_key_pair()
    except QRSignError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Key ID: {pair.id}")
    if out:
        out.write_text(pair.public_key_pem + "\n")
        click.echo(f"Public key written to {out}")
    else:
        click.echo(pair.public_key_pem)
    click.echo("Private key is held in memory only and is not exportable")


@cli.command()
@click.argument("file", type=FILE_ARG)
@click.option(
    "--entropy-file",
    type=FILE_ARG,
    default=None,
    help="Bytes to feed into the entropy pool before signing",
)
@click.option("--salt-length", type=click.IntRange(min=1), default=None)
@click.option(
    "--public-key-out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the one-shot public key PEM to this file",
)
@click.option(
    "--payload-out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the payload to this file",
)
@click.option("--qr", is_flag=True, help="Emit the QR envelope instead of the bare payload")
def sign(
    file: Path,
    entropy_file: Path | None,
    salt_length: int | None,
    public_key_out: Path | None,
    payload_out: Path | None,
    qr: bool,  # noqa: FBT001
) -> None:
    """Sign FILE with a freshly generated key"""
    config = Config()
    if salt_length:
        config.SALT_LENGTH = salt_length
    context = CryptoContext(config=config)
    if entropy_file:
        context.add_entropy(entropy_file.read_bytes())

    try:
        pair = context.generate_key_pair()
        doc = context.sign(pair.id, file.read_bytes(), file.name)
    except QRSignError as e:
        raise click.ClickException(str(e)) from e

    payload = encode_qr_envelope(doc) if qr else encode_wire_payload(doc)
    click.echo(f"Key ID: {pair.id}")
    click.echo(f"Hash: {doc.file_hash}")
    click.echo(f"Payload: {payload}")

    if public_key_out:
        public_key_out.write_text(pair.public_key_pem + "\n")
    else:
        click.echo(pair.public_key_pem)
    if payload_out:
        payload_out.write_text(payload + "\n")


@cli.command()
@click.argument("file", type=FILE_ARG)
@click.option("--public-key", "public_key_file", type=FILE_ARG, required=True)
@click.option("--payload", default=None, help="Wire payload or QR envelope")
@click.option("--payload-file", type=FILE_ARG, default=None)
def verify(
    file: Path,
    public_key_file: Path,
    payload: str | None,
    payload_file: Path | None,
) -> None:
    """Verify FILE against a payload and public key"""
    if (payload is None) == (payload_file is None):
        msg = "Give exactly one of --payload or --payload-file"
        raise click.UsageError(msg)
    text = payload if payload is not None else payload_file.read_text()

    context = CryptoContext()
    try:
        public_key = context.import_public_key(public_key_file.read_text())
        wire = WIRE_DELIMITER.join(decode_qr_envelope(text))
        valid = context.verify(public_key, file.read_bytes(), wire)
    except QRSignError as e:
        raise click.ClickException(str(e)) from e

    if valid:
        click.echo("VALID")
    else:
        click.echo("INVALID")
        sys.exit(1)


@cli.command()
@click.argument("payload")
def decode(payload: str) -> None:
    """Print the fields of a wire payload or QR envelope"""
    try:
        fields = decode_qr_envelope(payload)
    except QRSignError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Hash: {fields.file_hash}")
    click.echo(f"Salt: {fields.salt}")
    click.echo(f"Signature: {fields.signature}")


@cli.command()
@click.option("--host", default=None, help="Host to bind (default: QRSIGN_SERVER_HOST or 127.0.0.1)")
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind (default: QRSIGN_SERVER_PORT or 8000)",
)
@click.option(
    "--require-seeded-entropy",
    is_flag=True,
    help="Refuse key generation until the entropy pool is seeded",
)
def serve(
    host: str | None,
    port: int | None,
    require_seeded_entropy: bool,  # noqa: FBT001
) -> None:
    """Start the signing server"""
    overrides: dict[str, Any] = {"server_host": host, "server_port": port}
    if require_seeded_entropy:
        overrides["require_seeded_entropy"] = True
    start_server(Config(), **overrides)


if __name__ == "__main__":
    cli()
