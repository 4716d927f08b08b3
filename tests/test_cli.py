import json
from pathlib import Path

from click.testing import CliRunner

from qrsign.cli import cli

HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"


def _sign(runner: CliRunner, tmp_path: Path, *extra: str) -> tuple[Path, Path, Path]:
    document = tmp_path / "hello.txt"
    document.write_bytes(b"hello")
    public_key = tmp_path / "public.pem"
    payload = tmp_path / "payload.txt"
    result = runner.invoke(
        cli,
        [
            "sign",
            str(document),
            "--public-key-out",
            str(public_key),
            "--payload-out",
            str(payload),
            *extra,
        ],
    )
    assert result.exit_code == 0, result.output
    return document, public_key, payload


def test_cli_help():
    """Test CLI help command."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Usage:" in result.output


def test_cli_hash(tmp_path):
    """Test hash command."""
    document = tmp_path / "hello.txt"
    document.write_bytes(b"hello")
    result = CliRunner().invoke(cli, ["hash", str(document)])
    assert result.exit_code == 0
    assert result.output.strip() == HELLO_SHA256


def test_cli_keygen(tmp_path):
    """Test keygen command writes only the public key."""
    out = tmp_path / "public.pem"
    result = CliRunner().invoke(cli, ["keygen", "--out", str(out)])

    assert result.exit_code == 0
    assert "Key ID:" in result.output
    assert "not exportable" in result.output
    pem = out.read_text()
    assert pem.startswith("-----BEGIN PUBLIC KEY-----")
    assert "PRIVATE" not in pem


def test_cli_sign_and_verify(tmp_path):
    """Test sign then verify round trip."""
    runner = CliRunner()
    document, public_key, payload = _sign(runner, tmp_path)

    wire = payload.read_text().strip()
    assert wire.startswith(HELLO_SHA256 + "|")

    result = runner.invoke(
        cli,
        ["verify", str(document), "--public-key", str(public_key), "--payload", wire],
    )
    assert result.exit_code == 0
    assert "VALID" in result.output


def test_cli_verify_tampered_document(tmp_path):
    """Test verify reports INVALID with exit code 1."""
    runner = CliRunner()
    document, public_key, payload = _sign(runner, tmp_path)
    document.write_bytes(b"hellp")

    result = runner.invoke(
        cli,
        [
            "verify",
            str(document),
            "--public-key",
            str(public_key),
            "--payload-file",
            str(payload),
        ],
    )
    assert result.exit_code == 1
    assert "INVALID" in result.output


def test_cli_sign_qr_envelope(tmp_path):
    """Test sign --qr emits a JSON envelope that verify accepts."""
    runner = CliRunner()
    entropy = tmp_path / "entropy.bin"
    entropy.write_bytes(bytes(range(256)))
    document, public_key, payload = _sign(
        runner, tmp_path, "--qr", "--salt-length", "16", "--entropy-file", str(entropy)
    )

    envelope = json.loads(payload.read_text())
    assert len(envelope["d"].split("|")[1]) == 32  # noqa: PLR2004

    result = runner.invoke(
        cli,
        [
            "verify",
            str(document),
            "--public-key",
            str(public_key),
            "--payload-file",
            str(payload),
        ],
    )
    assert result.exit_code == 0
    assert "VALID" in result.output


def test_cli_verify_needs_one_payload_source(tmp_path):
    """Test verify rejects missing payload options."""
    runner = CliRunner()
    document, public_key, _ = _sign(runner, tmp_path)
    result = runner.invoke(
        cli, ["verify", str(document), "--public-key", str(public_key)]
    )
    assert result.exit_code == 2  # noqa: PLR2004


def test_cli_verify_malformed_payload(tmp_path):
    """Test verify surfaces malformed payloads as errors."""
    runner = CliRunner()
    document, public_key, _ = _sign(runner, tmp_path)
    result = runner.invoke(
        cli,
        ["verify", str(document), "--public-key", str(public_key), "--payload", "abc|def"],
    )
    assert result.exit_code == 1
    assert "Error" in result.output


def test_cli_decode():
    """Test decode command."""
    result = CliRunner().invoke(cli, ["decode", "aa|bb|cc"])
    assert result.exit_code == 0
    assert "Hash: aa" in result.output
    assert "Salt: bb" in result.output
    assert "Signature: cc" in result.output

    result = CliRunner().invoke(cli, ["decode", "abc|def"])
    assert result.exit_code == 1


def test_cli_serve_help():
    """Test serve command help."""
    result = CliRunner().invoke(cli, ["serve", "--help"])
    assert result.exit_code == 0
    assert "Start the signing server" in result.output
