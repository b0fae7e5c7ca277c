"""
algorand - command-line front end for the signing core.

Commands:
  keygen                         New key pair as JSON {"address", "secret_key"}
  address [--program F] [--secret-key K]
                                 Address of a program or of a key
  sign TX.json [--secret-key K]  Sign with a key, print base64 envelope
  sign-program TX.json --program F [--arg B64]...
                                 Authorize by program, print base64 envelope
  verify ENVELOPE_B64            Print the authenticated transaction as JSON
  txid TX.json                   Print the transaction id

Transactions are read in the JSON view (see algorand.encoding.json). The secret
key may come from --secret-key or from the environment variable named by
ALGORAND_SECRET_KEY_ENV (default ALGORAND_SECRET_KEY).

Exit codes: 0 ok, 1 verification failed, 2 malformed input or usage error.

Global options:
  --log-level TEXT   DEBUG/INFO/WARNING/ERROR (env ALGORAND_LOG_LEVEL)
  --json-logs        Emit JSON log lines on stderr
"""

from __future__ import annotations

import base64
import binascii
import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, NoReturn, Optional

import typer

from .. import logging as alog
from ..address import from_contract_code, from_public_key
from ..config import Config, set_config
from ..crypto.signature import PK_SIZE, SK_SIZE, SecretKey, keypair, sk_from_text, sk_to_text, to_public
from ..encoding.json import dumps, loads
from ..encoding.msgpack import encode
from ..errors import AlgorandError, ConfigError, KeyMismatchError, MalformedInput, VerificationError
from ..types.signed import authenticate, decode_signed_transaction, sign_from_contract_account, sign_simple
from ..types.transaction import Transaction, transaction_id

EXIT_OK = 0
EXIT_UNVERIFIED = 1
EXIT_MALFORMED = 2

log = alog.get_logger("algorand.cli")

app = typer.Typer(
    name="algorand",
    help="Sign and verify ledger transactions",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self):
        self.config: Config = Config()


_ctx = GlobalContext()


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Minimum log level",
        envvar="ALGORAND_LOG_LEVEL",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit JSON log lines",
    ),
) -> None:
    """
    Sign and verify transactions offline. Output goes to stdout, logs to stderr.
    """
    try:
        cfg = Config.from_env()
        overrides = {}
        if log_level:
            overrides["log_level"] = log_level
        if json_logs:
            overrides["log_format"] = "json"
        cfg = Config.with_overrides(cfg, **overrides)
    except ConfigError as e:
        _fail(e, EXIT_MALFORMED)
    _ctx.config = cfg
    set_config(cfg)
    alog.clear_context()
    alog.configure(json=cfg.log_format == "json", level=cfg.log_level)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _fail(err: AlgorandError, code: int) -> NoReturn:
    typer.echo(f"Error: {err.message}", err=True)
    raise typer.Exit(code)


@contextmanager
def _command(name: str) -> Iterator[None]:
    """Run one command under a fresh trace id with `command` bound."""
    with alog.trace_scope():
        alog.bind(command=name)
        yield


def _parse_secret_key(text: str) -> SecretKey:
    sk = sk_from_text(text)
    if sk is not None:
        return sk
    try:
        raw = base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError):
        raw = b""
    if len(raw) == SK_SIZE + PK_SIZE:
        raise KeyMismatchError()
    raise MalformedInput("secret key must be base64 of 64 bytes")


def _load_secret_key(secret_key: Optional[str]) -> SecretKey:
    text = secret_key or os.environ.get(_ctx.config.secret_key_env)
    if not text:
        raise MalformedInput(f"no secret key given (use --secret-key or {_ctx.config.secret_key_env})")
    return _parse_secret_key(text)


def _load_transaction(path: Path) -> Transaction:
    return loads(path.read_bytes(), Transaction)


def _parse_args(args: Optional[List[str]]) -> List[bytes]:
    out = []
    for i, a in enumerate(args or []):
        try:
            out.append(base64.b64decode(a, validate=True))
        except (binascii.Error, ValueError) as e:
            raise MalformedInput("program argument is not base64", index=i) from e
    return out


_TxFile = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Transaction JSON file")
_SecretKeyOpt = typer.Option(None, "--secret-key", help="base64(seed || public key)")


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


@app.command()
def keygen() -> None:
    """Generate a new key pair."""
    with _command("keygen"):
        sk = keypair()
        addr = from_public_key(to_public(sk))
        alog.bind(address=addr.to_text())
        log.info("generated key")
        typer.echo(json.dumps({"address": addr.to_text(), "secret_key": sk_to_text(sk)}, indent=2))


@app.command()
def address(
    program: Optional[Path] = typer.Option(
        None, "--program", exists=True, dir_okay=False, readable=True, help="Program bytes file"
    ),
    secret_key: Optional[str] = _SecretKeyOpt,
) -> None:
    """Print the address of a program, or of the given secret key."""
    with _command("address"):
        try:
            if program is not None:
                addr = from_contract_code(program.read_bytes())
            else:
                addr = from_public_key(_load_secret_key(secret_key).public)
        except MalformedInput as e:
            _fail(e, EXIT_MALFORMED)
        typer.echo(addr.to_text())


@app.command()
def sign(tx_file: Path = _TxFile, secret_key: Optional[str] = _SecretKeyOpt) -> None:
    """Sign a transaction with a secret key; print the base64 envelope."""
    with _command("sign"):
        try:
            sk = _load_secret_key(secret_key)
            stx = sign_simple(sk, _load_transaction(tx_file))
        except MalformedInput as e:
            _fail(e, EXIT_MALFORMED)
        alog.bind(txid=transaction_id(stx.transaction))
        log.info("signed")
        typer.echo(base64.b64encode(encode(stx)).decode("ascii"))


@app.command("sign-program")
def sign_program(
    tx_file: Path = _TxFile,
    program: Path = typer.Option(..., "--program", exists=True, dir_okay=False, readable=True),
    arg: Optional[List[str]] = typer.Option(None, "--arg", help="Program argument (base64), repeatable"),
) -> None:
    """Authorize a transaction by a program; print the base64 envelope."""
    with _command("sign-program"):
        try:
            stx = sign_from_contract_account(program.read_bytes(), _parse_args(arg), _load_transaction(tx_file))
        except MalformedInput as e:
            _fail(e, EXIT_MALFORMED)
        alog.bind(txid=transaction_id(stx.transaction))
        log.info("signed by program")
        typer.echo(base64.b64encode(encode(stx)).decode("ascii"))


@app.command()
def verify(envelope: str = typer.Argument(..., help="base64 canonical envelope")) -> None:
    """Verify an envelope; print its transaction as JSON."""
    with _command("verify"):
        try:
            data = base64.b64decode(envelope.strip(), validate=True)
        except (binascii.Error, ValueError):
            _fail(MalformedInput("envelope is not base64"), EXIT_MALFORMED)
        try:
            stx = decode_signed_transaction(data)
        except MalformedInput as e:
            _fail(e, EXIT_MALFORMED)
        alog.bind(txid=transaction_id(stx.transaction))
        try:
            tx = authenticate(stx)
        except VerificationError as e:
            log.info("verification failed", extra={"reason": e.message})
            _fail(e, EXIT_UNVERIFIED)
        log.info("verified")
        typer.echo(dumps(tx, indent=2))


@app.command()
def txid(tx_file: Path = _TxFile) -> None:
    """Print the transaction id."""
    with _command("txid"):
        try:
            tx = _load_transaction(tx_file)
        except MalformedInput as e:
            _fail(e, EXIT_MALFORMED)
        typer.echo(transaction_id(tx))


def main() -> None:  # pragma: no cover - console entry
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
