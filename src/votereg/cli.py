"""
Command-line interface for vote transaction fee estimation and UTxO selection.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from pydantic import ValidationError

from votereg.config import Settings, VoteFeeConfig, get_settings
from votereg.errors import VoteRegError
from votereg.fee import estimate_fee_params
from votereg.metadata import TxMetadata, metadata_from_json, vote_registration_metadata
from votereg.models import FeeParams, NetworkType, ProtocolParams, TxIn, UnspentSource
from votereg.selection import select_unspent_sources

app = typer.Typer(
    name="votereg",
    help="Vote registration fee estimation and UTxO selection",
    add_completion=False,
)


def setup_logging(level: str) -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def load_protocol_params(path: Path) -> ProtocolParams:
    """Load protocol parameters from a cardano-cli JSON file."""
    return ProtocolParams.model_validate_json(path.read_text())


def load_metadata(config: VoteFeeConfig) -> TxMetadata | None:
    """
    Load the metadata payload to estimate with.

    Priority:
    1. Registration keys (builds the vote registration payload)
    2. Metadata JSON file ("no schema" format)
    3. No metadata
    """
    if config.vote_public_key is not None and config.stake_verification_key is not None:
        return vote_registration_metadata(
            bytes.fromhex(config.vote_public_key),
            bytes.fromhex(config.stake_verification_key),
        )
    if config.metadata_file is not None:
        return metadata_from_json(json.loads(config.metadata_file.read_text()))
    return None


def parse_unspent_sources(data: dict[str, Any]) -> list[UnspentSource]:
    """
    Parse a cardano-cli style UTxO map, keeping its order.

    Each entry is keyed by ``<txid>#<index>`` and holds either
    ``{"value": {"lovelace": n}}`` or ``{"amount": n}``.
    """
    if not isinstance(data, dict):
        raise ValueError("UTxO JSON must be an object keyed by <txid>#<index>")

    sources = []
    for ref, entry in data.items():
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid UTxO entry for {ref}")
        if "amount" in entry:
            amount = entry["amount"]
        else:
            value = entry.get("value")
            if isinstance(value, dict):
                amount = value.get("lovelace")
            else:
                amount = value
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"UTxO {ref} has no integer lovelace amount")
        sources.append(UnspentSource(reference=TxIn.from_string(ref), amount=amount))
    return sources


def load_unspent_sources(path: Path) -> list[UnspentSource]:
    return parse_unspent_sources(json.loads(path.read_text()))


def write_output(data: Any, out_file: Path | None) -> None:
    output = json.dumps(data, indent=2)
    if out_file is None:
        typer.echo(output)
    else:
        out_file.write_text(output + "\n")
        logger.info(f"Wrote {out_file}")


def build_config(
    settings: Settings,
    network: str | None,
    testnet_magic: int | None,
    ttl: int | None,
    **kwargs: Any,
) -> VoteFeeConfig:
    """Build the run configuration, falling back to environment settings."""
    network_type = NetworkType(network) if network else settings.network
    if testnet_magic is None and network_type == NetworkType.TESTNET:
        testnet_magic = settings.testnet_magic
    return VoteFeeConfig(
        network=network_type,
        network_magic=testnet_magic if network_type == NetworkType.TESTNET else None,
        ttl=settings.ttl if ttl is None else ttl,
        **kwargs,
    )


def _estimate(config: VoteFeeConfig) -> FeeParams:
    protocol_params = load_protocol_params(config.protocol_params_file)
    metadata = load_metadata(config)
    return estimate_fee_params(config.network_id, protocol_params, metadata, config.ttl)


ProtocolParamsOption = Annotated[
    Path,
    typer.Option("--protocol-params", "-p", help="Protocol parameters JSON (cardano-cli)"),
]
MetadataOption = Annotated[
    Path | None, typer.Option("--metadata", "-m", help="Metadata JSON (no schema)")
]
VotePublicKeyOption = Annotated[
    str | None, typer.Option("--vote-public-key", help="Vote public key (hex)")
]
StakeKeyOption = Annotated[
    str | None, typer.Option("--stake-verification-key", help="Stake verification key (hex)")
]
NetworkOption = Annotated[
    str | None, typer.Option("--network", "-n", help="Network: mainnet | testnet")
]
TestnetMagicOption = Annotated[
    int | None, typer.Option("--testnet-magic", help="Network magic for testnet")
]
TtlOption = Annotated[
    int | None, typer.Option("--time-to-live", help="Slot number the transaction expires at")
]
OutFileOption = Annotated[
    Path | None, typer.Option("--out-file", "-o", help="Write JSON output to this file")
]
LogLevelOption = Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")]


@app.command("estimate-fee")
def estimate_fee(
    protocol_params: ProtocolParamsOption,
    metadata: MetadataOption = None,
    vote_public_key: VotePublicKeyOption = None,
    stake_verification_key: StakeKeyOption = None,
    network: NetworkOption = None,
    testnet_magic: TestnetMagicOption = None,
    ttl: TtlOption = None,
    out_file: OutFileOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Estimate the base and per-input fee of a vote transaction."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level)

    try:
        config = build_config(
            settings,
            network,
            testnet_magic,
            ttl,
            protocol_params_file=protocol_params,
            metadata_file=metadata,
            vote_public_key=vote_public_key,
            stake_verification_key=stake_verification_key,
            out_file=out_file,
        )
        fee_params = _estimate(config)
    except (ValidationError, ValueError, OSError, VoteRegError) as e:
        logger.error(str(e))
        raise typer.Exit(1)

    write_output(
        {"fee_base": fee_params.fee_base, "fee_per_input": fee_params.fee_per_input},
        config.out_file,
    )


@app.command("select-utxos")
def select_utxos(
    protocol_params: ProtocolParamsOption,
    utxos: Annotated[
        Path, typer.Option("--utxos", "-u", help="UTxO JSON, in the order to spend")
    ],
    metadata: MetadataOption = None,
    vote_public_key: VotePublicKeyOption = None,
    stake_verification_key: StakeKeyOption = None,
    network: NetworkOption = None,
    testnet_magic: TestnetMagicOption = None,
    ttl: TtlOption = None,
    allow_insufficient: Annotated[
        bool,
        typer.Option(
            "--allow-insufficient",
            help="Output the consumed UTxOs even if they do not cover the fee",
        ),
    ] = False,
    out_file: OutFileOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Select the UTxOs that pay for a vote transaction's fee."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level)

    try:
        config = build_config(
            settings,
            network,
            testnet_magic,
            ttl,
            protocol_params_file=protocol_params,
            utxos_file=utxos,
            metadata_file=metadata,
            vote_public_key=vote_public_key,
            stake_verification_key=stake_verification_key,
            out_file=out_file,
            require_sufficient=not allow_insufficient,
        )
        fee_params = _estimate(config)
        sources = load_unspent_sources(utxos)
        selected = select_unspent_sources(
            fee_params, sources, require_sufficient=config.require_sufficient
        )
    except (ValidationError, ValueError, OSError, VoteRegError) as e:
        logger.error(str(e))
        raise typer.Exit(1)

    if selected is None:
        logger.error("No UTxOs available to pay the fee")
        raise typer.Exit(1)

    write_output(
        {
            "fee_base": fee_params.fee_base,
            "fee_per_input": fee_params.fee_per_input,
            "fee": fee_params.fee_for(len(selected)),
            "selected": [
                {"tx_in": str(source.reference), "lovelace": source.amount}
                for source in selected
            ],
        },
        config.out_file,
    )


if __name__ == "__main__":
    app()
