"""
Adapter: Contract descriptor files.

Deployment writes one descriptor per contract and network to
``{directory}/{contract}-{network}.json`` with the shape
``{"address": "...", "jsonInterface": [...]}``. This module reads it
and hands validated values to the trading manager.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cartrade.domain.ledger.errors import BindingError

logger = logging.getLogger(__name__)


class ContractDescriptor(BaseModel):
    """Deployed contract instance on one network."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    address: str
    json_interface: list[Any] = Field(alias="jsonInterface")


def descriptor_path(directory: str | Path, contract: str, network: str) -> Path:
    return Path(directory) / f"{contract}-{network}.json"


def load_contract_descriptor(
    directory: str | Path, contract: str, network: str
) -> ContractDescriptor:
    """Read the descriptor for ``contract`` deployed on ``network``.

    Raises:
        BindingError: If the file is missing, not JSON, or lacks
            ``address`` / ``jsonInterface``.
    """
    path = descriptor_path(directory, contract, network).resolve()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise BindingError(f"Contract descriptor not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise BindingError(f"Unreadable contract descriptor {path}: {exc}") from exc

    try:
        descriptor = ContractDescriptor.model_validate(raw)
    except ValidationError as exc:
        raise BindingError(f"Malformed contract descriptor {path}: {exc}") from exc

    logger.info("Loaded %s descriptor for network %s at %s", contract, network, descriptor.address)
    return descriptor
