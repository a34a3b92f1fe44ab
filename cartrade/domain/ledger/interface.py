"""
Contract interface descriptor.

Validates the JSON interface (ABI) of the deployed contract once, at
binding time, and provides call encoding and output decoding for the
trading manager. A descriptor that cannot be parsed is rejected with
BindingError; calls never see a malformed schema.
"""

import json
from typing import Any, Literal

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi import is_encodable_type
from eth_abi.exceptions import EncodingError, ParseError
from eth_utils import (
    event_signature_to_log_topic,
    function_signature_to_4byte_selector,
    to_checksum_address,
)
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from cartrade.domain.ledger.errors import (
    BindingError,
    InvalidArgumentsError,
    UnknownMethodError,
)

TYPE_ALIASES = {
    "uint": "uint256",
    "int": "int256",
    "byte": "bytes1",
    "fixed": "fixed128x18",
    "ufixed": "ufixed128x18",
}


class AbiParameter(BaseModel):
    """A single input/output parameter of a function or event.

    Accepts either the full ABI object or a bare type string
    such as ``"uint256"``.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = ""
    type: str
    indexed: bool = False
    components: tuple["AbiParameter", ...] | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_type_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"type": data}
        return data

    @property
    def canonical_type(self) -> str:
        """Type string as used in signatures, with tuples expanded."""
        if self.type.startswith("tuple"):
            inner = ",".join(c.canonical_type for c in self.components or ())
            return f"({inner}){self.type[len('tuple'):]}"
        base, bracket, suffix = self.type.partition("[")
        return TYPE_ALIASES.get(base, base) + bracket + suffix


AbiParameter.model_rebuild()


class AbiEntry(BaseModel):
    """One entry of the JSON interface: a function, event, or other member."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    type: Literal[
        "function", "event", "constructor", "fallback", "receive", "error"
    ] = "function"
    name: str | None = None
    inputs: tuple[AbiParameter, ...] = ()
    outputs: tuple[AbiParameter, ...] = ()
    state_mutability: str | None = Field(default=None, alias="stateMutability")
    payable: bool | None = None
    constant: bool | None = None
    anonymous: bool = False

    @model_validator(mode="after")
    def _require_name(self) -> "AbiEntry":
        if self.type in ("function", "event", "error") and not self.name:
            raise ValueError(f"{self.type} entry without a name")
        return self

    @property
    def input_types(self) -> list[str]:
        return [p.canonical_type for p in self.inputs]

    @property
    def output_types(self) -> list[str]:
        return [p.canonical_type for p in self.outputs]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    @property
    def topic(self) -> str:
        return "0x" + event_signature_to_log_topic(self.signature).hex()

    @property
    def is_payable(self) -> bool:
        return self.state_mutability == "payable" or self.payable is True

    @property
    def is_read_only(self) -> bool:
        return self.state_mutability in ("view", "pure") or self.constant is True


_ENTRIES = TypeAdapter(list[AbiEntry])


def normalize_value(param_type: str, components: Any, value: Any) -> Any:
    """Turn a decoded ABI value into a plain, JSON-friendly Python value.

    Addresses are checksummed, byte strings become 0x-hex, and tuples
    with fully named components become dicts.
    """
    if param_type.endswith("]"):
        inner = param_type[: param_type.rindex("[")]
        return [normalize_value(inner, components, item) for item in value]
    if param_type == "tuple":
        components = components or ()
        if components and all(c.name for c in components):
            return {
                c.name: normalize_value(c.type, c.components, item)
                for c, item in zip(components, value)
            }
        return [
            normalize_value(c.type, c.components, item)
            for c, item in zip(components, value)
        ]
    if param_type == "address":
        return to_checksum_address(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return value


class InterfaceDescriptor:
    """Validated, indexed view over a contract's JSON interface.

    Functions are looked up by name and arity (overloads allowed);
    events are looked up by their topic hash.
    """

    def __init__(self, entries: list[AbiEntry]) -> None:
        self._entries = list(entries)
        self._functions: dict[str, list[AbiEntry]] = {}
        self._events: dict[str, AbiEntry] = {}
        for entry in self._entries:
            if entry.type == "function":
                self._functions.setdefault(entry.name, []).append(entry)
            elif entry.type == "event" and not entry.anonymous:
                self._events[entry.topic] = entry

    @classmethod
    def parse(cls, json_interface: Any) -> "InterfaceDescriptor":
        """Validate a raw JSON interface and build a descriptor.

        Args:
            json_interface: The ABI as a list of entries or a JSON string.

        Raises:
            BindingError: If the interface is not a valid ABI.
        """
        try:
            if isinstance(json_interface, (str, bytes)):
                entries = _ENTRIES.validate_json(json_interface)
            else:
                entries = _ENTRIES.validate_python(json_interface)
        except (ValidationError, json.JSONDecodeError) as exc:
            raise BindingError(f"Malformed contract interface: {exc}") from exc

        for entry in entries:
            for param in (*entry.inputs, *entry.outputs):
                _check_type(entry, param)
        return cls(entries)

    @property
    def function_names(self) -> list[str]:
        return sorted(self._functions)

    @property
    def events(self) -> list[AbiEntry]:
        return list(self._events.values())

    def has_function(self, name: str) -> bool:
        return name in self._functions

    def function(self, name: str, arity: int) -> AbiEntry:
        """Resolve a function by name and number of arguments.

        Raises:
            UnknownMethodError: If no function has this name.
            InvalidArgumentsError: If no overload takes ``arity`` arguments.
        """
        candidates = self._functions.get(name)
        if not candidates:
            raise UnknownMethodError(name)
        for entry in candidates:
            if len(entry.inputs) == arity:
                return entry
        expected = " or ".join(str(len(e.inputs)) for e in candidates)
        raise InvalidArgumentsError(
            name, f"expected {expected} argument(s), got {arity}"
        )

    def event_for_topic(self, topic: str) -> AbiEntry | None:
        return self._events.get(topic.lower())

    def encode_call(self, entry: AbiEntry, args: tuple[Any, ...]) -> bytes:
        """Encode selector plus arguments for a function call.

        Raises:
            InvalidArgumentsError: If an argument does not fit its type.
        """
        try:
            return entry.selector + abi_encode(entry.input_types, list(args))
        except (EncodingError, TypeError, ValueError, OverflowError) as exc:
            raise InvalidArgumentsError(entry.name, str(exc)) from exc

    def decode_output(self, entry: AbiEntry, data: bytes) -> Any:
        """Decode and normalize the return data of a call.

        Returns None for functions without outputs, a scalar for a single
        output, and a dict (all outputs named) or list otherwise.
        Decoding errors from eth_abi propagate to the caller.
        """
        if not entry.outputs:
            return None
        raw = abi_decode(entry.output_types, data)
        values = [
            normalize_value(p.type, p.components, v)
            for p, v in zip(entry.outputs, raw)
        ]
        if len(values) == 1:
            return values[0]
        if all(p.name for p in entry.outputs):
            return {p.name: v for p, v in zip(entry.outputs, values)}
        return values


def _check_type(entry: AbiEntry, param: AbiParameter) -> None:
    if param.type.startswith("tuple") and not param.components:
        raise BindingError(
            f"Malformed contract interface: tuple parameter without components "
            f"in {entry.name or entry.type}"
        )
    try:
        valid = is_encodable_type(param.canonical_type)
    except (ParseError, ValueError) as exc:
        raise BindingError(
            f"Malformed contract interface: bad type {param.type!r} "
            f"in {entry.name or entry.type}"
        ) from exc
    if not valid:
        raise BindingError(
            f"Malformed contract interface: unsupported type {param.type!r} "
            f"in {entry.name or entry.type}"
        )
