"""
State codec - ContractState <-> compact record

Compact records use short key aliases and drop fields that hold their empty
default, so a whole contract fits in a shareable link. Records written before
minification (long field names) still decode.

Public API
----------
- FIELD_ALIASES / CUSTOM_OPTION_ALIASES: long name -> short alias
- WIRE_DEFAULTS: value restored for a field the record omits
- encode(state) -> dict
- decode(record) -> ContractState   (record may be a dict or its JSON text)
- is_minified(record) -> bool
"""

import json
import logging
from typing import Any, Dict, Mapping, Union

from pydantic import ValidationError

from ...errors import MalformedShareData
from ..contracts.state import ContractState
from ..pricing.catalog import NO_OPTION_KEY

logger = logging.getLogger(__name__)

CompactRecord = Dict[str, Any]


# ---------------------------------------------------------------------------
# Alias tables
# ---------------------------------------------------------------------------

FIELD_ALIASES: Dict[str, str] = {
    "contractorName": "n",
    "venue": "v",
    "contact": "c",
    "weddingDate": "d",
    "weddingTime": "t",
    "packageConfig": "p",
    "options": "o",
    "hasCustomOption": "h",
    "customOptions": "co",
    "discountItems": "di",
    "finalPrice": "f",
    "signature": "s",
    "logoImage": "l",
}

CUSTOM_OPTION_ALIASES: Dict[str, str] = {
    "id": "i",
    "name": "n",
    "price": "p",
    "sign": "s",
}

FIELD_NAMES: Dict[str, str] = {short: long for long, short in FIELD_ALIASES.items()}
CUSTOM_OPTION_NAMES: Dict[str, str] = {short: long for long, short in CUSTOM_OPTION_ALIASES.items()}

assert len(FIELD_NAMES) == len(FIELD_ALIASES), "duplicate short alias"
assert len(CUSTOM_OPTION_NAMES) == len(CUSTOM_OPTION_ALIASES), "duplicate short alias"


# Each default is one of the empty sentinels ("", "none", False, [], None).
# A field is omitted only when it equals its own default, so "none" typed into
# a text field survives the round trip.
WIRE_DEFAULTS: Dict[str, Any] = {
    "contractorName": "",
    "venue": "",
    "contact": "",
    "weddingDate": "",
    "weddingTime": "",
    "packageConfig": "",
    "options": NO_OPTION_KEY,
    "hasCustomOption": False,
    "customOptions": [],
    "discountItems": [],
    "finalPrice": "",
    "signature": None,
    "logoImage": None,
}


def _is_empty(field: str, value: Any) -> bool:
    default = WIRE_DEFAULTS[field]
    if isinstance(default, bool):
        return value is False
    if isinstance(default, list):
        return isinstance(value, (list, tuple)) and len(value) == 0
    return value == default


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------

def encode(state: ContractState) -> CompactRecord:
    """Minify keys and drop empty top-level fields (custom options stay complete)"""
    data = state.model_dump()
    record: CompactRecord = {}

    for field, alias in FIELD_ALIASES.items():
        value = data.get(field)
        if _is_empty(field, value):
            continue
        if field == "customOptions":
            value = [
                {CUSTOM_OPTION_ALIASES[k]: option[k] for k in CUSTOM_OPTION_ALIASES}
                for option in value
            ]
        record[alias] = value

    return record


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------

def is_minified(record: Mapping[str, Any]) -> bool:
    """A record is short-form when any of its keys is a known alias"""
    return any(key in FIELD_NAMES for key in record)


def _expand_custom_option(item: Any) -> Any:
    if not isinstance(item, Mapping):
        return item
    return {CUSTOM_OPTION_NAMES[key]: value for key, value in item.items() if key in CUSTOM_OPTION_NAMES}


def _expand(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Reverse every alias; in a short-form record any other key is unknown and dropped"""
    expanded = {FIELD_NAMES[key]: value for key, value in record.items() if key in FIELD_NAMES}
    options = expanded.get("customOptions")
    if isinstance(options, list):
        expanded["customOptions"] = [_expand_custom_option(item) for item in options]
    return expanded


def _parse(record: Union[str, bytes, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(record, Mapping):
        return record
    if isinstance(record, (str, bytes, bytearray)):
        try:
            parsed = json.loads(record)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedShareData(f"Shared contract data is not valid JSON: {e}") from e
        if not isinstance(parsed, dict):
            raise MalformedShareData("Shared contract data must be a JSON object")
        return parsed
    raise MalformedShareData(f"Unsupported share record type: {type(record).__name__}")


def decode(record: Union[str, bytes, Mapping[str, Any]]) -> ContractState:
    """Restore a ContractState from a compact (or legacy long-key) record"""
    parsed = _parse(record)
    minified = is_minified(parsed)
    fields = _expand(parsed) if minified else dict(parsed)

    data = {field: fields.get(field, default) for field, default in WIRE_DEFAULTS.items()}
    known = FIELD_NAMES if minified else WIRE_DEFAULTS
    ignored = sorted(str(key) for key in parsed if key not in known)
    if ignored:
        logger.debug(f"Ignoring unknown share record keys: {ignored}")

    try:
        return ContractState.model_validate(data)
    except ValidationError as e:
        raise MalformedShareData(
            f"Shared contract data has invalid fields: {e.error_count()} error(s)"
        ) from e
