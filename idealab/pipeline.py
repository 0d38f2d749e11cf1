import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from idealab.config import GenerationConfig
from idealab.contract import parse_contract
from idealab.errors import InvalidField
from idealab.gateway import ModelGateway

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


@dataclass(frozen=True)
class RoundTrip:
    """
    One prompt -> gateway -> parse -> record flow, minus the prompt text.
    """

    name: str
    config: GenerationConfig
    required_fields: Sequence[str]
    record: Type[BaseModel]


def _first_error(err: ValidationError) -> Tuple[str, str]:
    errors: List[Dict[str, Any]] = err.errors()
    if not errors:
        return "record", str(err)
    loc = errors[0].get("loc") or ("record",)
    return str(loc[0]), errors[0].get("msg", str(err))


def decode_record(record: Type[RecordT], data: Dict[str, Any], extra: Optional[Dict[str, Any]] = None) -> RecordT:
    """
    Validate the contract fields against the pydantic record.
    Type or range mismatches become InvalidField.
    """
    payload = dict(data)
    if extra:
        payload.update(extra)
    try:
        return record.model_validate(payload)
    except ValidationError as err:
        raise InvalidField(*_first_error(err)) from err


async def run_round_trip(
    gateway: ModelGateway,
    trip: RoundTrip,
    prompt: str,
    extra: Optional[Dict[str, Any]] = None,
):
    """
    Execute ``trip`` once. ``extra`` carries fields the model does not
    produce (ids). Raises GatewayError or a ContractViolation.
    """
    logger.info("Sending %s request to %s", trip.name, gateway.name)
    raw = await gateway.generate(prompt, trip.config)
    logger.debug("Received %s response: %s", trip.name, raw[:100])

    data = parse_contract(raw, trip.required_fields)
    record = decode_record(trip.record, data, extra)
    logger.info("%s round trip completed", trip.name.capitalize())
    return record
