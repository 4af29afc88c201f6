from json import JSONDecodeError
from pathlib import Path
from typing import TYPE_CHECKING, cast

import click
import tenacity
from pydantic import HttpUrl, WebsocketUrl
from ujson import loads as ujson_loads
from web3 import HTTPProvider, IPCProvider, JSONBaseProvider, LegacyWebSocketProvider, Web3
from web3.types import RPCResponse

from arbscan.config import Settings, load_config_from_file
from arbscan.exceptions import ArbscanValueError, ConfigurationError


def _fast_decode_rpc_response(raw_response: bytes) -> RPCResponse:
    """
    Decode the JSON-RPC response using ujson.
    """

    try:
        return cast("RPCResponse", ujson_loads(raw_response))
    except ValueError:
        # Re-raise as a dummy JSONDecodeError so web3py's exception handling works as intended.
        msg = "JSON failure"
        raise JSONDecodeError(msg, "[]", 0) from None


def load_settings(config_path: Path) -> Settings:
    """
    Load the config file, reporting validation failures as a CLI error.
    """

    try:
        return load_config_from_file(config_path)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc.message)) from exc


def get_web3_from_config(settings: Settings, *, optimize: bool = True) -> Web3:
    match endpoint := settings.rpc:
        case HttpUrl():
            w3 = Web3(HTTPProvider(str(endpoint)))
        case WebsocketUrl():
            w3 = Web3(LegacyWebSocketProvider(str(endpoint)))
        case Path():
            w3 = Web3(IPCProvider(str(endpoint)))

    w3_connected_check_with_retry = tenacity.Retrying(
        stop=tenacity.stop_after_delay(10),
        wait=tenacity.wait_exponential_jitter(),
        retry=tenacity.retry_if_result(lambda result: result is False),
    )
    try:
        w3_connected_check_with_retry(fn=w3.is_connected)
    except tenacity.RetryError as exc:
        raise ArbscanValueError(message=f"Could not connect to the RPC at {endpoint}.") from exc

    if optimize:
        # Remove all middleware and monkey-patch the JSON decoding for RPC responses
        w3.middleware_onion.clear()
        if TYPE_CHECKING:
            assert isinstance(w3.provider, JSONBaseProvider)
        w3.provider.decode_rpc_response = _fast_decode_rpc_response  # type:ignore[method-assign]

    return w3
