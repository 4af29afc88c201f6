from pathlib import Path

import pytest
from pydantic import HttpUrl, WebsocketUrl

from arbscan.checksum_cache import get_checksum_address
from arbscan.config import PairConfig, Settings, load_config_from_file, save_config_to_file
from arbscan.exceptions import ConfigurationError

ROUTER_ADDRESS = get_checksum_address("0x" + "e5" * 20)
EXECUTOR_ADDRESS = get_checksum_address("0x" + "f6" * 20)
POOL_A = get_checksum_address("0x" + "a1" * 20)
POOL_B = get_checksum_address("0x" + "b2" * 20)
WETH_ADDRESS = get_checksum_address("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2")
DAI_ADDRESS = get_checksum_address("0x6B175474E89094C44Da98b954EedeAC495271d0F")

CONFIG_TEMPLATE = """
rpc = "{rpc}"
router_address = "{router}"
executor_address = "{executor}"
{extra}

[[pairs]]
address = "{pool_a}"
base_token = "{weth}"
quote_token = "{dai}"
related_pairs = ["{pool_b}", "{pool_b}"]
"""


def _write_config(
    path: Path,
    *,
    rpc: str = "http://localhost:8545",
    router: str = ROUTER_ADDRESS.lower(),
    extra: str = "",
) -> Path:
    config_path = path / "config.toml"
    config_path.write_text(
        CONFIG_TEMPLATE.format(
            rpc=rpc,
            router=router,
            executor=EXECUTOR_ADDRESS,
            extra=extra,
            pool_a=POOL_A.lower(),
            pool_b=POOL_B,
            weth=WETH_ADDRESS,
            dai=DAI_ADDRESS,
        )
    )
    return config_path


def test_load_config(tmp_path: Path):
    settings = load_config_from_file(_write_config(tmp_path))

    assert isinstance(settings.rpc, HttpUrl)
    assert settings.router_address == ROUTER_ADDRESS
    assert settings.executor_address == EXECUTOR_ADDRESS
    assert settings.poll_interval == 2.0
    assert settings.slippage_bps == 50
    assert settings.pairs == [
        PairConfig(
            address=POOL_A,
            base_token=WETH_ADDRESS,
            quote_token=DAI_ADDRESS,
            related_pairs=[POOL_B],
        )
    ]


def test_load_config_with_websocket_endpoint(tmp_path: Path):
    settings = load_config_from_file(_write_config(tmp_path, rpc="ws://localhost:8546"))
    assert isinstance(settings.rpc, WebsocketUrl)


def test_load_config_with_ipc_endpoint(tmp_path: Path):
    settings = load_config_from_file(_write_config(tmp_path, rpc="~/.ethereum/geth.ipc"))
    assert isinstance(settings.rpc, Path)
    assert settings.rpc.is_absolute()


def test_load_config_with_options(tmp_path: Path):
    settings = load_config_from_file(
        _write_config(tmp_path, extra="poll_interval = 0.5\nslippage_bps = 100")
    )
    assert settings.poll_interval == 0.5
    assert settings.slippage_bps == 100


def test_environment_fills_missing_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ARBSCAN_POLL_INTERVAL", "5")
    settings = load_config_from_file(_write_config(tmp_path))
    assert settings.poll_interval == 5.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"router": "0xnotanaddress"},
        {"extra": "poll_interval = 0"},
        {"extra": "slippage_bps = 10000"},
    ],
)
def test_invalid_config(tmp_path: Path, kwargs):
    with pytest.raises(ConfigurationError):
        load_config_from_file(_write_config(tmp_path, **kwargs))


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        load_config_from_file(tmp_path / "missing.toml")


def test_malformed_config_file(tmp_path: Path):
    config_path = tmp_path / "config.toml"
    config_path.write_text("rpc = [")
    with pytest.raises(ConfigurationError):
        load_config_from_file(config_path)


def test_save_config(tmp_path: Path):
    settings = load_config_from_file(_write_config(tmp_path))
    saved_path = tmp_path / "saved" / "config.toml"

    save_config_to_file(settings, saved_path)

    assert load_config_from_file(saved_path) == settings


def test_settings_without_pairs():
    settings = Settings(
        rpc="http://localhost:8545",
        router_address=ROUTER_ADDRESS,
        executor_address=EXECUTOR_ADDRESS,
    )
    assert settings.pairs == []
