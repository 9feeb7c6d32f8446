"""Unit tests for the ncm-client command."""

import argparse
import functools
import json

import httpx
import pytest

from ncm_client import NcmClient, cli


@pytest.fixture
def run_cli(monkeypatch, api_keys):
    """Run ``cli.main`` against a mock API with keys in the environment."""
    monkeypatch.setattr(cli, "setup_secure_logging", lambda level: None)
    for header, value in api_keys.items():
        monkeypatch.setenv(header.replace("-", "_"), value)

    def _run(handler, *argv):
        monkeypatch.setattr(
            cli,
            "NcmClient",
            functools.partial(
                NcmClient,
                transport=httpx.MockTransport(handler),
                sleep=lambda seconds: None,
            ),
        )
        return cli.main(list(argv))

    return _run


@pytest.mark.unit
def test_list_prints_records_as_json(run_cli, capsys):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200, json={"data": [{"id": "1"}], "meta": {"next": None}}
        )

    code = run_cli(handler, "list", "routers", "--limit", "all", "-p", "state=online")

    assert code == cli.EXIT_OK
    assert json.loads(capsys.readouterr().out) == [{"id": "1"}]
    assert seen[0].url.params["limit"] == "1000000"
    assert seen[0].url.params["state"] == "online"


@pytest.mark.unit
def test_base_url_option(run_cli, capsys):
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json={"data": [], "meta": {"next": None}})

    run_cli(handler, "--base-url", "https://qa.ncm.test/api/v2", "list", "groups")

    assert seen[0].startswith("https://qa.ncm.test/api/v2/groups/")


@pytest.mark.unit
def test_invalid_param_exits_with_usage_code(run_cli, capsys):
    code = run_cli(
        lambda request: httpx.Response(500), "list", "routers", "-p", "colour=red"
    )

    assert code == cli.EXIT_USAGE
    assert "Invalid parameters: colour" in capsys.readouterr().err


@pytest.mark.unit
def test_router_option_filters_router_logs(run_cli, capsys):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": [], "meta": {"next": None}})

    code = run_cli(handler, "list", "router_logs", "--router", "42", "--limit", "5")

    assert code == cli.EXIT_OK
    assert dict(seen[0].url.params) == {"router": "42", "limit": "5"}


@pytest.mark.unit
def test_router_logs_without_router_is_a_usage_error(run_cli, capsys):
    seen = []
    code = run_cli(seen.append, "list", "router_logs")

    assert code == cli.EXIT_USAGE
    assert "'router' is required for Router Logs" in capsys.readouterr().err
    assert seen == []


@pytest.mark.unit
def test_router_option_on_unscoped_endpoint_is_rejected(run_cli, capsys):
    code = run_cli(
        lambda request: httpx.Response(500), "list", "routers", "--router", "1"
    )

    assert code == cli.EXIT_USAGE
    assert "not scoped to a router" in capsys.readouterr().err


@pytest.mark.unit
def test_truncated_result_exits_nonzero(run_cli, capsys):
    code = run_cli(
        lambda request: httpx.Response(500, text="oops"), "--quiet", "list", "alerts"
    )

    assert code == cli.EXIT_TRUNCATED
    assert json.loads(capsys.readouterr().out) == []


@pytest.mark.unit
def test_missing_keys_exit_with_usage_code(monkeypatch, capsys):
    monkeypatch.setattr(cli, "setup_secure_logging", lambda level: None)
    monkeypatch.setattr(
        cli,
        "NcmClient",
        functools.partial(
            NcmClient, transport=httpx.MockTransport(lambda r: httpx.Response(200))
        ),
    )

    code = cli.main(["list", "routers"])

    assert code == cli.EXIT_USAGE
    assert "X-CP-API-ID missing" in capsys.readouterr().err


@pytest.mark.unit
def test_endpoints_command_lists_catalog(monkeypatch, capsys):
    monkeypatch.setattr(cli, "setup_secure_logging", lambda level: None)

    assert cli.main(["endpoints"]) == cli.EXIT_OK

    catalog = json.loads(capsys.readouterr().out)
    assert catalog["net_devices"]["label"] == "Net Devices"
    assert "router__in" in catalog["net_devices"]["in_filters"]
    assert catalog["net_device_health"]["params"] == ["net_device"]
    assert catalog["router_logs"]["scope"] == "router"
    assert catalog["routers"]["scope"] is None


@pytest.mark.unit
def test_unknown_endpoint_is_a_usage_error(monkeypatch):
    monkeypatch.setattr(cli, "setup_secure_logging", lambda level: None)
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["list", "toasters"])
    assert exc_info.value.code == 2


@pytest.mark.unit
@pytest.mark.parametrize("value", ["novalue", "=x", ""])
def test_parse_param_rejects_malformed(value):
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_param(value)


@pytest.mark.unit
def test_parse_param_keeps_commas_and_equals():
    assert cli.parse_param("id__in=1,2,3") == {"id__in": "1,2,3"}
    assert cli.parse_param("name=a=b") == {"name": "a=b"}
