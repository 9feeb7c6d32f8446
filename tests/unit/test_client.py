"""Unit tests for NcmClient operations."""

import json
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from ncm_client import (
    ConfigurationError,
    InvalidParameterError,
    MissingCredentialsError,
    NcmClient,
    RecordNotFoundError,
)
from ncm_client.client import (
    NO_LOCATION_FOUND,
    day_window,
    last_24hrs_window,
    strip_masked_secrets,
)

BASE_URL = "https://ncm.test/api/v2"


class Recorder:
    """Mock API answering from a route table and recording every request."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        path = urlsplit(str(request.url)).path
        answer = self.routes.get((request.method, path))
        if answer is None:
            answer = self.routes.get(path, [])
        if isinstance(answer, httpx.Response):
            return answer
        if callable(answer):
            return answer(request)
        return httpx.Response(200, json={"data": answer, "meta": {"next": None}})

    def query(self, index=-1):
        request = self.requests[index]
        return {
            k: v[0] for k, v in parse_qs(urlsplit(str(request.url)).query).items()
        }

    def body(self, index=-1):
        return json.loads(self.requests[index].content)


@pytest.mark.unit
class TestConstruction:
    def test_keys_from_environment(self, monkeypatch, api_keys):
        for header, value in api_keys.items():
            monkeypatch.setenv(header.replace("-", "_"), value)
        recorder = Recorder()

        with NcmClient(
            base_url=BASE_URL, transport=httpx.MockTransport(recorder)
        ) as client:
            client.get_routers()

        assert recorder.requests[0].headers["X-CP-API-KEY"] == api_keys["X-CP-API-KEY"]

    def test_partial_environment_keys_fail_fast(self, monkeypatch):
        monkeypatch.setenv("X_CP_API_ID", "abc")
        with pytest.raises(MissingCredentialsError) as exc_info:
            NcmClient()
        assert exc_info.value.field == "X-CP-API-KEY"

    def test_invalid_override_raises_configuration_error(self, api_keys):
        with pytest.raises(ConfigurationError) as exc_info:
            NcmClient(api_keys=api_keys, retries=-1)
        assert "retries" in exc_info.value.setting.lower()

    def test_overrides_take_precedence_over_settings(self, make_client):
        client = make_client(Recorder(), log_events=False, retries=0)
        assert client.settings.retries == 0
        assert client.log_events is False
        client.log_events = True
        assert client.reporter.log_events is True

    def test_base_url_drives_request_urls(self, make_client):
        recorder = Recorder()
        make_client(recorder, base_url="https://qa.ncm.test/api/v2/").get_groups()
        assert str(recorder.requests[0].url).startswith(
            "https://qa.ncm.test/api/v2/groups/?"
        )

    def test_keys_can_be_set_later(self, api_keys):
        recorder = Recorder()
        client = NcmClient(base_url=BASE_URL, transport=httpx.MockTransport(recorder))
        with pytest.raises(MissingCredentialsError):
            client.get_routers()
        assert recorder.requests == []

        client.set_api_keys(api_keys)
        client.get_routers()
        client.close()
        assert len(recorder.requests) == 1


@pytest.mark.unit
class TestListOperations:
    def test_validated_params_are_sent(self, make_client):
        recorder = Recorder({"/api/v2/routers/": [{"id": "1"}]})

        routers = make_client(recorder).get_routers(
            state="online", order_by=["name", "-id"]
        )

        assert routers == [{"id": "1"}]
        assert recorder.query() == {
            "state": "online",
            "order_by": "name,-id",
            "limit": "500",
        }

    def test_unknown_param_rejected_before_any_request(self, make_client):
        recorder = Recorder()
        with pytest.raises(InvalidParameterError) as exc_info:
            make_client(recorder).get_routers(colour="red", state="online")
        assert exc_info.value.parameters == ["colour"]
        assert recorder.requests == []

    def test_limit_all_is_sent_as_unbounded(self, make_client):
        recorder = Recorder()
        make_client(recorder).get_accounts(limit="all")
        assert recorder.query()["limit"] == "1000000"

    def test_list_endpoint_by_name(self, make_client):
        recorder = Recorder({"/api/v2/firmwares/": [{"id": "9"}]})
        assert make_client(recorder).list_endpoint("firmwares", version="7.2.0") == [
            {"id": "9"}
        ]

    def test_list_endpoint_unknown_name(self, make_client):
        with pytest.raises(KeyError):
            make_client(Recorder()).list_endpoint("toasters")

    def test_net_device_health_accepts_only_net_device(self, make_client):
        client = make_client(Recorder())
        client.get_net_device_health(net_device="5")
        with pytest.raises(InvalidParameterError):
            client.get_net_device_health(limit=10)

    def test_router_logs_filter_by_router(self, make_client):
        recorder = Recorder()
        make_client(recorder).get_router_logs("42", limit=5)
        assert recorder.query() == {"router": "42", "limit": "5"}

    def test_router_scoped_list_requires_router(self, make_client):
        recorder = Recorder()
        with pytest.raises(InvalidParameterError, match="'router' is required"):
            make_client(recorder).list_endpoint("router_logs", limit=5)
        assert recorder.requests == []

    def test_router_scoped_list_sends_router(self, make_client):
        recorder = Recorder()
        make_client(recorder).list_endpoint("router_logs", scope_id="42", limit=5)
        assert recorder.query() == {"router": "42", "limit": "5"}

    def test_scope_on_unscoped_endpoint_rejected(self, make_client):
        recorder = Recorder()
        with pytest.raises(InvalidParameterError, match="not scoped"):
            make_client(recorder).list_endpoint("routers", scope_id="42")
        assert recorder.requests == []

    @pytest.mark.parametrize("limit", [0, -3])
    def test_non_positive_limit_sends_nothing(self, make_client, limit):
        recorder = Recorder()

        result = make_client(recorder).get_routers(limit=limit)

        assert result == []
        assert result.requests == 0
        assert recorder.requests == []

    def test_net_devices_for_router_by_mode(self, make_client):
        recorder = Recorder()
        make_client(recorder).get_net_devices_for_router_by_mode("42", "wan")
        assert recorder.query() == {"router": "42", "mode": "wan", "limit": "500"}

    def test_wan_metrics_filter_by_wan_device_ids(self, make_client):
        recorder = Recorder(
            {
                "/api/v2/net_devices/": [{"id": "7"}, {"id": "8"}],
                "/api/v2/net_device_metrics/": [{"net_device": "7"}],
            }
        )

        metrics = make_client(recorder).get_net_devices_metrics_for_wan()

        assert metrics == [{"net_device": "7"}]
        assert recorder.query(0)["mode"] == "wan"
        assert recorder.query(1)["net_device__in"] == "7,8"

    def test_mdm_metrics_use_asset_devices(self, make_client):
        recorder = Recorder()
        make_client(recorder).get_net_devices_metrics_for_mdm()
        assert recorder.query(0)["is_asset"] == "true"
        # No asset devices: nothing to query metrics for
        assert len(recorder.requests) == 1


@pytest.mark.unit
class TestLookups:
    def test_router_by_name_returns_first_record(self, make_client):
        recorder = Recorder({"/api/v2/routers/": [{"id": "1", "name": "r1"}]})
        assert make_client(recorder).get_router_by_name("r1")["id"] == "1"
        assert recorder.query()["name"] == "r1"

    def test_missing_record_raises_index_error(self, make_client):
        with pytest.raises(IndexError):
            make_client(Recorder()).get_group_by_id("404")

    def test_product_by_name(self, make_client):
        recorder = Recorder(
            {
                "/api/v2/products/": [
                    {"id": "1", "name": "AER2200"},
                    {"id": "2", "name": "IBR200"},
                ]
            }
        )
        assert make_client(recorder).get_product_by_name("IBR200")["id"] == "2"

    def test_unknown_product_raises(self, make_client):
        with pytest.raises(RecordNotFoundError, match="Invalid Product Name"):
            make_client(Recorder()).get_product_by_name("IBR200")

    def test_firmware_matched_on_product_url(self, make_client):
        firmwares = [
            {"id": "10", "product": BASE_URL + "/products/1/"},
            {"id": "20", "product": BASE_URL + "/products/2/"},
        ]
        recorder = Recorder({"/api/v2/firmwares/": firmwares})

        firmware = make_client(recorder).get_firmware_for_productid_by_version(
            "2", "7.2.0"
        )

        assert firmware["id"] == "20"
        assert recorder.query()["version"] == "7.2.0"

    def test_unknown_firmware_raises(self, make_client):
        with pytest.raises(RecordNotFoundError, match="Invalid Firmware Version"):
            make_client(Recorder()).get_firmware_for_productid_by_version("2", "1.0")

    def test_configuration_manager_id(self, make_client):
        recorder = Recorder({"/api/v2/configuration_managers/": [{"id": "cm1"}]})

        assert make_client(recorder).get_configuration_manager_id("42") == "cm1"
        assert recorder.query() == {"router.id": "42", "fields": "id", "limit": "500"}


@pytest.mark.unit
class TestWriteOperations:
    def test_rename_router_sends_put(self, make_client):
        recorder = Recorder({("PUT", "/api/v2/routers/42/"): httpx.Response(202)})

        assert make_client(recorder).rename_router_by_id("42", "edge-1") == "Success"

        request = recorder.requests[-1]
        assert request.method == "PUT"
        assert recorder.body() == {"name": "edge-1"}

    def test_create_subaccount_payload(self, make_client):
        recorder = Recorder(
            {("POST", "/api/v2/accounts/"): httpx.Response(201, json={"id": "9"})}
        )

        assert make_client(recorder).create_subaccount_by_parent_id("5", "Sub") is None
        assert recorder.body() == {"account": "/api/v1/accounts/5/", "name": "Sub"}

    def test_delete_by_name_looks_up_id(self, make_client):
        recorder = Recorder(
            {
                ("GET", "/api/v2/groups/"): [{"id": "77", "name": "Stores"}],
                ("DELETE", "/api/v2/groups/77/"): httpx.Response(204),
            }
        )

        make_client(recorder).delete_group_by_name("Stores")

        assert [r.method for r in recorder.requests] == ["GET", "DELETE"]

    def test_error_body_is_returned(self, make_client):
        body = {"errors": [{"message": "Not found."}]}
        recorder = Recorder(
            {("DELETE", "/api/v2/routers/1/"): httpx.Response(404, json=body)}
        )
        assert make_client(recorder).delete_router_by_id("1") == body

    def test_assign_router_to_group_uses_resource_urls(self, make_client):
        recorder = Recorder({("PUT", "/api/v2/routers/1/"): httpx.Response(202)})
        make_client(recorder).assign_router_to_group("1", "3")
        assert recorder.body() == {"group": BASE_URL + "/groups/3/"}

    def test_reboot_device(self, make_client):
        recorder = Recorder(
            {("POST", "/api/v2/reboot_activity/"): httpx.Response(201, json={})}
        )
        make_client(recorder).reboot_device("1")
        assert recorder.body() == {"router": BASE_URL + "/routers/1/"}

    def test_reboot_device_is_not_replayed(self, make_client):
        answers = [httpx.Response(503), httpx.Response(202)]
        recorder = Recorder(
            {("POST", "/api/v2/reboot_activity/"): lambda request: answers.pop(0)}
        )

        make_client(recorder).reboot_device("1")

        assert [r.method for r in recorder.requests] == ["POST"]

    def test_set_lan_ip_address(self, make_client):
        recorder = Recorder(
            {
                ("GET", "/api/v2/configuration_managers/"): [{"id": "cm1"}],
                ("PATCH", "/api/v2/configuration_managers/cm1/"): httpx.Response(202),
            }
        )

        make_client(recorder).set_lan_ip_address("42", "10.0.0.1", "255.255.255.0")

        assert recorder.query(0) == {"router.id": "42", "fields": "id", "limit": "500"}
        assert recorder.requests[1].url.path == "/api/v2/configuration_managers/cm1/"
        assert recorder.body() == {
            "configuration": [
                {"lan": {"0": {"ip_address": "10.0.0.1", "netmask": "255.255.255.0"}}},
                [],
            ]
        }

    def test_copy_router_configuration_strips_secrets(self, make_client):
        def configuration_managers(request):
            if "fields" in str(request.url):
                admin = {"password": "*", "name": "admin"}
                data = [{"configuration": [{"system": {"users": {"0": admin}}}, []]}]
            else:
                data = [{"id": "cm2"}]
            return httpx.Response(200, json={"data": data, "meta": {"next": None}})

        recorder = Recorder(
            {
                ("GET", "/api/v2/configuration_managers/"): configuration_managers,
                ("PATCH", "/api/v2/configuration_managers/cm2/"): httpx.Response(202),
            }
        )

        assert make_client(recorder).copy_router_configuration("1", "2") == "Success"
        assert recorder.body() == {
            "configuration": [{"system": {"users": {"0": {"name": "admin"}}}}, []]
        }

    def test_delete_location_without_location(self, make_client):
        recorder = Recorder()
        assert make_client(recorder).delete_location_for_router("1") == (
            NO_LOCATION_FOUND
        )
        assert [r.method for r in recorder.requests] == ["GET"]

    def test_create_location_payload(self, make_client):
        recorder = Recorder({("POST", "/api/v2/locations/"): httpx.Response(201)})

        make_client(recorder).create_location("5", 45.5, -122.6, "1")

        assert recorder.body() == {
            "account": BASE_URL + "/accounts/5/",
            "accuracy": 0,
            "latitude": 45.5,
            "longitude": -122.6,
            "method": "manual",
            "router": BASE_URL + "/routers/1/",
        }

    def test_write_requires_credentials(self):
        recorder = Recorder()
        client = NcmClient(base_url=BASE_URL, transport=httpx.MockTransport(recorder))
        with pytest.raises(MissingCredentialsError):
            client.reboot_group("1")
        client.close()
        assert recorder.requests == []


@pytest.mark.unit
class TestTimeWindows:
    def test_day_window_applies_offset(self):
        assert day_window("2024-03-01", tzoffset_hrs=5) == (
            "2024-03-01T05:00:00",
            "2024-03-02T05:00:00",
        )

    def test_last_24hrs_window(self):
        now = datetime(2024, 3, 2, 12, 0, tzinfo=timezone.utc)
        assert last_24hrs_window(0, now=now) == (
            "2024-03-01T12:00:00",
            "2024-03-02T12:00:00",
        )

    def test_router_alerts_for_date_sends_window(self, make_client):
        recorder = Recorder()

        make_client(recorder).get_router_alerts_for_date("2024-03-01", router="42")

        assert recorder.query() == {
            "router": "42",
            "created_at__lt": "2024-03-02T00:00:00",
            "created_at__gt": "2024-03-01T00:00:00",
            "order_by": "created_at_timeuuid",
            "limit": "500",
        }

    def test_router_alerts_window_rejects_other_filters(self, make_client):
        with pytest.raises(InvalidParameterError):
            make_client(Recorder()).get_router_alerts_last_24hrs(limit=5)

    def test_router_logs_for_date_sends_router_and_window(self, make_client):
        recorder = Recorder()

        make_client(recorder).get_router_logs_for_date("42", "2024-03-01")

        assert recorder.query() == {
            "router": "42",
            "created_at__lt": "2024-03-02T00:00:00",
            "created_at__gt": "2024-03-01T00:00:00",
            "order_by": "created_at_timeuuid",
            "limit": "500",
        }

    def test_historical_locations_for_date_fetches_everything(self, make_client):
        recorder = Recorder()

        make_client(recorder).get_historical_locations_for_date("42", "2024-03-01")

        assert recorder.query() == {
            "router": "42",
            "created_at__lte": "2024-03-02T00:00:00",
            "created_at__gt": "2024-03-01T00:00:00",
            "limit": "1000000",
        }


@pytest.mark.unit
def test_strip_masked_secrets_keeps_real_values():
    config = {"wlan": [{"wpapsk": "*", "ssid": "x"}, {"wpapsk": "plain"}]}
    assert strip_masked_secrets(config) == {
        "wlan": [{"ssid": "x"}, {"wpapsk": "plain"}]
    }
