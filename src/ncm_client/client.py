"""Client for the Cradlepoint NCM REST API.

:class:`NcmClient` turns method calls into authenticated requests against
the NCM v2 API. List operations validate their keyword arguments against
the endpoint catalog, split oversized ``__in`` filters, follow pagination
cursors and return every record as decoded JSON.

Usage::

    from ncm_client import NcmClient

    api_keys = {
        "X-CP-API-ID": "...",
        "X-CP-API-KEY": "...",
        "X-ECM-API-ID": "...",
        "X-ECM-API-KEY": "...",
    }
    with NcmClient(api_keys=api_keys) as client:
        routers = client.get_routers(limit="all", state="online")

The default page size is 500 records instead of the API default of 20.
Pass ``limit="all"`` to collect the whole collection.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import httpx
from pydantic import ValidationError

from .config import Settings
from .core import Paginator, ResponseReporter, ResultSet, validate_params
from .core.params import normalize_limit, normalize_order_by
from .endpoints import get_endpoint
from .exceptions import (
    ConfigurationError,
    InvalidParameterError,
    MissingCredentialsError,
    RecordNotFoundError,
)
from .models import missing_credential
from .utils.http import NcmSession, RetryPolicy, decode_body

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"
NO_LOCATION_FOUND = "NO LOCATION FOUND"

# Values the API returns in place of stored secrets
MASKED_SECRET_KEYS = ("password", "wpapsk")
MASKED_VALUE = "*"


def strip_masked_secrets(value: Any) -> Any:
    """Remove masked ``password``/``wpapsk`` entries from a configuration.

    The API never returns secrets in clear text; writing the ``"*"``
    placeholder back would overwrite the real value on the target.

    :param value: Decoded configuration, any nesting of dicts and lists
    :type value: Any
    :return: Copy without masked secret entries
    :rtype: Any
    """
    if isinstance(value, dict):
        return {
            key: strip_masked_secrets(item)
            for key, item in value.items()
            if not (key in MASKED_SECRET_KEYS and item == MASKED_VALUE)
        }
    if isinstance(value, list):
        return [strip_masked_secrets(item) for item in value]
    return value


def day_window(date: str, tzoffset_hrs: int = 0) -> Tuple[str, str]:
    """Return the start and end timestamps of a calendar day.

    :param date: Day in ``YYYY-mm-dd`` format
    :type date: str
    :param tzoffset_hrs: Offset from UTC of the local timezone
    :type tzoffset_hrs: int
    :return: ``(start, end)`` formatted as API timestamps
    :rtype: Tuple[str, str]
    """
    start = datetime.strptime(date, DATE_FORMAT) + timedelta(hours=tzoffset_hrs)
    end = start + timedelta(hours=24)
    return start.strftime(TIMESTAMP_FORMAT), end.strftime(TIMESTAMP_FORMAT)


def last_24hrs_window(
    tzoffset_hrs: int = 0, now: Optional[datetime] = None
) -> Tuple[str, str]:
    """Return the timestamps spanning the 24 hours before ``now``.

    :param tzoffset_hrs: Offset from UTC of the local timezone
    :type tzoffset_hrs: int
    :param now: Reference time, current UTC time when None
    :type now: Optional[datetime]
    :return: ``(start, end)`` formatted as API timestamps
    :rtype: Tuple[str, str]
    """
    end = (now or datetime.now(timezone.utc)) + timedelta(hours=tzoffset_hrs)
    start = end - timedelta(hours=24)
    return start.strftime(TIMESTAMP_FORMAT), end.strftime(TIMESTAMP_FORMAT)


def _resolve_settings(
    settings: Optional[Settings], overrides: Dict[str, Any]
) -> Settings:
    try:
        base = settings if settings is not None else Settings()
        if not overrides:
            return base
        return Settings.model_validate({**base.model_dump(), **overrides})
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid client configuration: {0}".format(e),
            setting=",".join(str(err["loc"][0]) for err in e.errors() if err["loc"]),
        ) from e


class NcmClient:
    """Client for the NCM v2 API.

    Arguments left as None fall back to the loaded :class:`Settings`
    (environment variables and ``.env``).

    :param api_keys: Mapping of the four credential headers
    :type api_keys: Optional[Mapping[str, Any]]
    :param log_events: Log a notice for each API response
    :type log_events: Optional[bool]
    :param retries: Retry attempts on transient failures
    :type retries: Optional[int]
    :param retry_backoff_factor: Backoff multiplier between retries
    :type retry_backoff_factor: Optional[float]
    :param retry_on: Status codes that trigger a retry
    :type retry_on: Optional[Iterable[int]]
    :param base_url: API base URL
    :type base_url: Optional[str]
    :param settings: Preloaded settings
    :type settings: Optional[Settings]
    :param transport: Transport used below the retry layer, for testing
    :type transport: Optional[httpx.BaseTransport]
    :param sleep: Wait function used between retries, for testing
    :type sleep: Optional[Callable[[float], None]]
    :raises ConfigurationError: If the resulting settings are invalid
    :raises MissingCredentialsError: If ``api_keys`` lacks a credential
    """

    def __init__(
        self,
        api_keys: Optional[Mapping[str, Any]] = None,
        log_events: Optional[bool] = None,
        retries: Optional[int] = None,
        retry_backoff_factor: Optional[float] = None,
        retry_on: Optional[Iterable[int]] = None,
        base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        overrides = {
            key: value
            for key, value in (
                ("log_events", log_events),
                ("retries", retries),
                ("retry_backoff_factor", retry_backoff_factor),
                ("retry_on", list(retry_on) if retry_on is not None else None),
                ("base_url", base_url),
            )
            if value is not None
        }
        self.settings = _resolve_settings(settings, overrides)
        self.base_url = self.settings.base_url

        self.reporter = ResponseReporter(log_events=self.settings.log_events)
        self.session = NcmSession(
            retry_policy=RetryPolicy.build(
                total=self.settings.retries,
                backoff_factor=self.settings.retry_backoff_factor,
                status_forcelist=self.settings.retry_on,
            ),
            max_redirects=self.settings.max_redirects,
            timeout=self.settings.timeout,
            transport=transport,
            sleep=sleep,
        )
        self.paginator = Paginator(self.session, self.reporter)

        keys = api_keys if api_keys is not None else self.settings.api_keys
        if keys:
            try:
                self.session.set_api_keys(keys)
            except Exception:
                self.session.close()
                raise
        logger.debug("NCM client ready for %s", self.base_url)

    @property
    def log_events(self) -> bool:
        return self.reporter.log_events

    @log_events.setter
    def log_events(self, value: bool) -> None:
        self.reporter.log_events = bool(value)

    def set_api_keys(self, api_keys: Mapping[str, Any]) -> None:
        """Set the API keys used for every subsequent call.

        :param api_keys: Mapping keyed by credential header name
        :type api_keys: Mapping[str, Any]
        :raises InvalidCredentialsError: If ``api_keys`` is not a mapping
        :raises MissingCredentialsError: If any of the four headers is absent
        """
        self.session.set_api_keys(api_keys)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "NcmClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _url(self, *parts: Any) -> str:
        return "{0}/{1}/".format(self.base_url, "/".join(str(p) for p in parts))

    def _get_collection(
        self,
        endpoint_name: str,
        kwargs: Mapping[str, Any],
        allowed_params: Optional[Iterable[str]] = None,
        fixed_params: Optional[Mapping[str, Any]] = None,
        scope_id: Any = None,
    ) -> ResultSet:
        endpoint = get_endpoint(endpoint_name)
        fixed = dict(fixed_params or {})
        if endpoint.scope:
            if scope_id is None:
                raise InvalidParameterError(
                    "'{0}' is required for {1}".format(endpoint.scope, endpoint.label),
                    parameters=[endpoint.scope],
                )
            fixed[endpoint.scope] = scope_id
        elif scope_id is not None:
            raise InvalidParameterError(
                "{0} is not scoped to a router".format(endpoint.label),
                parameters=["scope_id"],
            )
        allowed = (
            frozenset(allowed_params)
            if allowed_params is not None
            else endpoint.allowed_params
        )
        params = validate_params(kwargs, allowed, self.session.headers)
        # Fixed filters go in params: httpx drops a URL query string once
        # params are given.
        if fixed:
            params.update(fixed)
            params["limit"] = normalize_limit(params["limit"])
            if "order_by" in params:
                params["order_by"] = normalize_order_by(params["order_by"])
        return self.paginator.fetch(endpoint.url(self.base_url), endpoint.label, params)

    def _send(self, method: str, url: str, label: str, payload: Any = None) -> Any:
        """Send a single write request and return the reported value."""
        missing = missing_credential(self.session.headers)
        if missing:
            raise MissingCredentialsError(missing)
        kwargs = {"json": payload} if payload is not None else {}
        response = self.session.request(method, url, **kwargs)
        return self.reporter.report(response.status_code, decode_body(response), label)

    def list_endpoint(self, endpoint_name: str, scope_id=None, **kwargs) -> ResultSet:
        """Return records of any catalog endpoint by name.

        :param endpoint_name: Catalog key, e.g. ``"routers"``
        :type endpoint_name: str
        :param scope_id: Router ID for endpoints scoped to one router
        :return: Records of the collection
        :rtype: ResultSet
        :raises KeyError: If the endpoint is unknown
        :raises InvalidParameterError: If a scoped endpoint gets no ``scope_id``
        """
        return self._get_collection(endpoint_name, kwargs, scope_id=scope_id)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def get_accounts(self, **kwargs) -> ResultSet:
        """Return accounts visible to the API keys."""
        return self._get_collection("accounts", kwargs)

    def get_account_by_id(self, account_id) -> Dict[str, Any]:
        return self.get_accounts(id=account_id)[0]

    def get_account_by_name(self, account_name: str) -> Dict[str, Any]:
        return self.get_accounts(name=account_name)[0]

    def create_subaccount_by_parent_id(
        self, parent_account_id, subaccount_name: str
    ) -> Any:
        """Create a subaccount below an account.

        :param parent_account_id: ID of the parent account
        :param subaccount_name: Name for the new subaccount
        :return: Normalised response value
        """
        payload = {
            "account": "/api/v1/accounts/{0}/".format(parent_account_id),
            "name": str(subaccount_name),
        }
        return self._send("POST", self._url("accounts"), "Subaccount", payload)

    def create_subaccount_by_parent_name(
        self, parent_account_name: str, subaccount_name: str
    ) -> Any:
        return self.create_subaccount_by_parent_id(
            self.get_account_by_name(parent_account_name)["id"], subaccount_name
        )

    def rename_subaccount_by_id(self, subaccount_id, new_subaccount_name: str) -> Any:
        payload = {"name": str(new_subaccount_name)}
        return self._send(
            "PUT", self._url("accounts", subaccount_id), "Subaccount", payload
        )

    def rename_subaccount_by_name(
        self, subaccount_name: str, new_subaccount_name: str
    ) -> Any:
        return self.rename_subaccount_by_id(
            self.get_account_by_name(subaccount_name)["id"], new_subaccount_name
        )

    def delete_subaccount_by_id(self, subaccount_id) -> Any:
        return self._send("DELETE", self._url("accounts", subaccount_id), "Subaccount")

    def delete_subaccount_by_name(self, subaccount_name: str) -> Any:
        return self.delete_subaccount_by_id(
            self.get_account_by_name(subaccount_name)["id"]
        )

    # ------------------------------------------------------------------
    # Logs, alerts and samples
    # ------------------------------------------------------------------

    def get_activity_logs(self, **kwargs) -> ResultSet:
        """Return NCM activity log entries."""
        return self._get_collection("activity_logs", kwargs)

    def get_alerts(self, **kwargs) -> ResultSet:
        return self._get_collection("alerts", kwargs)

    def get_router_alerts(self, **kwargs) -> ResultSet:
        """Return the history of device alerts.

        Alerts must be enabled in NCM (Alerts -> Settings) to be recorded.
        The ``info`` section of an alert depends on the device firmware.
        """
        return self._get_collection("router_alerts", kwargs)

    def get_router_alerts_last_24hrs(
        self, tzoffset_hrs: int = 0, **kwargs
    ) -> ResultSet:
        """Return device alerts of the past 24 hours.

        :param tzoffset_hrs: Offset from UTC of the local timezone
        :type tzoffset_hrs: int
        :param kwargs: ``router`` or ``router__in`` filters
        :return: Alerts ordered by creation time
        :rtype: ResultSet
        """
        start, end = last_24hrs_window(tzoffset_hrs)
        return self._router_alerts_between(start, end, kwargs)

    def get_router_alerts_for_date(
        self, date: str, tzoffset_hrs: int = 0, **kwargs
    ) -> ResultSet:
        """Return device alerts of one calendar day.

        :param date: Day in ``YYYY-mm-dd`` format
        :type date: str
        :param tzoffset_hrs: Offset from UTC of the local timezone
        :type tzoffset_hrs: int
        :param kwargs: ``router`` or ``router__in`` filters
        :return: Alerts ordered by creation time
        :rtype: ResultSet
        """
        start, end = day_window(date, tzoffset_hrs)
        return self._router_alerts_between(start, end, kwargs)

    def _router_alerts_between(
        self, start: str, end: str, kwargs: Mapping[str, Any]
    ) -> ResultSet:
        return self._get_collection(
            "router_alerts",
            kwargs,
            allowed_params=("router", "router__in"),
            fixed_params={
                "created_at__lt": end,
                "created_at__gt": start,
                "order_by": "created_at_timeuuid",
                "limit": 500,
            },
        )

    def get_router_logs(self, router_id, **kwargs) -> ResultSet:
        """Return the event log of a router.

        Device logs must be enabled in the group settings to be recorded.

        :param router_id: ID of the router
        :param kwargs: Filters allowed for router logs
        :return: Log entries
        :rtype: ResultSet
        """
        return self._get_collection("router_logs", kwargs, scope_id=router_id)

    def get_router_logs_last_24hrs(self, router_id, tzoffset_hrs: int = 0) -> ResultSet:
        start, end = last_24hrs_window(tzoffset_hrs)
        return self._router_logs_between(router_id, start, end)

    def get_router_logs_for_date(
        self, router_id, date: str, tzoffset_hrs: int = 0
    ) -> ResultSet:
        start, end = day_window(date, tzoffset_hrs)
        return self._router_logs_between(router_id, start, end)

    def _router_logs_between(self, router_id, start: str, end: str) -> ResultSet:
        return self._get_collection(
            "router_logs",
            {},
            scope_id=router_id,
            fixed_params={
                "created_at__lt": end,
                "created_at__gt": start,
                "order_by": "created_at_timeuuid",
                "limit": 500,
            },
        )

    def get_router_state_samples(self, **kwargs) -> ResultSet:
        """Return connection state samples between devices and NCM."""
        return self._get_collection("router_state_samples", kwargs)

    def get_router_stream_usage_samples(self, **kwargs) -> ResultSet:
        return self._get_collection("router_stream_usage_samples", kwargs)

    def get_failovers(self, **kwargs) -> ResultSet:
        """Return failover events for a device, group or account."""
        return self._get_collection("failovers", kwargs)

    # ------------------------------------------------------------------
    # Configuration managers
    # ------------------------------------------------------------------

    def get_configuration_managers(self, **kwargs) -> ResultSet:
        """Return configuration managers.

        Each device has one configuration manager controlling its config
        sync.
        """
        return self._get_collection("configuration_managers", kwargs)

    def get_configuration_manager_id(self, router_id, **kwargs):
        """Return the configuration manager ID of a router.

        :param router_id: ID of the router
        :return: Configuration manager ID
        :raises IndexError: If the router has no configuration manager
        """
        endpoint = get_endpoint("configuration_managers")
        allowed = endpoint.allowed_params - {"fields"}
        return self._get_collection(
            "configuration_managers",
            kwargs,
            allowed_params=allowed,
            fixed_params={"router.id": router_id, "fields": "id"},
        )[0]["id"]

    def update_configuration_managers(
        self, configman_id, configman_json: Dict[str, Any]
    ) -> Any:
        """Replace a configuration manager.

        :param configman_id: ID of the configuration manager
        :param configman_json: Body holding the ``configuration`` field
        :return: Normalised response value
        """
        return self._send(
            "PUT",
            self._url("configuration_managers", configman_id),
            "Configuration Manager",
            configman_json,
        )

    def patch_configuration_managers(
        self, router_id, configman_json: Dict[str, Any]
    ) -> Any:
        """Patch the configuration manager of a router.

        :param router_id: ID of the router
        :param configman_json: Body holding the ``configuration`` field
        :return: Normalised response value
        """
        configman_id = self.get_configuration_manager_id(router_id)
        return self._send(
            "PATCH",
            self._url("configuration_managers", configman_id),
            "Configuration Manager",
            configman_json,
        )

    def patch_group_configuration(self, group_id, config_json: Dict[str, Any]) -> Any:
        return self._send(
            "PATCH", self._url("groups", group_id), "Configuration Manager", config_json
        )

    def copy_router_configuration(self, src_router_id, dst_router_id) -> Any:
        """Copy the configuration of one router onto another.

        Secrets are not copied since the API only returns them masked.

        :param src_router_id: Router to copy from
        :param dst_router_id: Router to copy to
        :return: ``"Success"`` when the API accepts the patch (HTTP 202)
        """
        src_config = self.get_configuration_managers(
            router=src_router_id, fields="configuration"
        )[0]
        dst_configman = self.get_configuration_managers(router=dst_router_id)[0]
        return self._send(
            "PATCH",
            self._url("configuration_managers", dst_configman["id"]),
            "Configuration Manager",
            strip_masked_secrets(src_config),
        )

    def set_lan_ip_address(
        self, router_id, lan_ip: str, netmask: Optional[str] = None
    ) -> Any:
        """Set the address of the primary LAN of a router.

        :param router_id: ID of the router
        :param lan_ip: LAN IP address, e.g. ``192.168.1.1``
        :param netmask: Optional netmask
        :return: Normalised response value
        """
        lan = {"ip_address": lan_ip}
        if netmask:
            lan["netmask"] = netmask
        payload = {"configuration": [{"lan": {"0": lan}}, []]}
        configman_id = self.get_configuration_manager_id(router_id)
        return self._send(
            "PATCH",
            self._url("configuration_managers", configman_id),
            "LAN IP Address",
            payload,
        )

    # ------------------------------------------------------------------
    # Device apps
    # ------------------------------------------------------------------

    def get_device_app_bindings(self, **kwargs) -> ResultSet:
        return self._get_collection("device_app_bindings", kwargs)

    def get_device_app_states(self, **kwargs) -> ResultSet:
        return self._get_collection("device_app_states", kwargs)

    def get_device_app_versions(self, **kwargs) -> ResultSet:
        return self._get_collection("device_app_versions", kwargs)

    def get_device_apps(self, **kwargs) -> ResultSet:
        return self._get_collection("device_apps", kwargs)

    # ------------------------------------------------------------------
    # Products and firmwares
    # ------------------------------------------------------------------

    def get_products(self, **kwargs) -> ResultSet:
        return self._get_collection("products", kwargs)

    def get_product_by_id(self, product_id) -> Dict[str, Any]:
        return self.get_products(id=product_id)[0]

    def get_product_by_name(self, product_name: str) -> Dict[str, Any]:
        """Return the product with a model name, e.g. ``IBR200``.

        :raises RecordNotFoundError: If no product has that name
        """
        for product in self.get_products():
            if product.get("name") == product_name:
                return product
        raise RecordNotFoundError("Invalid Product Name", resource="products")

    def get_firmwares(self, **kwargs) -> ResultSet:
        return self._get_collection("firmwares", kwargs)

    def get_firmware_for_productid_by_version(
        self, product_id, firmware_name: str
    ) -> Dict[str, Any]:
        """Return the firmware of a product ID with a version, e.g. ``7.2.0``.

        :raises RecordNotFoundError: If the product has no such firmware
        """
        product_url = self._url("products", product_id)
        for firmware in self.get_firmwares(version=firmware_name):
            if firmware.get("product") == product_url:
                return firmware
        raise RecordNotFoundError("Invalid Firmware Version", resource="firmwares")

    def get_firmware_for_productname_by_version(
        self, product_name: str, firmware_name: str
    ) -> Dict[str, Any]:
        product_id = self.get_product_by_name(product_name)["id"]
        return self.get_firmware_for_productid_by_version(product_id, firmware_name)

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def get_groups(self, **kwargs) -> ResultSet:
        return self._get_collection("groups", kwargs)

    def get_group_by_id(self, group_id) -> Dict[str, Any]:
        return self.get_groups(id=group_id)[0]

    def get_group_by_name(self, group_name: str) -> Dict[str, Any]:
        return self.get_groups(name=group_name)[0]

    def create_group_by_parent_id(
        self,
        parent_account_id,
        group_name: str,
        product_name: str,
        firmware_version: str,
    ) -> Any:
        """Create a group for one product model and firmware.

        Example::

            client.create_group_by_parent_id("123456", "My Group", "IBR200", "7.2.0")

        :param parent_account_id: ID of the owning account
        :param group_name: Name for the new group
        :param product_name: Product model, e.g. ``IBR200``
        :param firmware_version: Target firmware, e.g. ``7.2.0``
        :return: Normalised response value
        :raises RecordNotFoundError: If the product or firmware is unknown
        """
        product = self.get_product_by_name(product_name)
        firmware = self.get_firmware_for_productid_by_version(
            product["id"], firmware_version
        )
        payload = {
            "account": "/api/v1/accounts/{0}/".format(parent_account_id),
            "name": str(group_name),
            "product": str(product["resource_url"]),
            "target_firmware": str(firmware["resource_url"]),
        }
        return self._send("POST", self._url("groups"), "Group", payload)

    def create_group_by_parent_name(
        self,
        parent_account_name: str,
        group_name: str,
        product_name: str,
        firmware_version: str,
    ) -> Any:
        return self.create_group_by_parent_id(
            self.get_account_by_name(parent_account_name)["id"],
            group_name,
            product_name,
            firmware_version,
        )

    def rename_group_by_id(self, group_id, new_group_name: str) -> Any:
        return self._send(
            "PUT", self._url("groups", group_id), "Group", {"name": str(new_group_name)}
        )

    def rename_group_by_name(
        self, existing_group_name: str, new_group_name: str
    ) -> Any:
        return self.rename_group_by_id(
            self.get_group_by_name(existing_group_name)["id"], new_group_name
        )

    def delete_group_by_id(self, group_id) -> Any:
        return self._send("DELETE", self._url("groups", group_id), "Group")

    def delete_group_by_name(self, group_name: str) -> Any:
        return self.delete_group_by_id(self.get_group_by_name(group_name)["id"])

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def get_historical_locations(self, router_id, **kwargs) -> ResultSet:
        """Return the locations a device has visited."""
        return self._get_collection("historical_locations", kwargs, scope_id=router_id)

    def get_historical_locations_for_date(
        self, router_id, date: str, tzoffset_hrs: int = 0, limit="all", **kwargs
    ) -> ResultSet:
        """Return the locations a device visited on one calendar day.

        :param router_id: ID of the router
        :param date: Day in ``YYYY-mm-dd`` format
        :type date: str
        :param tzoffset_hrs: Offset from UTC of the local timezone
        :type tzoffset_hrs: int
        :param limit: Number of records, ``"all"`` by default
        :return: Location records
        :rtype: ResultSet
        """
        start, end = day_window(date, tzoffset_hrs)
        return self._get_collection(
            "historical_locations",
            kwargs,
            scope_id=router_id,
            fixed_params={
                "created_at__lte": end,
                "created_at__gt": start,
                "limit": limit,
            },
        )

    def get_locations(self, **kwargs) -> ResultSet:
        return self._get_collection("locations", kwargs)

    def create_location(
        self, account_id, latitude: float, longitude: float, router_id
    ) -> Any:
        """Create a manual location and apply it to a router.

        :param account_id: Account owning the location
        :param latitude: Degrees north or south of the Equator
        :param longitude: Degrees east or west of the prime meridian
        :param router_id: Router the location belongs to
        :return: Normalised response value
        """
        payload = {
            "account": self._url("accounts", account_id),
            "accuracy": 0,
            "latitude": latitude,
            "longitude": longitude,
            "method": "manual",
            "router": self._url("routers", router_id),
        }
        return self._send("POST", self._url("locations"), "Locations", payload)

    def delete_location_for_router(self, router_id) -> Any:
        """Delete the location of a router.

        :return: Normalised response value, or ``"NO LOCATION FOUND"``
        """
        locations = self.get_locations(router=router_id)
        if not locations:
            return NO_LOCATION_FOUND
        return self._send(
            "DELETE", self._url("locations", locations[0]["id"]), "Locations"
        )

    # ------------------------------------------------------------------
    # Net devices
    # ------------------------------------------------------------------

    def get_net_device_health(self, **kwargs) -> ResultSet:
        """Return cellular health scores by device."""
        return self._get_collection("net_device_health", kwargs)

    def get_net_device_metrics(self, **kwargs) -> ResultSet:
        """Return the latest signal and usage data of net devices.

        Cheaper than the raw sample tables when many devices are queried.
        """
        return self._get_collection("net_device_metrics", kwargs)

    def get_net_device_signal_samples(self, **kwargs) -> ResultSet:
        return self._get_collection("net_device_signal_samples", kwargs)

    def get_net_device_usage_samples(self, **kwargs) -> ResultSet:
        return self._get_collection("net_device_usage_samples", kwargs)

    def get_net_devices(self, **kwargs) -> ResultSet:
        return self._get_collection("net_devices", kwargs)

    def get_net_devices_for_router(self, router_id, **kwargs) -> ResultSet:
        return self.get_net_devices(router=router_id, **kwargs)

    def get_net_devices_for_router_by_mode(
        self, router_id, mode: str, **kwargs
    ) -> ResultSet:
        """Return net devices of a router with a given mode (``lan``/``wan``)."""
        return self.get_net_devices(router=router_id, mode=mode, **kwargs)

    def get_net_devices_metrics_for_wan(self, **kwargs) -> ResultSet:
        """Return net device metrics for WAN interfaces only."""
        return self.get_net_device_metrics(
            net_device__in=self._net_device_ids(mode="wan"), **kwargs
        )

    def get_net_devices_metrics_for_mdm(self, **kwargs) -> ResultSet:
        """Return net device metrics for modem interfaces only."""
        return self.get_net_device_metrics(
            net_device__in=self._net_device_ids(is_asset=True), **kwargs
        )

    def _net_device_ids(self, **filters) -> List[Any]:
        return [device["id"] for device in self.get_net_devices(**filters)]

    # ------------------------------------------------------------------
    # Routers
    # ------------------------------------------------------------------

    def get_routers(self, **kwargs) -> ResultSet:
        """Return routers with their details."""
        return self._get_collection("routers", kwargs)

    def get_router_by_id(self, router_id, **kwargs) -> Dict[str, Any]:
        return self.get_routers(id=router_id, **kwargs)[0]

    def get_router_by_name(self, router_name: str, **kwargs) -> Dict[str, Any]:
        return self.get_routers(name=router_name, **kwargs)[0]

    def get_routers_for_account(self, account_id, **kwargs) -> ResultSet:
        return self.get_routers(account=account_id, **kwargs)

    def get_routers_for_group(self, group_id, **kwargs) -> ResultSet:
        return self.get_routers(group=group_id, **kwargs)

    def rename_router_by_id(self, router_id, new_router_name: str) -> Any:
        return self._send(
            "PUT",
            self._url("routers", router_id),
            "Router",
            {"name": str(new_router_name)},
        )

    def rename_router_by_name(
        self, existing_router_name: str, new_router_name: str
    ) -> Any:
        return self.rename_router_by_id(
            self.get_router_by_name(existing_router_name)["id"], new_router_name
        )

    def assign_router_to_group(self, router_id, group_id) -> Any:
        return self._send(
            "PUT",
            self._url("routers", router_id),
            "Routers",
            {"group": self._url("groups", group_id)},
        )

    def assign_router_to_account(self, router_id, account_id) -> Any:
        return self._send(
            "PUT",
            self._url("routers", router_id),
            "Routers",
            {"account": self._url("accounts", account_id)},
        )

    def delete_router_by_id(self, router_id) -> Any:
        return self._send("DELETE", self._url("routers", router_id), "Router")

    def delete_router_by_name(self, router_name: str) -> Any:
        return self.delete_router_by_id(self.get_router_by_name(router_name)["id"])

    def reboot_device(self, router_id) -> Any:
        return self._send(
            "POST",
            self._url("reboot_activity"),
            "Reboot Device",
            {"router": self._url("routers", router_id)},
        )

    def reboot_group(self, group_id) -> Any:
        return self._send(
            "POST",
            self._url("reboot_activity"),
            "Reboot Group",
            {"group": self._url("groups", group_id)},
        )

    def set_custom1(self, router_id, text: str) -> Any:
        """Set the Custom1 field of a router."""
        return self._send(
            "PUT",
            self._url("routers", router_id),
            "NCM Field Update",
            {"custom1": str(text)},
        )

    def set_custom2(self, router_id, text: str) -> Any:
        """Set the Custom2 field of a router."""
        return self._send(
            "PUT",
            self._url("routers", router_id),
            "NCM Field Update",
            {"custom2": str(text)},
        )

    # ------------------------------------------------------------------
    # Speed tests
    # ------------------------------------------------------------------

    def get_speed_test(self, speed_test_id) -> Any:
        """Return the state of a speed test job as reported by the API."""
        return self._send("GET", self._url("speed_test", speed_test_id), "Speed Test")

    def delete_speed_test(self, speed_test_id) -> Any:
        """Delete a speed test job.

        Tests already started on a router still finish.
        """
        return self._send(
            "DELETE", self._url("speed_test", speed_test_id), "Speed Test"
        )
