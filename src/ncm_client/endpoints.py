"""Catalog of NCM collection endpoints.

Each list operation of :class:`ncm_client.client.NcmClient` is described
by one :class:`EndpointSpec`: the collection path, the label used in
response notices, and the query parameters the API accepts for it.

A few collections only exist below one router. Their ``scope`` names the
filter that must be sent with every request; it is supplied by the client
and never taken from caller keyword arguments.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional

_SAMPLE_FILTERS = (
    "created_at",
    "created_at__lt",
    "created_at__gt",
    "created_at_timeuuid",
    "created_at_timeuuid__in",
    "created_at_timeuuid__gt",
    "created_at_timeuuid__gte",
    "created_at_timeuuid__lt",
    "created_at_timeuuid__lte",
    "order_by",
    "limit",
    "offset",
)


@dataclass(frozen=True)
class EndpointSpec:
    """Static description of one collection endpoint.

    :param name: Catalog key, also used by the command line
    :type name: str
    :param path: Path below the API base URL, without slashes
    :type path: str
    :param label: Human-readable name used in response notices
    :type label: str
    :param allowed_params: Query parameters the endpoint accepts
    :type allowed_params: FrozenSet[str]
    :param method: HTTP verb of the list operation
    :type method: str
    :param scope: Filter every request must carry, e.g. ``router``
    :type scope: Optional[str]
    """

    name: str
    path: str
    label: str
    allowed_params: FrozenSet[str]
    method: str = "GET"
    scope: Optional[str] = None

    def url(self, base_url: str) -> str:
        """Build the collection URL.

        Filters are always sent as request parameters, never baked into
        the URL.

        :param base_url: API base URL
        :type base_url: str
        :return: Absolute collection URL
        :rtype: str
        """
        return "{0}/{1}/".format(base_url.rstrip("/"), self.path)

    @property
    def in_filters(self) -> FrozenSet[str]:
        """Parameters that are chunked membership filters."""
        return frozenset(p for p in self.allowed_params if p.endswith("__in"))


def _spec(
    name: str, label: str, params: Iterable[str], scope: Optional[str] = None
) -> EndpointSpec:
    return EndpointSpec(
        name=name,
        path=name,
        label=label,
        allowed_params=frozenset(params),
        scope=scope,
    )


ENDPOINTS: Dict[str, EndpointSpec] = {
    spec.name: spec
    for spec in (
        _spec(
            "accounts",
            "Accounts",
            ("account", "account__in", "id", "id__in", "name", "name__in",
             "expand", "limit", "offset"),
        ),
        _spec(
            "activity_logs",
            "Activity Logs",
            ("account", "created_at__exact", "created_at__lt", "created_at__lte",
             "created_at__gt", "created_at__gte", "action__timestamp__exact",
             "action__timestamp__lt", "action__timestamp__lte",
             "action__timestamp__gt", "action__timestamp__gte", "actor__id",
             "object__id", "action__id__exact", "actor__type", "action__type",
             "object__type", "order_by", "limit"),
        ),
        _spec(
            "alerts",
            "Alerts",
            ("account", "created_at", "created_at_timeuuid", "detected_at",
             "friendly_info", "info", "router", "type", "order_by", "limit",
             "offset"),
        ),
        _spec(
            "configuration_managers",
            "Configuration Managers",
            ("account", "account__in", "fields", "id", "id__in", "router",
             "router__in", "synched", "suspended", "expand", "limit", "offset"),
        ),
        _spec(
            "device_app_bindings",
            "Device App Bindings",
            ("account", "account__in", "group", "group__in", "app_version",
             "app_version__in", "id", "id__in", "state", "state__in", "expand",
             "limit", "offset"),
        ),
        _spec(
            "device_app_states",
            "Device App States",
            ("account", "account__in", "router", "router__in", "app_version",
             "app_version__in", "id", "id__in", "state", "state__in", "expand",
             "limit", "offset"),
        ),
        _spec(
            "device_app_versions",
            "Device App Versions",
            ("account", "account__in", "app", "app__in", "id", "id__in", "state",
             "state__in", "expand", "limit", "offset"),
        ),
        _spec(
            "device_apps",
            "Device Apps",
            ("account", "account__in", "name", "name__in", "id", "id__in", "uuid",
             "uuid__in", "expand", "order_by", "limit", "offset"),
        ),
        _spec(
            "failovers",
            "Failovers",
            ("account_id", "group_id", "router_id", "started_at", "ended_at",
             "order_by", "limit", "offset"),
        ),
        _spec(
            "firmwares",
            "Firmwares",
            ("id", "id__in", "version", "version__in", "limit", "offset"),
        ),
        _spec(
            "groups",
            "Groups",
            ("account", "account__in", "id", "id__in", "name", "name__in",
             "expand", "limit", "offset"),
        ),
        _spec(
            "historical_locations",
            "Historical Locations",
            ("created_at__gt", "created_at_timeuuid__gt", "created_at__lte",
             "fields", "limit", "offset"),
            scope="router",
        ),
        _spec("locations", "Locations", ("id", "id__in", "router", "limit", "offset")),
        _spec("net_device_health", "Net Device Health", ("net_device",)),
        _spec(
            "net_device_metrics",
            "Net Device Metrics",
            ("net_device", "net_device__in", "update_ts__lt", "update_ts__gt",
             "limit", "offset"),
        ),
        _spec(
            "net_device_signal_samples",
            "Net Device Signal Samples",
            ("net_device", "net_device__in") + _SAMPLE_FILTERS,
        ),
        _spec(
            "net_device_usage_samples",
            "Net Device Usage Samples",
            ("net_device", "net_device__in") + _SAMPLE_FILTERS,
        ),
        _spec(
            "net_devices",
            "Net Devices",
            ("account", "account__in", "connection_state", "connection_state__in",
             "id", "id__in", "is_asset", "ipv4_address", "mode", "mode__in",
             "router", "router__in", "expand", "limit", "offset"),
        ),
        _spec("products", "Products", ("id", "id__in", "limit", "offset")),
        _spec(
            "router_alerts",
            "Router Alerts",
            ("router", "router__in") + _SAMPLE_FILTERS,
        ),
        _spec("router_logs", "Router Logs", _SAMPLE_FILTERS, scope="router"),
        _spec(
            "router_state_samples",
            "Router State Samples",
            ("router", "router__in") + _SAMPLE_FILTERS,
        ),
        _spec(
            "router_stream_usage_samples",
            "Router Stream Usage Samples",
            ("router", "router__in") + _SAMPLE_FILTERS,
        ),
        _spec(
            "routers",
            "Routers",
            ("account", "account__in", "fields", "group", "group__in", "id",
             "id__in", "ipv4_address", "ipv4_address__in", "mac", "mac__in",
             "name", "name__in", "state", "state__in", "state_updated_at__lt",
             "state_updated_at__gt", "updated_at__lt", "updated_at__gt", "expand",
             "order_by", "limit", "offset"),
        ),
    )
}


def get_endpoint(name: str) -> EndpointSpec:
    """Look up an endpoint by catalog name.

    :param name: Catalog key, e.g. ``"routers"``
    :type name: str
    :return: The endpoint description
    :rtype: EndpointSpec
    :raises KeyError: If no endpoint has that name
    """
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise KeyError("Unknown endpoint: {0}".format(name)) from None
