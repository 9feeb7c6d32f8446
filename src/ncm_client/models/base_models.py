"""Pydantic models for the NCM client.

These models cover the few shapes the client itself depends on: the
credential set sent as request headers and the envelope of a paginated
collection response. Records inside a page are passed through as
decoded JSON, untouched.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import InvalidCredentialsError, MissingCredentialsError

# Order matters: the first absent header is the one reported.
CREDENTIAL_HEADERS = (
    "X-CP-API-ID",
    "X-CP-API-KEY",
    "X-ECM-API-ID",
    "X-ECM-API-KEY",
)


def missing_credential(headers: Mapping[str, Any]) -> Optional[str]:
    """Return the first credential header absent from ``headers``.

    :param headers: Header mapping to inspect
    :type headers: Mapping[str, Any]
    :return: Name of the missing header, or None when all are present
    :rtype: Optional[str]
    """
    for name in CREDENTIAL_HEADERS:
        if name not in headers:
            return name
    return None


class ApiKeys(BaseModel):
    """The four API keys every NCM request carries.

    :param cp_api_id: ``X-CP-API-ID`` header value
    :type cp_api_id: str
    :param cp_api_key: ``X-CP-API-KEY`` header value
    :type cp_api_key: str
    :param ecm_api_id: ``X-ECM-API-ID`` header value
    :type ecm_api_id: str
    :param ecm_api_key: ``X-ECM-API-KEY`` header value
    :type ecm_api_key: str
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    cp_api_id: str = Field(..., alias="X-CP-API-ID")
    cp_api_key: str = Field(..., alias="X-CP-API-KEY")
    ecm_api_id: str = Field(..., alias="X-ECM-API-ID")
    ecm_api_key: str = Field(..., alias="X-ECM-API-KEY")

    @classmethod
    def from_mapping(cls, api_keys: Any) -> "ApiKeys":
        """Validate a header mapping and build the key set.

        :param api_keys: Mapping keyed by credential header name
        :type api_keys: Any
        :return: Validated key set
        :rtype: ApiKeys
        :raises InvalidCredentialsError: If ``api_keys`` is not a mapping
        :raises MissingCredentialsError: If any of the four headers is absent
        """
        if not isinstance(api_keys, Mapping):
            raise InvalidCredentialsError()
        missing = missing_credential(api_keys)
        if missing:
            raise MissingCredentialsError(missing)
        return cls.model_validate(
            {name: str(api_keys[name]) for name in CREDENTIAL_HEADERS}
        )

    def as_headers(self) -> Dict[str, str]:
        """Return the keys as request headers."""
        return self.model_dump(by_alias=True)


class PageMeta(BaseModel):
    """Pagination metadata of a collection response.

    :param next: Absolute URL of the next page, absent on the last page
    :type next: Optional[str]
    """

    model_config = ConfigDict(extra="allow")

    next: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


class Page(BaseModel):
    """One decoded page of a collection endpoint.

    :param data: Records of this page, in server order
    :type data: List[Any]
    :param meta: Pagination metadata
    :type meta: PageMeta
    """

    model_config = ConfigDict(extra="allow")

    data: List[Any] = Field(default_factory=list)
    meta: PageMeta = Field(default_factory=PageMeta)

    @property
    def next_url(self) -> Optional[str]:
        return self.meta.next or None
