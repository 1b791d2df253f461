from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

DEFAULT_TLS_VERSION = "TLSv1.2"
WILDCARD_HOST = "*"


class NavigationRule(BaseModel):
    href: str
    minimum_tls_version: Optional[str] = None
    requires_forward_secrecy: Optional[str] = None


class AccessRule(BaseModel):
    origin: str
    minimum_tls_version: Optional[str] = None
    requires_forward_secrecy: Optional[str] = None

    def as_navigation(self) -> NavigationRule:
        return NavigationRule(
            href=self.origin,
            minimum_tls_version=self.minimum_tls_version,
            requires_forward_secrecy=self.requires_forward_secrecy,
        )


class ExceptionDomain(BaseModel):
    """Per-hostname ATS override.

    Only values that differ from the platform defaults are ever set; every
    other field stays ``None`` and is left out of the plist.
    """

    hostname: str
    allows_insecure_http_loads: Optional[bool] = Field(
        default=None, serialization_alias="NSExceptionAllowsInsecureHTTPLoads"
    )
    includes_subdomains: Optional[bool] = Field(
        default=None, serialization_alias="NSIncludesSubdomains"
    )
    minimum_tls_version: Optional[str] = Field(
        default=None, serialization_alias="NSExceptionMinimumTLSVersion"
    )
    requires_forward_secrecy: Optional[bool] = Field(
        default=None, serialization_alias="NSExceptionRequiresForwardSecrecy"
    )

    def merged(self, other: "ExceptionDomain") -> "ExceptionDomain":
        return self.model_copy(update=other.model_dump(exclude_none=True))

    def plist_fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"hostname"})


class TransportSecurityPolicy(BaseModel):
    allows_arbitrary_loads: Optional[bool] = None
    exception_domains: Optional[dict[str, ExceptionDomain]] = None

    def is_empty(self) -> bool:
        return not self.allows_arbitrary_loads and not self.exception_domains

    def to_plist(self) -> dict[str, Any]:
        ats: dict[str, Any] = {}
        if self.allows_arbitrary_loads:
            ats["NSAllowsArbitraryLoads"] = True
        if self.exception_domains:
            ats["NSExceptionDomains"] = {
                hostname: domain.plist_fields()
                for hostname, domain in self.exception_domains.items()
            }
        return ats


class Icon(BaseModel):
    src: str
    width: Optional[int] = None
    height: Optional[int] = None
    density: Optional[str] = None
    platform: Optional[str] = None
