"""
Metric catalog: the selectable metrics of every service kind and the
tagged MetricSelection union that widgets carry.
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Sequence, Type, Union

from pydantic import BaseModel, Field


class ServiceKind(str, Enum):
    HYPERVISOR = "hypervisor"
    MEDIA_SERVER = "media_server"
    TORRENT_CLIENT = "torrent_client"
    DNS_FILTER = "dns_filter"


# ── Metrics per kind ──────────────────────────────────

class HypervisorMetric(str, Enum):
    CPU_PERCENT = "cpu_percent"
    MEMORY_USED_BYTES = "memory_used_bytes"
    MEMORY_PERCENT = "memory_percent"
    TOTAL_CONTAINERS = "total_containers"
    TOTAL_VMS = "total_vms"
    RUNNING_COUNT = "running_count"
    STOPPED_COUNT = "stopped_count"
    NET_UP_BPS = "net_up_bps"
    NET_DOWN_BPS = "net_down_bps"


class MediaServerMetric(str, Enum):
    TV_SHOWS_COUNT = "tv_shows_count"
    MOVIES_COUNT = "movies_count"
    USER_COUNT = "user_count"


class TorrentClientMetric(str, Enum):
    SEEDING_COUNT = "seeding_count"
    DOWNLOADING_COUNT = "downloading_count"
    UPLOAD_SPEED_BYTES_PER_SEC = "upload_speed_bytes_per_sec"
    DOWNLOAD_SPEED_BYTES_PER_SEC = "download_speed_bytes_per_sec"


class DnsFilterMetric(str, Enum):
    DNS_QUERIES_TODAY = "dns_queries_today"
    ADS_BLOCKED_TODAY = "ads_blocked_today"
    ADS_PERCENTAGE_TODAY = "ads_percentage_today"
    UNIQUE_CLIENTS = "unique_clients"
    QUERIES_FORWARDED = "queries_forwarded"
    QUERIES_CACHED = "queries_cached"
    DOMAINS_BEING_BLOCKED = "domains_being_blocked"
    GRAVITY_LAST_UPDATED_RELATIVE = "gravity_last_updated_relative"
    BLOCKING_STATUS = "blocking_status"


METRIC_CATALOG: Dict[ServiceKind, Type[Enum]] = {
    ServiceKind.HYPERVISOR: HypervisorMetric,
    ServiceKind.MEDIA_SERVER: MediaServerMetric,
    ServiceKind.TORRENT_CLIENT: TorrentClientMetric,
    ServiceKind.DNS_FILTER: DnsFilterMetric,
}


# ── Metric selection (tagged by kind) ─────────────────

class HypervisorSelection(BaseModel):
    type: Literal["hypervisor"] = "hypervisor"
    metrics: List[HypervisorMetric] = Field(default_factory=list)

    @property
    def kind(self) -> ServiceKind:
        return ServiceKind.HYPERVISOR


class MediaServerSelection(BaseModel):
    type: Literal["media_server"] = "media_server"
    metrics: List[MediaServerMetric] = Field(default_factory=list)

    @property
    def kind(self) -> ServiceKind:
        return ServiceKind.MEDIA_SERVER


class TorrentClientSelection(BaseModel):
    type: Literal["torrent_client"] = "torrent_client"
    metrics: List[TorrentClientMetric] = Field(default_factory=list)

    @property
    def kind(self) -> ServiceKind:
        return ServiceKind.TORRENT_CLIENT


class DnsFilterSelection(BaseModel):
    type: Literal["dns_filter"] = "dns_filter"
    metrics: List[DnsFilterMetric] = Field(default_factory=list)

    @property
    def kind(self) -> ServiceKind:
        return ServiceKind.DNS_FILTER


MetricSelection = Annotated[
    Union[HypervisorSelection, MediaServerSelection, TorrentClientSelection, DnsFilterSelection],
    Field(discriminator="type"),
]

_SELECTION_MODELS: Dict[ServiceKind, Type[BaseModel]] = {
    ServiceKind.HYPERVISOR: HypervisorSelection,
    ServiceKind.MEDIA_SERVER: MediaServerSelection,
    ServiceKind.TORRENT_CLIENT: TorrentClientSelection,
    ServiceKind.DNS_FILTER: DnsFilterSelection,
}


def selection_for(kind: ServiceKind, metrics: Sequence[Enum | str] = ()) -> MetricSelection:
    """Build the selection variant for ``kind``; metrics are validated against its catalog."""
    return _SELECTION_MODELS[kind](metrics=list(metrics))


def all_metrics(kind: ServiceKind) -> List[Enum]:
    """Every metric of a kind, in catalog order."""
    return list(METRIC_CATALOG[kind])
