from .cart import Cart
from .clients.base import RemoteRecordClient
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    EmptyCartError,
    MalformedResponseError,
    NoActiveConfigError,
    NoOpenSessionError,
    OdxError,
    PreconditionError,
    RemoteAccessError,
    RemoteError,
    RemoteMissingError,
    RemoteValidationError,
    TransportError,
)
from .facade import PosServiceFacade, unwrap_error
from .field_values import extract_created_id
from .http_client import OdxProxyClient
from .models import KeywordRequest, RequestContext, ServerResponse
from .models_catalog import Partner, Product
from .models_pos import OrderDocument, OrderLine, OrderPayment, PosSession, SessionState
from .record_mapper import map_partner, map_partners, map_product, map_products
from .services import CatalogService, OrderSubmitter, SessionManager
from .telemetry import TelemetryEvent, TelemetryLogger, build_event

__all__ = [
    "Cart",
    "CatalogService",
    "ClientConfig",
    "ConfigError",
    "EmptyCartError",
    "KeywordRequest",
    "MalformedResponseError",
    "NoActiveConfigError",
    "NoOpenSessionError",
    "OdxError",
    "OdxProxyClient",
    "OrderDocument",
    "OrderLine",
    "OrderPayment",
    "OrderSubmitter",
    "Partner",
    "PosServiceFacade",
    "PosSession",
    "PreconditionError",
    "Product",
    "RemoteAccessError",
    "RemoteError",
    "RemoteMissingError",
    "RemoteRecordClient",
    "RemoteValidationError",
    "RequestContext",
    "ServerResponse",
    "SessionManager",
    "SessionState",
    "TelemetryEvent",
    "TelemetryLogger",
    "TransportError",
    "build_event",
    "extract_created_id",
    "load_config",
    "map_partner",
    "map_partners",
    "map_product",
    "map_products",
    "unwrap_error",
]
