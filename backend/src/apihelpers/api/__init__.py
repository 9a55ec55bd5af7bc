"""Request and response helpers for HTTP handlers."""

from apihelpers.api.body import MAX_BODY_BYTES
from apihelpers.api.body import read_json
from apihelpers.api.body import read_json_event
from apihelpers.api.envelope import Envelope
from apihelpers.api.params import ParamResult
from apihelpers.api.params import ParamSource
from apihelpers.api.params import QueryParams
from apihelpers.api.params import query_params
from apihelpers.api.params import read_bool
from apihelpers.api.params import read_csv
from apihelpers.api.params import read_float
from apihelpers.api.params import read_id
from apihelpers.api.params import read_int
from apihelpers.api.params import read_null_uuid
from apihelpers.api.params import read_optional_uuid
from apihelpers.api.params import read_string
from apihelpers.api.params import read_uuid
from apihelpers.api.params import route_params
from apihelpers.api.responses import app_error_response
from apihelpers.api.responses import error_response
from apihelpers.api.responses import json_response

__all__ = [
    "Envelope",
    "MAX_BODY_BYTES",
    "ParamResult",
    "ParamSource",
    "QueryParams",
    "app_error_response",
    "error_response",
    "json_response",
    "query_params",
    "read_bool",
    "read_csv",
    "read_float",
    "read_id",
    "read_int",
    "read_json",
    "read_json_event",
    "read_null_uuid",
    "read_optional_uuid",
    "read_string",
    "read_uuid",
    "route_params",
]
