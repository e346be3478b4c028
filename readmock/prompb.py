"""Protobuf message classes for the Prometheus remote-read schema (``prompb``).

Equivalent to the ``types.proto`` and ``remote.proto`` subset below, registered
in a private descriptor pool so it never clashes with another ``prometheus``
package loaded in the same process::

    syntax = "proto3";
    package prometheus;

    message Label        { string name = 1; string value = 2; }
    message Sample       { double value = 1; int64 timestamp = 2; }
    message TimeSeries   { repeated Label labels = 1; repeated Sample samples = 2; }
    message LabelMatcher { enum Type { EQ = 0; NEQ = 1; RE = 2; NRE = 3; }
                           Type type = 1; string name = 2; string value = 3; }
    message ReadHints    { int64 step_ms = 1; string func = 2; int64 start_ms = 3; int64 end_ms = 4;
                           repeated string grouping = 5; bool by = 6; int64 range_ms = 7; }
    message Query        { int64 start_timestamp_ms = 1; int64 end_timestamp_ms = 2;
                           repeated LabelMatcher matchers = 3; ReadHints hints = 4; }
    message ReadRequest  { enum ResponseType { SAMPLES = 0; STREAMED_XOR_CHUNKS = 1; }
                           repeated Query queries = 1; repeated ResponseType accepted_response_types = 2; }
    message QueryResult  { repeated TimeSeries timeseries = 1; }
    message ReadResponse { repeated QueryResult results = 1; }
"""
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_F = descriptor_pb2.FieldDescriptorProto
_REPEATED = _F.LABEL_REPEATED


def _message(file_proto, name, fields, enums=None):
    message = file_proto.message_type.add(name=name)
    for enum_name, values in (enums or {}).items():
        enum = message.enum_type.add(name=enum_name)
        for number, value_name in enumerate(values):
            enum.value.add(name=value_name, number=number)
    for field_name, number, field_type, *rest in fields:
        field = message.field.add(name=field_name, number=number, type=field_type, label=_F.LABEL_OPTIONAL)
        for extra in rest:
            if extra == _REPEATED:
                field.label = _REPEATED
            else:
                field.type_name = f".prometheus.{extra}"
    return message


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="prometheus/remote.proto", package="prometheus", syntax="proto3"
    )
    _message(file_proto, "Label", [
        ("name", 1, _F.TYPE_STRING),
        ("value", 2, _F.TYPE_STRING),
    ])
    _message(file_proto, "Sample", [
        ("value", 1, _F.TYPE_DOUBLE),
        ("timestamp", 2, _F.TYPE_INT64),
    ])
    _message(file_proto, "TimeSeries", [
        ("labels", 1, _F.TYPE_MESSAGE, "Label", _REPEATED),
        ("samples", 2, _F.TYPE_MESSAGE, "Sample", _REPEATED),
    ])
    _message(file_proto, "LabelMatcher", [
        ("type", 1, _F.TYPE_ENUM, "LabelMatcher.Type"),
        ("name", 2, _F.TYPE_STRING),
        ("value", 3, _F.TYPE_STRING),
    ], enums={"Type": ["EQ", "NEQ", "RE", "NRE"]})
    _message(file_proto, "ReadHints", [
        ("step_ms", 1, _F.TYPE_INT64),
        ("func", 2, _F.TYPE_STRING),
        ("start_ms", 3, _F.TYPE_INT64),
        ("end_ms", 4, _F.TYPE_INT64),
        ("grouping", 5, _F.TYPE_STRING, _REPEATED),
        ("by", 6, _F.TYPE_BOOL),
        ("range_ms", 7, _F.TYPE_INT64),
    ])
    _message(file_proto, "Query", [
        ("start_timestamp_ms", 1, _F.TYPE_INT64),
        ("end_timestamp_ms", 2, _F.TYPE_INT64),
        ("matchers", 3, _F.TYPE_MESSAGE, "LabelMatcher", _REPEATED),
        ("hints", 4, _F.TYPE_MESSAGE, "ReadHints"),
    ])
    _message(file_proto, "ReadRequest", [
        ("queries", 1, _F.TYPE_MESSAGE, "Query", _REPEATED),
        ("accepted_response_types", 2, _F.TYPE_ENUM, "ReadRequest.ResponseType", _REPEATED),
    ], enums={"ResponseType": ["SAMPLES", "STREAMED_XOR_CHUNKS"]})
    _message(file_proto, "QueryResult", [
        ("timeseries", 1, _F.TYPE_MESSAGE, "TimeSeries", _REPEATED),
    ])
    _message(file_proto, "ReadResponse", [
        ("results", 1, _F.TYPE_MESSAGE, "QueryResult", _REPEATED),
    ])
    return file_proto


_pool = descriptor_pool.DescriptorPool()
DESCRIPTOR = _pool.AddSerializedFile(_build_file().SerializeToString())


def _class(name):
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"prometheus.{name}"))


Label = _class("Label")
Sample = _class("Sample")
TimeSeries = _class("TimeSeries")
LabelMatcher = _class("LabelMatcher")
ReadHints = _class("ReadHints")
Query = _class("Query")
ReadRequest = _class("ReadRequest")
QueryResult = _class("QueryResult")
ReadResponse = _class("ReadResponse")
