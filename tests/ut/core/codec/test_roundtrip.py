import io
import math

import pytest

from protowire.core.codec.reader import ProtobufReader
from protowire.core.codec.varint import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN, UINT64_MAX
from protowire.core.codec.writer import ProtobufWriter
from protowire.core.models.wire import WireType
from tests.fake.fake_messages import Person, PersonV1, Team


@pytest.mark.ut
@pytest.mark.parametrize(
    "write, read, value, wire_type",
    [
        (ProtobufWriter.write_int32, ProtobufReader.read_int32, 42, WireType.VARINT),
        (ProtobufWriter.write_int32, ProtobufReader.read_int32, -1, WireType.VARINT),
        (ProtobufWriter.write_int32, ProtobufReader.read_int32, INT32_MIN, WireType.VARINT),
        (ProtobufWriter.write_int32, ProtobufReader.read_int32, INT32_MAX, WireType.VARINT),
        (ProtobufWriter.write_int64, ProtobufReader.read_int64, INT64_MAX, WireType.VARINT),
        (ProtobufWriter.write_int64, ProtobufReader.read_int64, INT64_MIN, WireType.VARINT),
        (ProtobufWriter.write_bool, ProtobufReader.read_bool, True, WireType.VARINT),
        (ProtobufWriter.write_float, ProtobufReader.read_float, 0.15625, WireType.FIXED32),
        (ProtobufWriter.write_double, ProtobufReader.read_double, 3.14159265, WireType.FIXED64),
        (ProtobufWriter.write_string, ProtobufReader.read_string, "hello", WireType.LEN),
        (ProtobufWriter.write_bytes, ProtobufReader.read_bytes, b"\x01\x02\x03\x04", WireType.LEN),
    ],
)
def test_scalar_round_trip(writer, read_back, write, read, value, wire_type):
    write(writer, 6, value)

    reader = read_back(writer)
    assert reader.advance()
    assert reader.field_number == 6
    assert reader.wire_type == wire_type
    assert read(reader) == value
    assert not reader.advance()


@pytest.mark.ut
def test_float_is_narrowed_to_single_precision(writer, read_back):
    writer.write_float(4, 3.14)

    reader = read_back(writer)
    reader.advance()
    assert reader.read_float() == pytest.approx(3.14, rel=1e-6)


@pytest.mark.ut
def test_special_floats_round_trip(writer, read_back):
    writer.write_double(1, math.inf)
    writer.write_float(2, -math.inf)
    writer.write_double(3, math.nan)

    reader = read_back(writer)
    reader.advance()
    assert reader.read_double() == math.inf
    reader.advance()
    assert reader.read_float() == -math.inf
    reader.advance()
    assert math.isnan(reader.read_double())


@pytest.mark.ut
@pytest.mark.parametrize("value", [0, 127, 128, 2 ** 14 - 1, 2 ** 63 - 1, UINT64_MAX])
def test_varint_boundaries_round_trip(writer, read_back, value):
    writer.write_tag(1, WireType.VARINT)
    writer.write_varint(value)

    reader = read_back(writer)
    reader.advance()
    assert reader.read_varint() == value


@pytest.mark.ut
def test_sequential_fields_decode_in_order(writer, read_back):
    writer.write_string(1, "Alice")
    writer.write_int32(2, 30)
    writer.write_bool(3, True)

    reader = read_back(writer)

    assert reader.advance()
    assert reader.field_number == 1
    assert reader.read_string() == "Alice"

    assert reader.advance()
    assert reader.field_number == 2
    assert reader.read_int32() == 30

    assert reader.advance()
    assert reader.field_number == 3
    assert reader.read_bool() is True

    assert reader.advance() is False


@pytest.mark.ut
def test_skipped_field_does_not_corrupt_the_next_one(writer, read_back):
    writer.write_int32(1, 100)
    writer.write_string(2, "skip me")
    writer.write_int32(3, 200)

    reader = read_back(writer)

    assert reader.advance()
    assert reader.field_number == 1
    assert reader.read_int32() == 100

    assert reader.advance()
    assert reader.field_number == 2
    reader.skip_field()

    assert reader.advance()
    assert reader.field_number == 3
    assert reader.read_int32() == 200


@pytest.mark.ut
def test_repeated_int32_accumulates_across_tags(writer, read_back):
    writer.write_repeated_int32(1, [10, 20, 30])

    reader = read_back(writer)
    results = []
    while reader.advance():
        assert reader.field_number == 1
        results.append(reader.read_int32())

    assert results == [10, 20, 30]


@pytest.mark.ut
def test_repeated_strings_keep_their_order(writer, read_back):
    writer.write_repeated_string(1, ["a", "", "c"])

    reader = read_back(writer)
    results = [reader.read_string() for _ in reader]
    assert results == ["a", "", "c"]


@pytest.mark.ut
def test_manually_framed_nested_message_reparses(writer, read_back):
    inner = ProtobufWriter.buffer()
    inner.write_string(1, "Bob")
    inner.write_int32(2, 25)
    payload = inner.getvalue()

    writer.write_tag(1, WireType.LEN)
    writer.write_varint(len(payload))
    writer.write_raw_bytes(payload)

    reader = read_back(writer)
    assert reader.advance()
    assert reader.field_number == 1
    assert reader.wire_type == WireType.LEN

    inner_reader = ProtobufReader.from_bytes(reader.read_bytes())
    assert inner_reader.advance()
    assert inner_reader.field_number == 1
    assert inner_reader.read_string() == "Bob"
    assert inner_reader.advance()
    assert inner_reader.field_number == 2
    assert inner_reader.read_int32() == 25
    assert not inner_reader.advance()


@pytest.mark.ut
def test_embedded_message_round_trip(writer, read_back):
    writer.write_message(1, Person("Bob", 25))

    reader = read_back(writer)
    reader.advance()
    assert reader.read_message(Person.parse_from) == Person("Bob", 25)


@pytest.mark.ut
def test_full_message_round_trip():
    team = Team(
        title="core",
        lead=Person("Ada", 36, ["ada@example.org"]),
        members=[Person("Bob", 25), Person("Eve", -3, ["e1", "e2"])],
        score=98.5,
        ratio=0.25,
        active=True,
        badge=b"\x00\xff",
        budget=-(2 ** 40),
    )

    sink = io.BytesIO()
    team.write_to(sink)
    sink.seek(0)

    assert Team.parse_from(sink) == team


@pytest.mark.ut
def test_unset_optional_fields_stay_unset():
    sink = io.BytesIO()
    Team(title=None, lead=None, badge=None).write_to(sink)
    sink.seek(0)

    team = Team.parse_from(sink)
    assert team.title is None
    assert team.lead is None
    assert team.badge is None


@pytest.mark.ut
def test_older_reader_skips_unknown_fields():
    sink = io.BytesIO()
    Person("Bob", 25, ["bob@example.org"]).write_to(sink)
    sink.seek(0)

    assert PersonV1.parse_from(sink) == PersonV1("Bob")
