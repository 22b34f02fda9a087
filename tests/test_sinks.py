"""Tests for sinks."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from estate_market.config import KafkaConfig
from estate_market.exceptions import SinkError
from estate_market.models import Buyer, Event, Message, Property
from estate_market.sinks.console import ConsoleSink
from estate_market.sinks.json_file import JsonFileSink


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_init_default(self) -> None:
        sink = ConsoleSink()

        assert sink.pretty is True
        assert sink.max_records is None
        assert sink._counts == {}

    def test_write_batch_dict(self, capsys: pytest.CaptureFixture) -> None:
        """Test writing batch of dictionaries."""
        sink = ConsoleSink(pretty=False)

        sink.write_batch("test_entity", [{"id": 1}, {"id": 2}])
        captured = capsys.readouterr()

        assert "test_entity" in captured.out
        assert "2 records" in captured.out
        assert sink._counts["test_entity"] == 2

    def test_write_batch_dataclass(
        self, capsys: pytest.CaptureFixture, listed_property: Property
    ) -> None:
        """Test writing batch of dataclass objects."""
        sink = ConsoleSink(pretty=True)

        sink.write_batch("properties", [listed_property])
        captured = capsys.readouterr()

        assert listed_property.property_id in captured.out
        assert "Bright apartment" in captured.out

    def test_max_records(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(max_records=2)

        sink.write_batch("offers", [{"id": i} for i in range(5)])
        captured = capsys.readouterr()

        assert "... and 3 more records" in captured.out
        assert sink._counts["offers"] == 5

    def test_close_summary(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink()
        sink.write_batch("offers", [{"id": 1}])
        sink.write_batch("offers", [{"id": 2}])
        capsys.readouterr()

        sink.close()
        captured = capsys.readouterr()

        assert "Console Sink Summary" in captured.out
        assert "offers: 2 records" in captured.out


class TestJsonFileSink:
    """Tests for JsonFileSink."""

    def test_write_batch(self, tmp_path: Path, listed_property: Property) -> None:
        sink = JsonFileSink(tmp_path, pretty=True)

        sink.write_batch("properties", [listed_property])

        data = json.loads((tmp_path / "properties.json").read_text(encoding="utf-8"))
        assert len(data) == 1
        assert data[0]["property_id"] == listed_property.property_id
        assert data[0]["price"] == "850000"

    def test_creates_directory(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "nested" / "out"

        JsonFileSink(output_dir)

        assert output_dir.is_dir()

    def test_overwrites_previous_batch(self, tmp_path: Path) -> None:
        sink = JsonFileSink(tmp_path)
        sink.write_batch("offers", [{"id": 1}, {"id": 2}])

        sink.write_batch("offers", [{"id": 3}])

        data = json.loads((tmp_path / "offers.json").read_text(encoding="utf-8"))
        assert data == [{"id": 3}]
        assert sink._counts["offers"] == 1

    def test_unusable_directory(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file.txt"
        blocker.write_text("x")

        with pytest.raises(SinkError, match="Cannot create output directory"):
            JsonFileSink(blocker)

    def test_close_summary(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        sink = JsonFileSink(tmp_path)
        sink.write_batch("buyers", [{"id": 1}])

        sink.close()
        captured = capsys.readouterr()

        assert str(tmp_path) in captured.out
        assert "buyers: 1 records" in captured.out


class TestProducerStats:
    """Tests for ProducerStats."""

    def test_success_rate(self) -> None:
        from estate_market.sinks.kafka import ProducerStats

        assert ProducerStats().success_rate == 0.0
        assert ProducerStats(sent=4, delivered=3, failed=1).success_rate == 0.75


class TestKafkaSinkMocked:
    """Tests for KafkaSink using mocks (no actual Kafka connection)."""

    @patch("estate_market.sinks.kafka.Producer")
    def test_init_with_string(self, mock_producer: MagicMock) -> None:
        from estate_market.sinks.kafka import KafkaSink

        sink = KafkaSink("localhost:9092")

        assert sink.config.bootstrap_servers == "localhost:9092"
        settings = mock_producer.call_args[0][0]
        assert settings["bootstrap.servers"] == "localhost:9092"
        assert settings["acks"] == "all"

    @patch("estate_market.sinks.kafka.Producer")
    def test_init_with_kafka_config(self, mock_producer: MagicMock) -> None:
        from estate_market.sinks.kafka import KafkaSink

        config = KafkaConfig(bootstrap_servers="kafka:9092", acks="1", topic_prefix="prod.market")

        sink = KafkaSink(config)

        mock_producer.assert_called_once_with(config.to_dict())
        assert sink.topic_for("offers") == "prod.market.offers"

    @patch("estate_market.sinks.kafka.Producer")
    def test_topic_for(self, mock_producer: MagicMock) -> None:
        from estate_market.sinks.kafka import KafkaSink

        assert KafkaSink("localhost:9092").topic_for("offers") == "dev.market.offers"

    @patch("estate_market.sinks.kafka.Producer")
    def test_send_property_keyed_by_id(
        self, mock_producer: MagicMock, listed_property: Property
    ) -> None:
        from estate_market.sinks.kafka import KafkaSink

        sink = KafkaSink("localhost:9092")
        sink.send("properties", listed_property)

        kwargs = mock_producer.return_value.produce.call_args.kwargs
        assert kwargs["topic"] == "dev.market.properties"
        assert kwargs["key"] == listed_property.property_id.encode("utf-8")
        assert json.loads(kwargs["value"])["title"] == "Bright apartment"
        assert sink.stats.sent == 1

    @patch("estate_market.sinks.kafka.Producer")
    def test_send_buyer_keyed_by_user_id(self, mock_producer: MagicMock, buyer: Buyer) -> None:
        from estate_market.sinks.kafka import KafkaSink

        KafkaSink("localhost:9092").send("buyers", buyer)

        kwargs = mock_producer.return_value.produce.call_args.kwargs
        assert kwargs["key"] == b"buyer-test-001"

    @patch("estate_market.sinks.kafka.Producer")
    def test_send_event_keyed_by_subject(self, mock_producer: MagicMock) -> None:
        from datetime import datetime

        from estate_market.sinks.kafka import KafkaSink

        event = Event(
            event_id="evt-1",
            event_type="offer.placed",
            event_time=datetime.now(),
            source="estate-market",
            subject="offer-001",
            data={},
        )
        KafkaSink("localhost:9092").send("events", event)

        kwargs = mock_producer.return_value.produce.call_args.kwargs
        assert kwargs["key"] == b"offer-001"

    @patch("estate_market.sinks.kafka.Producer")
    def test_send_message_keyed_by_property(self, mock_producer: MagicMock) -> None:
        from estate_market.sinks.kafka import KafkaSink

        message = Message.outbound("buyer-001", "seller-001", "Visit", "Hello", "prop-001")
        KafkaSink("localhost:9092").send("messages", message)

        kwargs = mock_producer.return_value.produce.call_args.kwargs
        assert kwargs["topic"] == "dev.market.messages"
        assert kwargs["key"] == b"prop-001"
        assert json.loads(kwargs["value"])["direction"] == "SENT"

    @patch("estate_market.sinks.kafka.Producer")
    def test_unknown_entity_type_has_no_key(self, mock_producer: MagicMock) -> None:
        from estate_market.sinks.kafka import KafkaSink

        KafkaSink("localhost:9092").send("notes", {"subject": "hi"})

        kwargs = mock_producer.return_value.produce.call_args.kwargs
        assert kwargs["key"] is None

    @patch("estate_market.sinks.kafka.Producer")
    def test_produce_failure_raises_sink_error(self, mock_producer: MagicMock) -> None:
        from estate_market.sinks.kafka import KafkaSink

        mock_producer.return_value.produce.side_effect = BufferError("queue full")
        sink = KafkaSink("localhost:9092")

        with pytest.raises(SinkError, match="queue full"):
            sink.send("offers", {"property_id": "p-1"})
        assert sink.stats.sent == 0

    @patch("estate_market.sinks.kafka.Producer")
    def test_delivery_callback(self, mock_producer: MagicMock) -> None:
        from estate_market.sinks.kafka import KafkaSink

        sink = KafkaSink("localhost:9092")
        msg = MagicMock()
        msg.topic.return_value = "dev.market.offers"
        msg.partition.return_value = 0
        msg.offset.return_value = 10

        sink._delivery_callback(None, msg)
        sink._delivery_callback("broker down", msg)

        assert sink.stats.delivered == 1
        assert sink.stats.failed == 1

    @patch("estate_market.sinks.kafka.Producer")
    def test_write_batch_flushes(self, mock_producer: MagicMock) -> None:
        from estate_market.sinks.kafka import KafkaSink

        mock_producer.return_value.flush.return_value = 0
        sink = KafkaSink("localhost:9092")

        sink.write_batch("offers", [{"property_id": "p-1"}, {"property_id": "p-2"}])

        assert mock_producer.return_value.produce.call_count == 2
        mock_producer.return_value.flush.assert_called_once()
        assert sink.stats.sent == 2

    @patch("estate_market.sinks.kafka.Producer")
    def test_flush_warns_on_remaining(
        self, mock_producer: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        from estate_market.sinks.kafka import KafkaSink

        mock_producer.return_value.flush.return_value = 3
        sink = KafkaSink("localhost:9092")

        sink.flush(timeout=1.0)

        assert "3 messages still queued" in caplog.text
