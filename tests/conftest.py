import io

import pytest
import yaml

from protowire.bootstrap import deps
from protowire.bootstrap.config import loader
from protowire.core.codec.reader import ProtobufReader
from protowire.core.codec.writer import ProtobufWriter


@pytest.fixture
def writer() -> ProtobufWriter:
    return ProtobufWriter.buffer()


@pytest.fixture
def read_back():
    """Reader over whatever a writer produced so far."""
    def factory(writer: ProtobufWriter, **kwargs) -> ProtobufReader:
        return ProtobufReader(io.BytesIO(writer.getvalue()), **kwargs)

    return factory


@pytest.fixture
def clear_caches():
    loader.get_cli_args.cache_clear()
    deps.get_config.cache_clear()
    yield
    loader.get_cli_args.cache_clear()
    deps.get_config.cache_clear()


@pytest.fixture
def config_file(tmp_path, monkeypatch, clear_caches):
    """
    Write a YAML configuration and point PROTOWIRECONFIG at it, the way a
    library user selects a file without any command line.
    """
    file = tmp_path / "protowire.yaml"

    def write(data: dict):
        file.write_text(yaml.dump(data))
        monkeypatch.setenv("PROTOWIRECONFIG", str(file))
        return file

    return write


@pytest.fixture
def no_config_file(tmp_path, monkeypatch, clear_caches):
    monkeypatch.delenv("PROTOWIRECONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
