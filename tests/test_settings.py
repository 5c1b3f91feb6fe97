from pathlib import Path

from config.settings import OUTPUT_PATH, SOURCE_A_PATH, load_conf


def test_defaults_without_env_file(tmp_path, monkeypatch):
    for name in ("SOURCE_A_PATH", "OUTPUT_PATH", "SHUFFLE_PARTS"):
        monkeypatch.delenv(name, raising=False)

    conf = load_conf(tmp_path / "missing.env")

    assert conf["SOURCE_A_PATH"] == SOURCE_A_PATH
    assert conf["OUTPUT_PATH"] == OUTPUT_PATH
    assert conf["SHUFFLE_PARTS"] == "4"


def test_env_file_overrides_defaults(tmp_path, monkeypatch):
    # register the variables so monkeypatch removes what load_dotenv sets
    for name in ("OUTPUT_PATH", "SHUFFLE_PARTS"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    env_file = tmp_path / ".env"
    env_file.write_text("OUTPUT_PATH=/tmp/trips/all_trips.csv\nSHUFFLE_PARTS=8\n")

    conf = load_conf(env_file)

    assert conf["OUTPUT_PATH"] == Path("/tmp/trips/all_trips.csv")
    assert conf["SHUFFLE_PARTS"] == "8"
