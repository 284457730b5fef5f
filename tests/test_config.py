# tests/test_config.py
import json
import logging
import os

from raster_proj.config import DEFAULT_CONFIG, Config, _default_config_path


def test_missing_file_gives_defaults(tmp_path):
    cfg = Config.load()
    assert cfg.path == str(tmp_path / "raster_proj.json")
    assert cfg["projection"] == DEFAULT_CONFIG["projection"]
    assert not os.path.exists(cfg.path)


def test_create_if_missing_writes_the_file():
    cfg = Config.load(create_if_missing=True)
    with open(cfg.path, encoding="utf-8") as f:
        assert json.load(f)["graticule"]["span_deg"] == DEFAULT_CONFIG["graticule"]["span_deg"]


def test_save_and_reload():
    cfg = Config.load()
    cfg["graticule"]["span_deg"] = 15
    cfg.save()
    assert cfg["graticule"]["span_deg"] == 15.0
    assert Config.load()["graticule"]["span_deg"] == 15.0


def test_save_logs_the_changed_keys(caplog):
    caplog.set_level(logging.INFO, logger="raster_proj.config")
    cfg = Config.load()
    cfg["preview"]["invert"] = True
    cfg["projection"]["family"] = "tmerc"
    cfg.save()
    assert "changed from defaults: ['preview', 'projection']" in caplog.text


def test_corrupt_file_is_backed_up(tmp_path):
    path = tmp_path / "raster_proj.json"
    path.write_text("{not json", encoding="utf-8")
    cfg = Config.load()
    assert cfg["projection"]["family"] == "aeqd"
    assert (tmp_path / "raster_proj.json.corrupt.bak").read_text(encoding="utf-8") == "{not json"


def test_bad_values_fall_back(tmp_path):
    (tmp_path / "raster_proj.json").write_text(json.dumps({
        "projection": {"family": "Mercator", "div_n": -5, "center_lat_deg": 120},
        "graticule": {"init_div_num": "abc", "threshold": "nan"},
        "logging": {"level": "loud"},
    }), encoding="utf-8")
    cfg = Config.load()
    assert cfg["projection"]["family"] == "aeqd"
    assert cfg["projection"]["div_n"] == 1
    assert cfg["projection"]["center_lat_deg"] == 90.0
    assert cfg["graticule"]["init_div_num"] == 8
    assert cfg["graticule"]["threshold"] == DEFAULT_CONFIG["graticule"]["threshold"]
    assert cfg["logging"]["level"] == "INFO"


def test_update_merges_and_validates():
    cfg = Config.load()
    cfg.update({"preview": {"invert": "yes"}, "projection": {"family": "LAEA"}})
    assert cfg["preview"]["invert"] is True
    assert cfg["preview"]["width_chars"] == 80
    assert cfg["projection"]["family"] == "laea"
    assert cfg.changed() == {"preview": {"invert": True}, "projection": {"family": "laea"}}


def test_defaults_are_not_shared():
    cfg = Config.load()
    cfg["projection"]["family"] = "tmerc"
    assert DEFAULT_CONFIG["projection"]["family"] == "aeqd"
    assert Config.load()["projection"]["family"] == "aeqd"


def test_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv("RASTER_PROJ_CONFIG", str(tmp_path / "elsewhere.json"))
    assert _default_config_path() == str(tmp_path / "elsewhere.json")
