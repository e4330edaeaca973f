import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scoundrel.config import ConfigError, Settings


def test_missing_file_uses_defaults(tmp_path: Path) -> None:
    settings = Settings.load(tmp_path / "absent.yaml", environ={})

    assert settings == Settings()
    assert settings.max_health == 20
    assert settings.port == 8080


def test_bundled_settings_file_loads() -> None:
    settings = Settings.load(ROOT / "data" / "scoundrel.yaml", environ={})

    assert settings.max_health == 20
    assert settings.cors_origin == "*"


def test_yaml_section_is_read(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("scoundrel:\n  max_health: 30\n  port: 9000\n  host: 0.0.0.0\n", encoding="utf-8")

    settings = Settings.load(path, environ={})

    assert settings.max_health == 30
    assert settings.port == 9000
    assert settings.host == "0.0.0.0"
    assert settings.log_level == "INFO"


def test_environment_overrides_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("max_health: 30\nport: 9000\n", encoding="utf-8")

    settings = Settings.load(
        environ={
            "SCOUNDREL_CONFIG": str(path),
            "PORT": "5000",
            "SCOUNDREL_LOG_LEVEL": "debug",
        }
    )

    assert settings.max_health == 30
    assert settings.port == 5000
    assert settings.log_level == "debug"


@pytest.mark.parametrize(
    "content",
    [
        "scoundrel: [\n",
        "- just\n- a list\n",
        "scoundrel:\n  colour: red\n",
        "scoundrel:\n  max_health: lots\n",
        "scoundrel:\n  max_health: 0\n",
    ],
)
def test_bad_files_raise_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        Settings.load(path, environ={})

    assert excinfo.value.path == path
    assert str(path) in str(excinfo.value)


def test_bad_environment_values(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        Settings.load(tmp_path / "absent.yaml", environ={"PORT": "http"})
    with pytest.raises(ConfigError):
        Settings.load(tmp_path / "absent.yaml", environ={"SCOUNDREL_LOG_LEVEL": "loud"})


def test_settings_validation() -> None:
    with pytest.raises(ConfigError):
        Settings(port=70000)
    assert logging.getLevelName(Settings(log_level="warning").log_level.upper()) == logging.WARNING
