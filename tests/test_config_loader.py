import json

import pytest

from adapters.config_loader import load_rotator_config, parse_config
from domain.errors import ConfigurationError

YAML_CONFIG = """
GenerateDays: 14
MaxDaysPerMonth: 8
MaxWeekendsPerMonth: 2
OncallCalendar: oncall
MailSender: rotator@example.org
AwayWords: [away, conference]
Oncallers:
  - {Order: 0, Code: AB, Email: ab@example.org, SlackID: U1}
  - {Order: 1, Code: cd, Email: cd@example.org}
"""


def test_load_yaml_config(tmp_path):
    path = tmp_path / "rotator.yaml"
    path.write_text(YAML_CONFIG, encoding="utf-8")
    config = load_rotator_config(path)
    assert config.generate_days == 14
    assert config.max_days_per_month == 8
    assert config.max_weekends_per_month == 2
    assert config.availability_calendar == "oncall"
    assert config.away_words == ["away", "conference"]
    assert config.mail_server == "localhost:25"
    roster = config.roster()
    assert roster.codes() == ["ab", "cd"]
    assert roster.by_code("ab").slack_id == "U1"
    assert roster.shadow.code == "xx"


def test_load_json_config_defaults(tmp_path):
    path = tmp_path / "rotator.json"
    path.write_text(json.dumps({"Oncallers": [{"Order": 0, "Code": "ab"}], "ShadowOncaller": "ZZ"}))
    config = load_rotator_config(path)
    assert config.generate_days == 30
    assert config.max_days_per_month == 0
    assert config.shadow_oncaller == "zz"
    assert "urlaub" in config.away_words


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"Oncallers": []},
        {"Oncallers": [{"Order": 0, "Code": "a"}, {"Order": 0, "Code": "b"}]},
        {"Oncallers": [{"Order": 0, "Code": "a"}, {"Order": 1, "Code": "A"}]},
        {"Oncallers": [{"Code": "a"}]},
        {"Oncallers": [{"Order": 0, "Code": "a"}], "MaxDaysPerMonth": "lots"},
    ],
)
def test_invalid_configs_are_rejected(raw):
    with pytest.raises(ConfigurationError):
        parse_config(raw)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_rotator_config(tmp_path / "nope.yaml")
