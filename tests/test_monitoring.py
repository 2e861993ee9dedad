from adapters.monitoring import render_status, write_monitoring_file
from conftest import make_roster


def test_status_marks_current_oncaller():
    roster = make_roster("ab", "cd")
    text = render_status("AB", roster, hostname="box.example.org", script="rotator")
    lines = text.splitlines()
    assert lines[0] == "# HELP oncall_rotation_status Positive if oncall."
    assert lines[1] == "# TYPE oncall_rotation_status gauge"
    assert lines[2] == 'oncall_rotation_status{scripthost="box",oncaller="ab",scriptname="rotator"} 1'
    assert lines[3] == 'oncall_rotation_status{scripthost="box",oncaller="cd",scriptname="rotator"} 0'
    assert text.endswith("\n")


def test_status_with_nobody_on_duty(tmp_path):
    roster = make_roster("ab", "cd")
    path = write_monitoring_file("", roster, tmp_path / "oncall.prom")
    content = path.read_text(encoding="utf-8")
    assert content.count("} 0") == 2
    assert "} 1" not in content
