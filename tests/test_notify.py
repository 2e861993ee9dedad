import smtplib
from datetime import date

import pytest

from adapters.notify import Notifier, build_mail
from adapters.slack import SlackNotifier
from domain.errors import NotificationError
from domain.models import Person
from domain.roster import Roster

TODAY = date(2026, 10, 5)


class FakeSMTP:
    sent = []

    def __init__(self, host, port):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def send_message(self, msg):
        FakeSMTP.sent.append((self.host, self.port, msg))


class BrokenSMTP(FakeSMTP):
    def send_message(self, msg):
        raise smtplib.SMTPRecipientsRefused({msg["To"]: (550, b"no such user")})


class FakeSlackClient:
    def __init__(self):
        self.posts = []

    def conversations_open(self, users):
        return {"channel": {"id": f"D-{users}"}}

    def chat_postMessage(self, **kwargs):
        self.posts.append(kwargs)
        return {"channel": kwargs["channel"], "ts": "1"}


@pytest.fixture()
def people():
    return Roster(
        [
            Person(code="ab", order=0, email="ab@example.org", slack_id="U1"),
            Person(code="cd", order=1),
        ]
    )


def test_reminder_mail_wording():
    mail = build_mail("ab", "tomorrow", TODAY, destination="ab@example.org", sender="me@example.org")
    assert mail.subject == "Reminder: You are on duty tomorrow [Tue 6 Oct]"
    assert mail.body[0] == "Dear ab,"
    assert "on duty tomorrow." in mail.body[1]
    message = mail.as_message()
    assert message["To"] == "ab@example.org"
    assert message["From"] == "me@example.org"


def test_emergency_mail_wording():
    mail = build_mail("ab", "emergency", TODAY, destination="ab@example.org", sender="me@example.org")
    assert mail.subject == "Attention: You are on duty today! [Mon 5 Oct]"
    assert any("short notice" in line for line in mail.body)


def test_unknown_urgency_is_rejected():
    with pytest.raises(ValueError):
        build_mail("ab", "someday", TODAY, destination="ab@example.org")


def test_notify_sends_over_smtp(people):
    FakeSMTP.sent = []
    notifier = Notifier(people, mail_server="mail.example.org:2525", mail_sender="me@example.org", smtp_factory=FakeSMTP)
    assert notifier.notify("AB", "today", TODAY)
    host, port, msg = FakeSMTP.sent[0]
    assert (host, port) == ("mail.example.org", 2525)
    assert msg["Subject"].startswith("Reminder: You are on duty today")


def test_nobody_to_send_to(people):
    FakeSMTP.sent = []
    notifier = Notifier(people, smtp_factory=FakeSMTP)
    assert not notifier.notify("cd", "today", TODAY)
    assert not notifier.notify("xx", "today", TODAY)
    assert FakeSMTP.sent == []


def test_smtp_failure_raises_notification_error(people):
    notifier = Notifier(people, mail_sender="me@example.org", smtp_factory=BrokenSMTP)
    with pytest.raises(NotificationError) as excinfo:
        notifier.notify("ab", "emergency", TODAY)
    assert excinfo.value.code == "ab"
    assert excinfo.value.urgency == "emergency"


def test_slack_direct_message(people):
    FakeSMTP.sent = []
    client = FakeSlackClient()
    slack = SlackNotifier("token", "#oncall", client=client)
    notifier = Notifier(people, mail_sender="me@example.org", slack=slack, smtp_factory=FakeSMTP)
    notifier.notify("ab", "today", TODAY)
    assert client.posts[0]["channel"] == "D-U1"
    assert "on duty today" in client.posts[0]["text"]


def test_slack_without_user_is_skipped():
    client = FakeSlackClient()
    SlackNotifier("token", "#oncall", client=client).direct_message("", "hello")
    assert client.posts == []


def test_slack_post_goes_to_channel():
    client = FakeSlackClient()
    SlackNotifier("token", "#oncall", client=client).post("hello")
    assert client.posts == [{"channel": "#oncall", "text": "hello", "username": "rotator", "icon_emoji": ":umbrella:"}]
