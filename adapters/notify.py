"""Reminder mails for the person on duty."""
from __future__ import annotations

import getpass
import logging
import smtplib
import socket
from dataclasses import dataclass, field
from datetime import date, timedelta
from email.message import EmailMessage
from typing import Callable, List, Optional

from adapters.slack import SlackNotifier
from domain.errors import NotificationError
from domain.roster import Roster

logger = logging.getLogger(__name__)

URGENCIES = ("today", "tomorrow", "emergency")
SIGNATURE = " - the onduty rotator"


@dataclass
class Mail:
    destination: str
    subject: str
    sender: str
    body: List[str] = field(default_factory=list)

    def as_message(self) -> EmailMessage:
        msg = EmailMessage()
        msg["To"] = self.destination
        msg["From"] = self.sender
        msg["Subject"] = self.subject
        msg["X-Mailer"] = "Rotator Reminder Mailer"
        msg.set_content("\r\n".join(self.body) + "\r\n")
        return msg


def default_sender() -> str:
    return f"{getpass.getuser()}@{socket.gethostname()}"


def build_mail(code: str, urgency: str, today: date, *, destination: str, sender: str = "") -> Mail:
    if urgency not in URGENCIES:
        raise ValueError(f"unknown urgency {urgency!r}")
    when = "tomorrow" if urgency == "tomorrow" else "today"
    day = today + timedelta(days=1) if urgency == "tomorrow" else today
    dstring = f"{day:%a} {day.day} {day:%b}"

    if urgency == "emergency":
        subject = f"Attention: You are on duty today! [{dstring}]"
        body = [
            f"Dear {code},",
            "You are on duty today as the person previously on call is",
            "unavailable on short notice. The on duty rota has therefore been moved",
            "up by one day.",
            "Have fun!",
            "",
            "May the queries flow and pagers be silent.",
            SIGNATURE,
        ]
    else:
        subject = f"Reminder: You are on duty {when} [{dstring}]"
        body = [
            f"Dear {code},",
            f"This is to remind you that you are on duty {when}.",
            "Have fun!",
            "",
            "May the queries flow and the pagers be silent.",
            SIGNATURE,
        ]
    return Mail(destination=destination, subject=subject, sender=sender or default_sender(), body=body)


def _split_server(server: str) -> tuple[str, int]:
    host, _, port = server.partition(":")
    return host or "localhost", int(port or 25)


class Notifier:
    def __init__(
        self,
        roster: Roster,
        *,
        mail_server: str = "localhost:25",
        mail_sender: str = "",
        slack: Optional[SlackNotifier] = None,
        smtp_factory: Callable[[str, int], smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self.roster = roster
        self.mail_server = mail_server or "localhost:25"
        self.mail_sender = mail_sender
        self.slack = slack
        self._smtp_factory = smtp_factory

    def notify(self, code: str, urgency: str, today: date) -> bool:
        """Send the reminder; return ``False`` when there is nobody to send it to."""
        if code not in self.roster:
            logger.warning("Not notifying %s: not in the roster", code)
            return False
        person = self.roster.by_code(code)
        if not person.email:
            logger.warning("Not notifying %s: no email address configured", code)
            return False

        if self.slack is not None:
            when = "tomorrow" if urgency == "tomorrow" else "today"
            self.slack.direct_message(
                person.slack_id,
                f"Hello {code}! This is to remind you that you're on duty {when}.",
            )

        mail = build_mail(code, urgency, today, destination=person.email, sender=self.mail_sender)
        host, port = _split_server(self.mail_server)
        logger.debug("Sending mail:\n%s", mail.as_message())
        try:
            with self._smtp_factory(host, port) as smtp:
                smtp.send_message(mail.as_message())
        except (OSError, smtplib.SMTPException) as exc:
            raise NotificationError(code, urgency, str(exc)) from exc
        logger.info("Notified %s (%s) at %s", code, urgency, person.email)
        return True


__all__ = ["Mail", "Notifier", "URGENCIES", "build_mail", "default_sender"]
