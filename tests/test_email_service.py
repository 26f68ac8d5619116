from unittest import mock

import pytest

from authguardian.email_service import EmailService


@pytest.fixture
def service():
    password = "password"
    return EmailService("smtp.example.com", "587", "user", password, "noreply@example.com")


def test_ip_change_alert_prints_recipient_and_subject(service, capsys):
    service.send_ip_change_alert("user@example.com", "10.0.0.1", "10.0.0.2")
    out = capsys.readouterr().out
    assert "Mock sending email to user@example.com: предупреждениt безопасности" in out


def test_ip_change_alert_body_mentions_both_addresses(service, capsys):
    service.send_ip_change_alert("user@example.com", "10.0.0.1", "10.0.0.2")
    out = capsys.readouterr().out
    assert "Старый IP: 10.0.0.1, Новый IP: 10.0.0.2" in out
    assert "<!DOCTYPE html>" in out


def test_send_email_connects_and_sends_message(service):
    with mock.patch("smtplib.SMTP") as smtp_class:
        smtp = smtp_class.return_value
        smtp.has_extn.return_value = False
        result = service.send_email("user@example.com", "hello", "<p>hi</p>")

    assert result is None
    assert smtp_class.call_args == mock.call("smtp.example.com", 587)
    assert smtp.starttls.call_count == 0
    assert smtp.login.call_args == mock.call("user", "password")
    sender, recipients, raw = smtp.sendmail.call_args.args
    assert sender == "noreply@example.com"
    assert recipients == ["user@example.com"]
    text = raw.decode("utf-8")
    assert "From: noreply@example.com\r\n" in text
    assert "To: user@example.com\r\n" in text
    assert "Subject: hello\r\n" in text
    assert "Content-Type: text/html; charset=utf-8\r\n" in text
    assert text.endswith("\r\n\r\n<p>hi</p>")
    assert smtp.quit.call_count == 1


def test_send_email_uses_starttls_when_offered(service):
    with mock.patch("smtplib.SMTP") as smtp_class:
        smtp = smtp_class.return_value
        smtp.has_extn.return_value = True
        result = service.send_email("user@example.com", "hello", "<p>hi</p>")

    assert result is None
    assert smtp.starttls.call_count == 1
    assert smtp.sendmail.call_count == 1
    sender, recipients, _ = smtp.sendmail.call_args.args
    assert sender == "noreply@example.com"
    assert recipients == ["user@example.com"]


def test_send_email_encodes_non_ascii_subject(service):
    with mock.patch("smtplib.SMTP") as smtp_class:
        smtp = smtp_class.return_value
        smtp.has_extn.return_value = False
        result = service.send_email("user@example.com", "привет", "<p>тело</p>")

    assert result is None
    raw = smtp.sendmail.call_args.args[2]
    text = raw.decode("utf-8")
    assert "Subject: привет\r\n" in text
    assert text.endswith("<p>тело</p>")