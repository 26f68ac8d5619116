"""Outgoing e-mail notifications."""

from __future__ import annotations

import smtplib

_IP_ALERT_SUBJECT = "предупреждениt безопасности"

_IP_ALERT_TEMPLATE = """
<!DOCTYPE html>
<html>
     <p>мы заметили вход с нового IP адреса. Старый IP: {old_ip}, Новый IP: {new_ip}</p>
</html>
"""


class EmailService:
    """Sends HTML notifications to users over SMTP."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: str,
        smtp_user: str,
        smtp_password: str,
        from_email: str,
    ) -> None:
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self._smtp_password = smtp_password
        self.from_email = from_email

    def send_ip_change_alert(self, user_email: str, old_ip: str, new_ip: str) -> None:
        """Notify a user that their session was used from a new IP address.

        Delivery is mocked: the message is written to standard output.
        """
        body = _IP_ALERT_TEMPLATE.format(old_ip=old_ip, new_ip=new_ip)
        print(f"Mock sending email to {user_email}: {_IP_ALERT_SUBJECT}")
        print(body)

    def send_email(self, to: str, subject: str, body: str) -> None:
        """Send an HTML message to ``to`` through the configured SMTP server."""
        headers = {
            "From": self.from_email,
            "To": to,
            "Subject": subject,
            "MIME-Version": "1.0",
            "Content-Type": "text/html; charset=utf-8",
        }
        message = "".join(f"{key}: {value}\r\n" for key, value in headers.items())
        message += "\r\n" + body

        smtp = smtplib.SMTP(self.smtp_host, int(self.smtp_port))
        try:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
            if self.smtp_user:
                smtp.login(self.smtp_user, self._smtp_password)
            smtp.sendmail(self.from_email, [to], message.encode("utf-8"))
        finally:
            smtp.quit()