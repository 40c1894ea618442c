from __future__ import annotations

import smtplib
from email.message import EmailMessage
from pathlib import Path
from typing import Optional, Sequence

from ..cfg import settings
from ..log import log

XLSX_MAINTYPE = "application"
XLSX_SUBTYPE = "vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_message(
    paths: Sequence[Path],
    to: Sequence[str],
    *,
    subject: str,
    sender: str,
    body: str = "",
) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = ", ".join(to)
    msg.set_content(body or "W załączniku: " + ", ".join(p.name for p in paths))
    for p in paths:
        msg.add_attachment(
            p.read_bytes(),
            maintype=XLSX_MAINTYPE,
            subtype=XLSX_SUBTYPE,
            filename=p.name,
        )
    return msg


def send_workbooks(
    paths: Sequence[Path],
    to: Sequence[str],
    *,
    subject: Optional[str] = None,
    body: str = "",
    sender: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    starttls: Optional[bool] = None,
) -> bool:
    """
    Jeden mail, wszystkie skoroszyty jako załączniki.
    Brak plików → nic nie wysyłamy (False). Brak odbiorców/hosta → ValueError.
    Błędy SMTP lecą wyżej.
    """
    if not paths:
        log.info("mail: brak plików – pomijam wysyłkę")
        return False

    host = host or settings.SMTP_HOST
    if not to:
        raise ValueError("mail: brak odbiorców (MAIL_TO / --mail-to)")
    if not host:
        raise ValueError("mail: brak SMTP_HOST")

    sender = sender or settings.MAIL_FROM or settings.SMTP_USER
    msg = build_message(
        paths, to,
        subject=subject or settings.MAIL_SUBJECT,
        sender=sender,
        body=body,
    )

    user = settings.SMTP_USER if user is None else user
    password = settings.SMTP_PASSWORD if password is None else password
    starttls = settings.SMTP_STARTTLS if starttls is None else starttls

    log.info("mail: wysyłam %d plik(ów) do %s przez %s", len(paths), ", ".join(to), host)
    with smtplib.SMTP(host, port or settings.SMTP_PORT, timeout=60) as smtp:
        if starttls:
            smtp.starttls()
        if user:
            smtp.login(user, password)
        smtp.send_message(msg)
    log.info("mail: wysłano")
    return True
