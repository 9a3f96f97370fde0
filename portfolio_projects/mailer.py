# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Contact-form relay: one SMTP send per submission, no retry, no state."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any, Mapping, Optional

from .config import PortfolioConfig
from .exceptions import MailConfigError, MailRelayError

_logger = logging.getLogger(__name__)

SMTP_TIMEOUT_S: float = 15.0


@dataclass(frozen=True)
class ContactMessage:
    name: str
    email: str
    message: str

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["ContactMessage"]:
        """Build from a JSON body; None when any field is missing or blank."""
        if not isinstance(payload, Mapping):
            return None
        fields = {k: str(payload.get(k) or "").strip() for k in ("name", "email", "message")}
        if not all(fields.values()):
            return None
        return cls(**fields)


def build_email(config: PortfolioConfig, contact: ContactMessage) -> EmailMessage:
    msg = EmailMessage()
    # The SMTP account is the sender; the visitor goes in Reply-To.
    msg["From"] = formataddr((contact.name, str(config.email_user or "")))
    msg["To"] = str(config.email_user or "")
    msg["Reply-To"] = formataddr((contact.name, contact.email))
    msg["Subject"] = f"New Portfolio Contact from {contact.name}"
    msg.set_content(
        "You have a new message from:\n\n"
        f"Name: {contact.name}\n"
        f"Email: {contact.email}\n\n"
        f"Message:\n{contact.message}\n"
    )
    return msg


def send_contact_message(config: PortfolioConfig, contact: ContactMessage) -> None:
    if not config.mail_configured:
        raise MailConfigError("EMAIL_USER / EMAIL_PASS are not configured")

    msg = build_email(config, contact)
    try:
        with smtplib.SMTP_SSL(config.smtp_host, int(config.smtp_port), timeout=SMTP_TIMEOUT_S) as smtp:
            smtp.login(str(config.email_user), str(config.email_pass))
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        raise MailRelayError(f"SMTP send via {config.smtp_host}:{config.smtp_port} failed: {e}") from e
    _logger.info("Relayed contact message from %s", contact.email)
