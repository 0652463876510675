from __future__ import annotations

import logging
from string import Template
from typing import Any, Dict

import httpx

from config.settings import Settings
from vendors.errors import ConfigurationError, VendorResponseError, VendorUnavailable
from vendors.http import best_effort_json


logger = logging.getLogger(__name__)

# Subject and message are substituted verbatim; Brevo does its own sanitising.
EMAIL_TEMPLATE = Template(
    """
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>$subject</title>
    <style>
      * { margin: 0; padding: 0; box-sizing: border-box; }
      body {
        font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
        background: #fafafa;
        color: #1d1d1f;
        line-height: 1.47059;
      }
      .header { background: #ffffff; border-bottom: 1px solid #e5e5e5; padding: 16px 0; }
      .header-content { max-width: 600px; margin: 0 auto; padding: 0 24px; text-align: center; }
      .logo { font-size: 20px; font-weight: 600; }
      .container { max-width: 600px; margin: 40px auto; padding: 0 24px; }
      h1 { font-size: 32px; font-weight: 600; margin-bottom: 12px; }
      .message-section {
        background: #ffffff;
        border: 1px solid #e5e5e5;
        border-radius: 18px;
        padding: 40px;
        margin-bottom: 24px;
      }
      .message-content { font-size: 15px; line-height: 1.6; white-space: pre-wrap; word-wrap: break-word; }
      .info-box {
        background: #f5f5f7;
        border: 1px solid #e5e5e5;
        padding: 20px;
        border-radius: 12px;
        margin-top: 24px;
        text-align: center;
      }
      .info-box p, .footer p { font-size: 13px; color: #6e6e73; margin: 4px 0; }
      .footer { text-align: center; margin-top: 40px; padding-top: 24px; border-top: 1px solid #e5e5e5; }
    </style>
  </head>
  <body>
    <div class="header">
      <div class="header-content">
        <div class="logo">Sync</div>
      </div>
    </div>
    <div class="container">
      <h1>$subject</h1>
      <div class="message-section">
        <div class="message-content">$message</div>
      </div>
      <div class="info-box">
        <p><strong>Powered by Sync</strong></p>
        <p>Multi-Cloud Services Platform</p>
        <p>Email Service via Brevo API</p>
      </div>
      <div class="footer">
        <p>This email was sent from Sync - Your Multi-Cloud Platform</p>
      </div>
    </div>
  </body>
</html>
"""
)


def render_email_html(subject: str, message: str) -> str:
    return EMAIL_TEMPLATE.safe_substitute(subject=subject, message=message)


def send_email(
    client: httpx.Client, settings: Settings, to: str, subject: str, message: str
) -> Dict[str, Any]:
    """Send one transactional email through Brevo and return the message id."""
    if not (
        settings.brevo_api_key
        and settings.brevo_sender_email
        and settings.brevo_sender_name
    ):
        raise ConfigurationError("Email service not configured")

    payload = {
        "sender": {
            "name": settings.brevo_sender_name,
            "email": settings.brevo_sender_email,
        },
        "to": [{"email": to}],
        "subject": subject,
        "htmlContent": render_email_html(subject, message),
    }
    headers = {
        "Content-Type": "application/json",
        "api-key": settings.brevo_api_key,
    }

    try:
        response = client.post(settings.brevo_api_url, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.exception("Brevo call failed: %s", exc)
        raise VendorUnavailable("Failed to send email") from exc

    if response.is_error:
        details = best_effort_json(response)
        logger.warning("Brevo rejected email: status=%s", response.status_code)
        raise VendorResponseError(
            "Failed to send email",
            status_code=response.status_code,
            details=details,
        )

    try:
        data = response.json()
    except ValueError as exc:
        logger.exception("Brevo call failed: %s", exc)
        raise VendorUnavailable("Failed to send email") from exc

    return {
        "success": True,
        "messageId": data.get("messageId"),
        "message": "Email sent successfully",
    }
