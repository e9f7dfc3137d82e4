"""
Email notifications to listing owners.

Sent from a background task after a lead is stored, so a slow or missing
SMTP server never delays the inquiry response.
"""

import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from jinja2 import Template

from app.config import settings

logger = logging.getLogger(__name__)


LEAD_EMAIL_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <style>
        body { font-family: Arial, sans-serif; margin: 0; padding: 20px; background: #f5f5f5; }
        .container { max-width: 600px; margin: 0 auto; background: white; border-radius: 8px; padding: 20px; }
        h2 { color: #333; border-bottom: 2px solid #007bff; padding-bottom: 10px; }
        .details { background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0; }
        .message { background: white; padding: 15px; border-radius: 4px; margin: 5px 0; }
        .next { background: #e7f3ff; padding: 15px; border-radius: 8px; margin: 20px 0; }
        .view-btn { display: inline-block; background: #007bff; color: white; padding: 8px 16px; border-radius: 6px; text-decoration: none; font-size: 14px; }
        .footer { color: #666; font-size: 14px; border-top: 1px solid #eee; margin-top: 30px; padding-top: 16px; }
    </style>
</head>
<body>
    <div class="container">
        <h2>New Property Inquiry</h2>
        <p>Hello {{ owner_name }},</p>
        <p>You have received a new inquiry for your property: <strong>{{ property_title }}</strong></p>
        <div class="details">
            <h3 style="margin-top: 0;">Inquirer Details:</h3>
            <p><strong>Name:</strong> {{ lead.name }}</p>
            {% if lead.email %}<p><strong>Email:</strong> {{ lead.email }}</p>{% endif %}
            <p><strong>Phone:</strong> {{ lead.phone }}</p>
            {% if lead.message %}
            <div>
                <strong>Message:</strong>
                <p class="message">{{ lead.message }}</p>
            </div>
            {% endif %}
        </div>
        <div class="next">
            <p><strong>Next Steps:</strong></p>
            <ul>
                <li>Review the inquiry details above</li>
                <li>Contact the inquirer directly</li>
                <li>Schedule a property viewing if appropriate</li>
            </ul>
        </div>
        <a href="{{ listing_url }}" class="view-btn">View Listing</a>
        <div class="footer">
            This is an automated notification from HomeHNI. Please do not reply to this email.
        </div>
    </div>
</body>
</html>
"""


def render_lead_email(
    owner_name: str, property_title: str, lead: dict, listing_url: str
) -> str:
    template = Template(LEAD_EMAIL_TEMPLATE, autoescape=True)
    return template.render(
        owner_name=owner_name,
        property_title=property_title,
        lead=lead,
        listing_url=listing_url,
    )


def send_email(to_email: str, subject: str, html_content: str) -> bool:
    """Send an email via SMTP. Returns whether it went out."""
    if not settings.smtp_pass:
        logger.info(f"SMTP not configured, skipping email to {to_email}")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.smtp_user
    msg["To"] = to_email

    msg.attach(MIMEText(html_content, "html"))

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_pass)
            server.sendmail(settings.smtp_user, to_email, msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False

    logger.info(f"Email sent to {to_email}")
    return True


def notify_owner_of_lead(
    owner_email: str,
    owner_name: str,
    property_title: str,
    listing_id: str,
    lead: dict,
) -> bool:
    html = render_lead_email(
        owner_name=owner_name,
        property_title=property_title,
        lead=lead,
        listing_url=f"{settings.app_base_url}/property/{listing_id}",
    )
    subject = f"New Inquiry for Your Property: {property_title}"
    return send_email(owner_email, subject, html)
