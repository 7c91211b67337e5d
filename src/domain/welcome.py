"""
Welcome email composition.

Renders the markdown welcome letter to HTML and packs both versions
into a multipart/alternative MIME message.
"""

from email.headerregistry import Address
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate, make_msgid

import markdown

from .results import OutboundEmail

WELCOME_SUBJECT = "Welcome to EmailThing!"

WELCOME_TEMPLATE = """### Hi **@{username}**,

Welcome to EmailThing!

We're excited to have you on board. With EmailThing, you can enjoy a range of features designed to make managing your emails a breeze:

*   **API Integration**: Send emails and more with our [API].
*   **Custom Domains**: Use your [own domain] for your emails.
*   **Multi-User Support**: [Invite others] to your mailbox.
*   **Temporary Email**: Need a burner email? [Get many here].
*   **Progressive Web App (PWA)**: Install EmailThing to your home screen on mobile for easy access and notifications.
    [Set up notifications] on both desktop and mobile.
*   **Contact Page**: Create your own [contact page] to receive messages with a simple form.

EmailThing is proudly open source. Check out our [GitHub] for more details.

To get started, visit and explore all that we have to offer.

If you have any questions or feedback, feel free to reach out.

Best regards,
[RiskyMH] (creator and founder)


<!-- Links -->

[RiskyMH]: https://riskymh.dev
[API]: {app_url}/docs/api
[own domain]: {app_url}/mail/{mailbox_id}/config
[Invite others]: {app_url}/mail/{mailbox_id}/config
[Get many here]: {app_url}/mail/{mailbox_id}/temp
[Set up notifications]: {app_url}/settings/notifications
[contact page]: {app_url}/settings/emailthing-me
[GitHub]: https://github.com/RiskyMH/EmailThing"""

_HTML_SHELL = """<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.5;">
{body}
</body>
</html>
"""


def render_welcome_markdown(username: str, mailbox_id: str, app_url: str) -> str:
    """Fill the welcome template for one new mailbox."""
    return WELCOME_TEMPLATE.format(
        username=username,
        mailbox_id=mailbox_id,
        app_url=app_url.rstrip("/"),
    )


def make_html(markdown_source: str) -> str:
    """Render markdown to a standalone HTML document."""
    body = markdown.markdown(markdown_source)
    return _HTML_SHELL.format(body=body)


def compose_welcome_email(
    username: str,
    mailbox_id: str,
    *,
    mail_domain: str,
    app_url: str,
    sender: str,
    reply_to: str,
) -> OutboundEmail:
    """
    Build the welcome message for a freshly provisioned mailbox.

    Args:
        username: Normalized username of the new account
        mailbox_id: Identifier of the new mailbox (used in links)
        mail_domain: Domain of the new default alias
        app_url: Public base URL used for links in the letter
        sender: System address the message comes from
        reply_to: Address replies should go to

    Returns:
        OutboundEmail addressed to the new default alias
    """
    recipient = f"{username}@{mail_domain}"
    text = render_welcome_markdown(username, mailbox_id, app_url)
    html = make_html(text)

    message = MIMEMultipart("alternative")
    message["From"] = formataddr(("EmailThing", sender))
    message["To"] = formataddr((username, recipient))
    message["Subject"] = WELCOME_SUBJECT
    message["Date"] = formatdate(localtime=False)
    message["Message-ID"] = make_msgid(domain=Address(addr_spec=sender).domain)
    message["X-EmailThing"] = "official"
    message["Reply-To"] = reply_to
    message.attach(MIMEText(text, "plain", "utf-8"))
    # utf-8 MIMEText parts are base64 encoded
    message.attach(MIMEText(html, "html", "utf-8"))

    return OutboundEmail(
        sender=sender,
        recipients=(recipient,),
        raw=message.as_bytes(),
    )
