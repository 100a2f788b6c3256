"""
HTML bodies for transactional emails.
"""

from html import escape

_LAYOUT = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
</head>
<body style="margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #f5f7fa; color: #333333;">
  <table role="presentation" cellspacing="0" cellpadding="0" border="0" align="center" width="100%"
         style="max-width: 640px; margin: 24px auto; background-color: #ffffff; border-radius: 8px;">
    <tr>
      <td style="padding: 30px 0; text-align: center; background-color: #1a56db;">
        <h1 style="color: #ffffff; font-size: 26px; margin: 0;">{title}</h1>
      </td>
    </tr>
    <tr>
      <td style="padding: 40px 30px; font-size: 15px; line-height: 1.6;">
        {body}
      </td>
    </tr>
    <tr>
      <td style="background-color: #f0f4f9; padding: 20px 30px; text-align: center; font-size: 13px; color: #888888;">
        Contract Analysis
      </td>
    </tr>
  </table>
</body>
</html>
"""

_BUTTON = (
    '<div style="text-align: center; margin: 35px 0;">'
    '<a href="{href}" style="background-color: #1a56db; color: #ffffff; font-weight: bold; '
    'padding: 14px 28px; text-decoration: none; border-radius: 6px;">{label}</a></div>'
)


def _render(title: str, body: str) -> str:
    return _LAYOUT.format(title=escape(title), body=body)


def _button(href: str, label: str) -> str:
    return _BUTTON.format(href=escape(href, quote=True), label=escape(label))


def premium_confirmation(user_name: str, dashboard_url: str) -> str:
    body = (
        f"<p>Dear {escape(user_name)},</p>"
        "<p>Thank you for subscribing to <strong>Premium Contract Analysis</strong>. "
        "Your lifetime access is active and every premium feature is enabled on your account.</p>"
        "<ul>"
        "<li>Detailed contract breakdown with key clause identification</li>"
        "<li>Negotiation point suggestions</li>"
        "<li>AI assistant for on-demand contract guidance</li>"
        "<li>Extended risk and opportunity detection</li>"
        "<li>Unlimited PDF uploads</li>"
        "</ul>"
        + _button(dashboard_url, "Go to Dashboard")
    )
    return _render("Premium Subscription Activated", body)


def enterprise_welcome(user_name: str, organization_name: str, dashboard_url: str) -> str:
    body = (
        f"<p>Dear {escape(user_name)},</p>"
        f"<p>Your enterprise workspace for <strong>{escape(organization_name)}</strong> "
        "has been created.</p>"
        "<ol>"
        "<li>Invite team members to your workspace</li>"
        "<li>Set up your subscription plan</li>"
        "<li>Upload your first contract for team collaboration</li>"
        "<li>Customize your workspace settings</li>"
        "</ol>"
        + _button(dashboard_url, "Go to Enterprise Dashboard")
    )
    return _render("Enterprise Workspace Ready", body)


def enterprise_invite(organization_name: str, inviter_name: str, role: str, invite_url: str) -> str:
    body = (
        "<p>Hello,</p>"
        f"<p>{escape(inviter_name)} has invited you to join <strong>{escape(organization_name)}</strong> "
        f"on Contract Analysis as a <strong>{escape(role)}</strong>.</p>"
        "<p>Contract Analysis helps teams review contracts together, identify risks and "
        "opportunities, and prepare negotiations.</p>"
        + _button(invite_url, "Accept Invitation")
        + "<p>This invitation will expire in 7 days. If you believe it was sent in error, "
        "please disregard this email.</p>"
    )
    return _render("Team Invitation", body)


def contract_comment(user_name: str, commenter_name: str, contract_name: str,
                     comment_text: str, contract_url: str) -> str:
    body = (
        f"<p>Hello {escape(user_name)},</p>"
        f"<p><strong>{escape(commenter_name)}</strong> commented on "
        f"<strong>{escape(contract_name)}</strong>:</p>"
        '<blockquote style="border-left: 4px solid #1a56db; margin: 20px 0; padding: 10px 16px; '
        f'background-color: #f5f7fa;">{escape(comment_text)}</blockquote>'
        + _button(contract_url, "View Comment")
    )
    return _render("New Contract Comment", body)
