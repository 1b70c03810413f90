"""Invite email templates, rendered with ``str.format``."""
from html import escape
from typing import Any

INVITE_SUBJECT = "{host_name} invited you to {title}"

VIBE_EMOJI = {
    "CHILL": "☕",
    "COMPETITIVE": "🔥",
    "CHAOS": "⚡",
    "PARTY": "🎉",
    "COZY": "💖",
}

INVITE_TEXT = """Hey {guest_name}!

{host_name} wants you at their game night.
{personal_message_text}
{title}
When: {when}
Where: {location}
Vibe: {vibe_emoji} {vibe_name}

Let {host_name} know if you can make it:
{rsvp_url}
"""

INVITE_HTML = """<!DOCTYPE html>
<html>
<body>
  <h1>You're Invited!</h1>
  <p>{host_name} wants you at their game night</p>
  <p>Hey {guest_name}!</p>
  {personal_message_html}
  <h2>{title}</h2>
  <table>
    <tr><td>When</td><td>{when}</td></tr>
    <tr><td>Where</td><td>{location}</td></tr>
    <tr><td>Vibe</td><td>{vibe_emoji} {vibe_name}</td></tr>
  </table>
  <p>Let {host_name} know if you can make it!</p>
  <p><a href="{rsvp_url}">RSVP Now</a></p>
</body>
</html>
"""

TEMPLATES = {
    "game_night_invite": (INVITE_HTML, INVITE_TEXT),
}


def invite_fields(context: dict[str, Any]) -> dict[str, str]:
    vibe = context.get("vibe") or "CHILL"
    when = context["date"]
    if context.get("start_time"):
        when = f"{when} at {context['start_time']}"
    message = context.get("personal_message")
    return {
        "guest_name": context.get("guest_name") or "there",
        "host_name": context["host_name"],
        "title": context["title"],
        "when": when,
        "location": context.get("location") or "TBD",
        "vibe_emoji": VIBE_EMOJI.get(vibe, "🎮"),
        "vibe_name": vibe.capitalize(),
        "rsvp_url": context["rsvp_url"],
        "personal_message_text": f'\nMessage from {context["host_name"]}: "{message}"\n' if message else "",
        "personal_message_html": (
            f'<blockquote>"{escape(message)}"</blockquote>' if message else ""
        ),
    }


def render(template: str, context: dict[str, Any]) -> tuple[str, str]:
    """Return (html, text) bodies for a named template."""
    html_template, text_template = TEMPLATES[template]
    fields = invite_fields(context)
    html_fields = {
        key: value if key.endswith("_html") else escape(value)
        for key, value in fields.items()
    }
    return html_template.format(**html_fields), text_template.format(**fields)
