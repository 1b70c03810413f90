"""Game night assistant — advisory text generation with canned fallbacks.

One chat-completion call per request. When no API key is configured, the call
fails, or a JSON answer cannot be parsed, the per-vibe fallback lists answer
instead and the result is marked ``source="fallback"``. Nothing returned here is
ever written to the event; a host has to add a suggested game or snack by hand.
"""
import json
import logging
import random
import re
from typing import Any, Optional

from openai import OpenAI, OpenAIError
from sqlalchemy.orm import Session

from gamenight.config import settings
from gamenight.errors import ValidationError
from gamenight.models.guest import GuestStatus
from gamenight.models.lineup import LineupStatus
from gamenight.models.moment import Moment, MomentType
from gamenight.services.identity_service import Credential, authorize, host_guest, require_host

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are the Chaos Coordinator, a playful assistant for planning board game nights.
Keep responses concise but entertaining. Use emojis sparingly.
Game nights are about having fun with friends, not being perfect."""

MAX_TOKENS = 1024

FALLBACK_GAMES = {
    "CHILL": ["Codenames", "Ticket to Ride", "Wingspan", "Azul", "Splendor"],
    "COMPETITIVE": ["Catan", "Terraforming Mars", "Scythe", "Root", "7 Wonders"],
    "CHAOS": ["Exploding Kittens", "Throw Throw Burrito", "Unstable Unicorns", "Coup", "Love Letter"],
    "PARTY": ["Cards Against Humanity", "What Do You Meme", "Telestrations", "Just One", "Wavelength"],
    "COZY": ["Mysterium", "Pandemic", "Spirit Island", "Gloomhaven: Jaws of the Lion",
             "Betrayal at House on the Hill"],
}

FALLBACK_SNACKS = {
    "CHILL": ["Cheese board with crackers", "Veggie platter with hummus", "Popcorn bar", "Fruit and chocolate"],
    "COMPETITIVE": ["Finger foods that won't slow you down", "Mini sandwiches", "Energy drinks", "Trail mix"],
    "CHAOS": ["Pizza rolls", "Hot wings", "Nachos supreme", "Anything deep fried"],
    "PARTY": ["Chips and multiple dips", "Slider bar", "Cocktail/mocktail station", "S'mores bar"],
    "COZY": ["Warm soup in mugs", "Fresh baked cookies", "Hot cocoa bar", "Comfort food spread"],
}

FALLBACK_THEMES = [
    "80s Arcade Night - neon colors, synthwave music, retro snacks",
    "Medieval Tavern - mead (or root beer), meat pies, fantasy games",
    "Space Station Alpha - cosmic cocktails, astronaut ice cream, sci-fi games",
    "Spy vs Spy - mystery games, secret codes, tuxedo dress code optional",
    "Chaos Casino - poker chips as score trackers, dealer vibes, high stakes snacks",
]

FALLBACK_INVITE = (
    "Hey! Game night at my place - you in? 🎲 We're gonna play some games, eat some snacks, "
    "and probably argue about the rules at least twice. It's gonna be chaotic and I need you there!"
)

FALLBACK_CHAOS_RULE = 'Loser of each game has to wear the "Shame Hat" until someone else loses!'

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


def _vibe(context: dict[str, Any]) -> str:
    vibe = (context.get("vibe") or "CHILL").upper()
    return vibe if vibe in FALLBACK_GAMES else "CHILL"


def _fallback_themes() -> list[dict[str, str]]:
    themes = []
    for line in FALLBACK_THEMES:
        name, _, description = line.partition(" - ")
        themes.append({"name": name, "description": description})
    return themes


def complete(prompt: str) -> Optional[str]:
    """Ask the model; None when no key is set or the call fails."""
    if not settings.OPENAI_API_KEY:
        logger.warning("OpenAI API key not configured, using fallback suggestions")
        return None

    client = OpenAI(api_key=settings.OPENAI_API_KEY)
    try:
        response = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            max_tokens=MAX_TOKENS,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )
    except OpenAIError as e:
        logger.error("LLM API error: %s", e)
        return None

    if response.usage:
        logger.info("Assistant call used %d tokens", response.usage.total_tokens)
    return response.choices[0].message.content or None


def _json_list(text: Optional[str]) -> Optional[list]:
    if not text:
        return None
    match = _JSON_ARRAY.search(text)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, list) else None


def _structured(prompt: str, fallback: list) -> dict[str, Any]:
    """A JSON-array answer, or ``fallback`` with the unparsed text kept alongside."""
    text = complete(prompt)
    parsed = _json_list(text)
    if parsed is not None:
        return {"source": "ai", "suggestion": parsed}
    return {"source": "fallback", "suggestion": fallback, "raw_suggestion": text}


def _free_text(prompt: str, fallback: Any) -> dict[str, Any]:
    text = complete(prompt)
    if text:
        return {"source": "ai", "suggestion": text}
    return {"source": "fallback", "suggestion": fallback}


def _lines(*parts: str) -> str:
    return "\n".join(part for part in parts if part)


def suggest_games(context: dict[str, Any]) -> dict[str, Any]:
    vibe = _vibe(context)
    players = context.get("player_count") or 4
    hours = round((context.get("duration_minutes") or 180) / 60)
    owned = context.get("games_owned") or []
    prompt = _lines(
        f"Suggest 5 board/card games for a {vibe.lower()} game night with {players} players "
        f"and about {hours} hours to play.",
        f"They already own: {', '.join(owned)}. Suggest different games." if owned else "",
        f"Theme: {context['theme']}" if context.get("theme") else "",
        "Format as a JSON array with objects containing: name, reason (1 sentence why it fits), "
        "playerCount, estimatedMinutes.",
    )
    return _structured(prompt, FALLBACK_GAMES[vibe])


def suggest_snacks(context: dict[str, Any]) -> dict[str, Any]:
    vibe = _vibe(context)
    restrictions = context.get("dietary_restrictions") or []
    prompt = _lines(
        f"Suggest 5 snack/drink ideas for a {vibe.lower()} game night.",
        f"Dietary restrictions: {', '.join(restrictions)}" if restrictions else "",
        f"Theme: {context['theme']}" if context.get("theme") else "",
        "Format as a JSON array with objects containing: item, description (fun 1-liner), "
        "difficulty (easy/medium).",
    )
    return _structured(prompt, FALLBACK_SNACKS[vibe])


def generate_theme(context: dict[str, Any]) -> dict[str, Any]:
    prompt = _lines(
        "Generate 3 unique, fun theme ideas for a game night. Be creative and unexpected!",
        f"Preferred vibe: {context['vibe']}" if context.get("vibe") else "",
        f"Player count: {context['player_count']}" if context.get("player_count") else "",
        "Format as a JSON array with objects containing: name, description (2-3 sentences), "
        "suggestedGames (array of 2-3 games), snackIdea.",
    )
    return _structured(prompt, _fallback_themes())


def generate_invite(context: dict[str, Any]) -> dict[str, Any]:
    guests = context.get("guest_names") or []
    prompt = _lines(
        "Write a fun, casual invite message for a game night.",
        "Details:",
        "- Host is inviting friends",
        f"- Vibe: {context.get('vibe') or 'chill'}",
        f"- Theme: {context['theme']}" if context.get("theme") else "",
        f"- Guests: {', '.join(guests)}" if guests else "",
        "Keep it under 100 words. Make it feel like a text from a friend, not a formal invitation. "
        "Include one emoji max.",
    )
    return _free_text(prompt, FALLBACK_INVITE)


def plan_night(context: dict[str, Any]) -> dict[str, Any]:
    vibe = _vibe(context)
    duration = context.get("duration_minutes")
    prompt = _lines(
        "Help plan an amazing game night based on these details:",
        context.get("custom_prompt") or "Plan a fun game night for friends",
        "",
        f"Player count: {context.get('player_count') or 'Unknown'}",
        f"Duration: {f'{round(duration / 60)} hours' if duration else 'A few hours'}",
        f"Vibe: {context.get('vibe') or 'Whatever feels right'}",
        "Give suggestions for: 3-4 games to play (in recommended order), snack ideas, "
        "a theme or twist to make it memorable, and one chaos rule to add excitement.",
        "Keep it concise and actionable. Format response as structured sections.",
    )
    return _free_text(prompt, {
        "games": FALLBACK_GAMES[vibe],
        "snacks": FALLBACK_SNACKS[vibe],
        "theme": random.choice(FALLBACK_THEMES),
        "chaos_rule": FALLBACK_CHAOS_RULE,
    })


def generate_recap(db: Session, event_id: Optional[str], credential: Optional[Credential]) -> dict[str, Any]:
    """Recap of a finished night, built from attendees, completed games and moments (host only)."""
    if not event_id:
        raise ValidationError("event_id is required for a recap")
    actor = authorize(db, event_id, credential)
    require_host(actor)
    event = actor.event

    attendees = [g.display_name for g in event.guests if g.status == GuestStatus.going]
    games = [entry for entry in event.lineup if entry.status == LineupStatus.completed]
    played = [
        f"{entry.display_name} (won by {entry.winner_name})" if entry.winner_name else entry.display_name
        for entry in games
    ]
    notes = [
        m.content for m in db.query(Moment)
        .filter(Moment.event_id == event.event_id, Moment.type.in_([MomentType.chaos, MomentType.quote]))
        .order_by(Moment.created_at)
    ]

    prompt = _lines(
        "Write a fun, entertaining recap of this game night in 2-3 short paragraphs:",
        "",
        f"Host: {host_guest(db, event).display_name}",
        f"Attendees: {', '.join(attendees)}",
        f"Games played: {', '.join(played)}",
        f"Notable moments: {'; '.join(notes)}" if notes else "",
        f"Vibe: {event.vibe.value}",
        "Make it feel like a sports recap but for game night. Highlight winners and chaos moments. "
        "End with a hype line about the next game night.",
    )
    fallback = (
        f"🎲 GAME NIGHT RECAP 🎲\n\n{', '.join(attendees)} gathered for an epic night of gaming! "
        f"{len(games)} games were played, friendships were tested, and snacks were demolished.\n\n"
        "Until next time, keep rolling those dice!"
    )
    return _free_text(prompt, fallback)


GENERATORS = {
    "suggest_games": suggest_games,
    "suggest_snacks": suggest_snacks,
    "generate_theme": generate_theme,
    "generate_invite": generate_invite,
    "plan_night": plan_night,
}


def suggest(db: Session, kind: str, context: dict[str, Any],
            credential: Optional[Credential] = None) -> dict[str, Any]:
    """Dispatch one suggestion request; the result is advisory only."""
    if kind == "generate_recap":
        result = generate_recap(db, context.get("event_id"), credential)
    elif kind in GENERATORS:
        result = GENERATORS[kind](context)
    else:
        raise ValidationError(f"Unknown suggestion kind: {kind}")

    logger.info("Assistant answered %s from %s", kind, result["source"])
    return {"kind": kind, "raw_suggestion": None, **result}
