# /buddy/workflows/detection.py

"""
Keyword detection for starting a flow from a fresh message and for
recognizing a cancel reply mid-flow.

Detection is keyword based and deterministic; anything it cannot place
is left to the caller (help menu, or the tool router for free chat).
"""

import re
from typing import Optional

from buddy.models.flow import FlowName

# An explicit command ("add task ...", "remind me ...", "set alarm ...") names its
# flow outright; when several appear, the earliest one in the message wins.
EXPLICIT_COMMANDS = [
    (FlowName.ADD_TASK, re.compile(
        r"\b(?:add|create|new)\s+(?:a\s+)?tasks?\b|\btasks?\s+(?:add|banao|bana\s+do)\b", re.I)),
    (FlowName.REMINDER, re.compile(
        r"\bremind\s+me\b|\b(?:set|create|add)\s+(?:a\s+)?reminders?\b", re.I)),
    (FlowName.ALARM, re.compile(
        r"\b(?:set|create|add)\s+(?:an?\s+)?alarms?\b", re.I)),
]

# Checked in order: the first flow whose pattern matches wins.
FLOW_PATTERNS = [
    (FlowName.ALARM, re.compile(
        r"\b(?:alarms?|wake\s+me|jaga\s+dena|jagana|utha\s+dena|uthana)\b|अलार्म", re.I)),
    (FlowName.REMINDER, re.compile(
        r"\b(?:remind|reminders?|yaad\s+dila\w*|yaad\s+karana)\b|याद\s+दिला", re.I)),
    (FlowName.NOTES, re.compile(
        r"\b(?:notes?|note\s+down|likh\s+lo)\b|नोट", re.I)),
    (FlowName.PLAN_DAY, re.compile(
        r"\b(?:plan\s+(?:my\s+|the\s+|mera\s+)?day|plan\s+karo|din\s+plan|aaj\s+ka\s+plan"
        r"|schedule\s+banao|what\s+should\s+i\s+do|kya\s+karu|kya\s+karoon)\b", re.I)),
    (FlowName.CHECK_TASK, re.compile(
        r"\b(?:ho\s+gaya|ho\s+gya|hogaya|kar\s+liya|kr\s+liya|done|complete[d]?|finish(?:ed)?"
        r"|delete|remove|hata\s+do|hatao|mark)\b|हो\s+गया", re.I)),
    (FlowName.ADD_TASK, re.compile(
        r"\b(?:add|tasks?|karna\s+hai|krna\s+hai|karni\s+hai|banao|todo)\b|जोड़ो", re.I)),
]

_CANCEL_RE = re.compile(
    r"^\s*(?:cancel|stop|quit|exit|never\s*mind|nvm|leave\s+it|forget\s+it|chhodo|chodo|choro"
    r"|rehne\s+do|rahne\s+do|mat\s+karo|band\s+karo|रहने\s+दो|छोड़ो)\s*[.!]*\s*$",
    re.I,
)


def detect_flow(text: Optional[str]) -> Optional[FlowName]:
    if not text or not text.strip():
        return None
    earliest = None
    for flow, pattern in EXPLICIT_COMMANDS:
        match = pattern.search(text)
        if match and (earliest is None or match.start() < earliest[0]):
            earliest = (match.start(), flow)
    if earliest:
        return earliest[1]
    for flow, pattern in FLOW_PATTERNS:
        if pattern.search(text):
            return flow
    return None


def is_cancel(text: Optional[str]) -> bool:
    """Only a reply that is nothing but a cancel word ends the flow."""
    return bool(text and _CANCEL_RE.match(text))
