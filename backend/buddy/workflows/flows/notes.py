# /buddy/workflows/flows/notes.py

import re

from buddy.models.flow import Action, ActionType, FlowName, FlowTurnResponse, NotesStep
from buddy.workflows.flows.base import FlowHandler, TurnContext

# The trigger phrase is stripped from the front of the message; whatever
# follows it is the note, verbatim.
_TRIGGER_RE = re.compile(
    r"^\s*(?:please\s+|pls\s+)?"
    r"(?:(?:add|write|take|make|save)\s+(?:a\s+|this\s+|to\s+(?:my\s+)?)?)?"
    r"(?:(?:daily\s+)?notes?(?:\s+down)?|note\s+karo|likh\s+lo|likho)\b"
    r"(?:\s+(?:mein|me|mai|main)\s*(?:likho|add\s+karo|daalo|dalo)?)?"
    r"(?:\s+(?:karo|kar\s+lo|that|this))?"
    r"\s*[:,\-]?\s*",
    re.I,
)
_REPLACE_RE = re.compile(
    r"^\s*(?:replace|overwrite|clear)\s+(?:my\s+|all\s+)?(?:notes?\s+)?(?:with\s+)?[:,\-]?\s*"
    r"|^\s*(?:naya|nayi)\s+notes?\s*[:,\-]?\s*",
    re.I,
)


def split_note(text: str):
    """Returns (content, wants_replace) for a raw notes message."""
    content = text or ""
    wants_replace = False
    replaced = _REPLACE_RE.sub("", content, count=1)
    if replaced != content:
        wants_replace = True
        content = replaced
    content = _TRIGGER_RE.sub("", content, count=1)
    return content.strip(), wants_replace


class NotesFlow(FlowHandler):
    flow = FlowName.NOTES
    steps = NotesStep

    def step_handlers(self):
        return {
            NotesStep.START: self.on_start,
            NotesStep.WRITE_NOTE: self.on_write_note,
        }

    async def on_start(self, ctx: TurnContext) -> FlowTurnResponse:
        content, wants_replace = split_note(ctx.text)
        if wants_replace:
            ctx.flow_data["mode"] = "replace"
        if not content:
            return self.ask(ctx, NotesStep.WRITE_NOTE, "notes_ask_content")
        return self.complete(ctx, content)

    async def on_write_note(self, ctx: TurnContext) -> FlowTurnResponse:
        # At this step the whole reply is the note.
        content = ctx.text
        if not content:
            return self.ask(ctx, NotesStep.WRITE_NOTE, "notes_ask_content")
        return self.complete(ctx, content)

    def complete(self, ctx: TurnContext, content: str) -> FlowTurnResponse:
        mode = "replace" if ctx.flow_data.get("mode") == "replace" else "append"
        key = "notes_replaced" if mode == "replace" else "notes_done"
        action = Action(type=ActionType.UPDATE_NOTES, params={"content": content, "mode": mode})
        return self.finish(ctx, self.say(ctx, key), [action])
