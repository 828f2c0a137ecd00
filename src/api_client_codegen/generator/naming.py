"""Client function names derived from controller/action/verb."""

VERB_NAMES = {
    "get": "get",
    "post": "create",
    "put": "update",
    "delete": "delete",
}
DEFAULT_VERB_NAME = "do"


class ActionNamer:
    """Builds short lowerCamel function names such as ``list`` or ``getById``."""

    @staticmethod
    def from_verb(verb: str | None) -> str:
        return VERB_NAMES.get((verb or "get").lower(), DEFAULT_VERB_NAME)

    @staticmethod
    def controller_stem(controller: str | None) -> str:
        """``WidgetController`` -> ``Widget``."""
        return _strip_suffix(controller or "", "Controller")

    @classmethod
    def name(cls, controller: str | None, action: str | None, verb: str | None) -> str:
        """Return the function name for one endpoint. Never empty."""
        if not action:
            return cls.from_verb(verb)

        stem = cls.controller_stem(controller)
        act = _strip_suffix(action, "Async")
        act = _strip_suffix(act, "Action")
        if stem and act.startswith(stem):
            act = act[len(stem) :]
        if not act:
            act = cls.from_verb(verb)

        return act[0].lower() + act[1:]

    @staticmethod
    def unique(names: list[str]) -> list[str]:
        """Suffix repeated names with 2, 3, ... keeping the first occurrence as is."""
        seen: set[str] = set()
        result = []
        for name in names:
            candidate, n = name, 1
            while candidate in seen:
                n += 1
                candidate = f"{name}{n}"
            seen.add(candidate)
            result.append(candidate)
        return result


def _strip_suffix(text: str, suffix: str) -> str:
    if text.endswith(suffix):
        return text[: -len(suffix)]
    return text
