"""Question types and the type-tagged answer values shared by server and client."""

SHORT_ANSWER = "ShortAnswer"
DROP_DOWN = "DropDown"
MULTI_CHOICE = "MultiChoice"
MULTI_SELECT = "MultiSelect"
RANKING = "Ranking"

QUESTION_TYPES = (SHORT_ANSWER, DROP_DOWN, MULTI_CHOICE, MULTI_SELECT, RANKING)
SINGLE_OPTION_TYPES = (DROP_DOWN, MULTI_CHOICE)
MULTI_OPTION_TYPES = (MULTI_SELECT, RANKING)
CHOICE_TYPES = SINGLE_OPTION_TYPES + MULTI_OPTION_TYPES

# Option ids start at 1, so 0 never collides with a real option.
NO_ANSWER = 0


def parse_option_id(raw):
    if isinstance(raw, bool):
        raise ValueError("Option id must be an integer")
    if isinstance(raw, float) and not raw.is_integer():
        raise ValueError(f"Invalid option id: {raw!r}")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw.lstrip("-").isdigit():
            raise ValueError(f"Invalid option id: {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid option id: {raw!r}") from None


class AnswerData:
    """One answer value, tagged with the type of question it answers.

    ShortAnswer holds a string, DropDown and MultiChoice a single option id,
    MultiSelect and Ranking a list of option ids (order only matters for
    Ranking).
    """

    __slots__ = ("answer_type", "data")

    def __init__(self, answer_type, data):
        self.answer_type = answer_type
        self.data = data

    @classmethod
    def parse(cls, answer_type, raw):
        if answer_type == SHORT_ANSWER:
            if raw is None:
                raw = ""
            if not isinstance(raw, str):
                raise ValueError("ShortAnswer data must be a string")
            return cls(answer_type, raw)

        if answer_type in SINGLE_OPTION_TYPES:
            if raw is None or raw == "":
                return cls(answer_type, NO_ANSWER)
            return cls(answer_type, parse_option_id(raw))

        if answer_type in MULTI_OPTION_TYPES:
            if raw is None:
                raw = []
            if isinstance(raw, (str, bytes, dict)) or not hasattr(raw, "__iter__"):
                raise ValueError(f"{answer_type} data must be a list of option ids")
            option_ids = [parse_option_id(item) for item in raw]
            if answer_type == MULTI_SELECT:
                # selection is a set; keep first occurrence order for display
                option_ids = list(dict.fromkeys(option_ids))
            return cls(answer_type, option_ids)

        raise ValueError(f"Unknown question type: {answer_type!r}")

    def is_empty(self, option_count=None):
        if self.answer_type == SHORT_ANSWER:
            return not self.data.strip()
        if self.answer_type in SINGLE_OPTION_TYPES:
            return self.data == NO_ANSWER
        if self.answer_type == MULTI_SELECT:
            return not self.data
        # A full re-order is always an answer; only an option-less ranking is empty.
        return option_count == 0

    def validate(self, option_ids):
        if self.answer_type == SHORT_ANSWER:
            if not self.data.strip():
                raise ValueError("Answer text is empty")
            return

        allowed = set(option_ids)
        if self.answer_type in SINGLE_OPTION_TYPES:
            if self.data not in allowed:
                raise ValueError(f"Option {self.data} does not belong to this question")
            return

        if not self.data:
            raise ValueError("No options selected")
        unknown = [option_id for option_id in self.data if option_id not in allowed]
        if unknown:
            raise ValueError(f"Options {unknown} do not belong to this question")
        if self.answer_type == RANKING and len(set(self.data)) != len(self.data):
            raise ValueError("Ranking contains duplicate options")

    def to_json(self):
        if self.answer_type in MULTI_OPTION_TYPES:
            return list(self.data)
        return self.data

    def __eq__(self, other):
        if not isinstance(other, AnswerData):
            return NotImplemented
        return self.answer_type == other.answer_type and self.data == other.data

    def __repr__(self):
        return f"AnswerData({self.answer_type!r}, {self.data!r})"
