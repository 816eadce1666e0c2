from jinja2 import Environment, PackageLoader, select_autoescape

from chaos.answer_data import (
    DROP_DOWN,
    MULTI_CHOICE,
    MULTI_SELECT,
    NO_ANSWER,
    RANKING,
    SHORT_ANSWER,
    AnswerData,
    parse_option_id,
)
from chaos.client.formatting import question_options

_templates = Environment(
    loader=PackageLoader("chaos", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


class QuestionWidget:
    question_type = None
    template = None

    def __init__(self, question, value=None, on_submit=None, disabled=False):
        self.question = question
        self.on_submit = on_submit
        self.disabled = disabled
        self.value = self.normalise(value)

    @property
    def question_id(self):
        return self.question["id"]

    @property
    def title(self):
        return self.question["title"]

    @property
    def description(self):
        return self.question.get("description")

    @property
    def required(self):
        return bool(self.question.get("required"))

    @property
    def options(self):
        return question_options(self.question)

    def normalise(self, value):
        return AnswerData.parse(self.question_type, value).data

    def _check_option(self, option_id):
        if option_id != NO_ANSWER and option_id not in {o["id"] for o in self.options}:
            raise ValueError(
                f"Option {option_id} does not belong to question {self.question_id}"
            )

    def submit(self):
        # on_submit may be a coroutine function; the caller awaits the result
        if self.disabled or self.on_submit is None:
            return None
        return self.on_submit(self.question_id, self.value)

    def render(self):
        return _templates.get_template(self.template).render(widget=self)


class ShortAnswerWidget(QuestionWidget):
    question_type = SHORT_ANSWER
    template = "questions/short_answer.html"

    def change(self, text):
        if not self.disabled:
            self.value = self.normalise(text)

    def blur(self):
        return self.submit()


class DropDownWidget(QuestionWidget):
    question_type = DROP_DOWN
    template = "questions/drop_down.html"
    placeholder = "Select an option"

    @property
    def selected_option(self):
        return next((o for o in self.options if o["id"] == self.value), None)

    def select(self, option_id):
        if self.disabled:
            return None
        option_id = self.normalise(option_id)
        self._check_option(option_id)
        self.value = option_id
        return self.submit()

    def clear(self):
        return self.select(NO_ANSWER)


class MultiChoiceWidget(DropDownWidget):
    question_type = MULTI_CHOICE
    template = "questions/multi_choice.html"


class MultiSelectWidget(QuestionWidget):
    question_type = MULTI_SELECT
    template = "questions/multi_select.html"

    def is_selected(self, option_id):
        return option_id in self.value

    def toggle(self, option_id):
        if self.disabled:
            return None
        option_id = parse_option_id(option_id)
        self._check_option(option_id)
        if option_id in self.value:
            self.value = [selected for selected in self.value if selected != option_id]
        else:
            self.value = self.value + [option_id]
        return self.submit()


class RankingWidget(QuestionWidget):
    question_type = RANKING
    template = "questions/ranking.html"

    def normalise(self, value):
        stored = AnswerData.parse(RANKING, value).data
        declared = [option["id"] for option in self.options]
        ranked = [option_id for option_id in dict.fromkeys(stored) if option_id in declared]
        return ranked + [option_id for option_id in declared if option_id not in ranked]

    def set_options(self, options):
        self.question = {**self.question, "data": {"options": list(options)}}
        self.value = self.normalise(self.value)

    @property
    def ranked_options(self):
        by_id = {option["id"]: option for option in self.options}
        return [
            {**by_id[option_id], "rank": rank}
            for rank, option_id in enumerate(self.value, start=1)
        ]

    def move(self, option_id, index):
        """Drop ``option_id`` at ``index``; items in between shift by one."""
        if self.disabled or option_id not in self.value:
            return None
        current = self.value.index(option_id)
        index = max(0, min(index, len(self.value) - 1))
        if index == current:
            return None

        order = list(self.value)
        order.pop(current)
        order.insert(index, option_id)
        self.value = order
        return self.submit()

    def move_up(self, option_id):
        if option_id not in self.value:
            return None
        return self.move(option_id, self.value.index(option_id) - 1)

    def move_down(self, option_id):
        if option_id not in self.value:
            return None
        return self.move(option_id, self.value.index(option_id) + 1)


WIDGETS = {
    SHORT_ANSWER: ShortAnswerWidget,
    DROP_DOWN: DropDownWidget,
    MULTI_CHOICE: MultiChoiceWidget,
    MULTI_SELECT: MultiSelectWidget,
    RANKING: RankingWidget,
}


def render_question(question, value=None, on_submit=None, disabled=False):
    try:
        widget_class = WIDGETS[question["question_type"]]
    except KeyError:
        raise ValueError(
            f"Unknown question type: {question.get('question_type')!r}"
        ) from None
    return widget_class(question, value, on_submit=on_submit, disabled=disabled)


def session_widgets(session, questions, disabled=False):
    """Widgets for ``questions`` wired to ``session.submit_answer``."""

    def bind(question_type):
        def on_submit(question_id, value):
            return session.submit_answer(question_id, value, question_type)

        return on_submit

    return [
        render_question(
            question,
            session.state.answers.get(question["id"]),
            on_submit=bind(question["question_type"]),
            disabled=disabled,
        )
        for question in questions
    ]
