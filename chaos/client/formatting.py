from chaos.answer_data import (
    MULTI_OPTION_TYPES,
    NO_ANSWER,
    SHORT_ANSWER,
    SINGLE_OPTION_TYPES,
    AnswerData,
)

NO_ANSWER_TEXT = "No answer provided"
SEPARATOR = ", "


def question_options(question):
    return (question.get("data") or {}).get("options") or []


def option_labels(question):
    return {option["id"]: option["text"] for option in question_options(question)}


def format_answer(question, raw_value):
    if raw_value is None:
        return NO_ANSWER_TEXT

    question_type = question["question_type"]
    if isinstance(raw_value, AnswerData):
        raw_value = raw_value.data
    try:
        answer = AnswerData.parse(question_type, raw_value)
    except ValueError:
        return NO_ANSWER_TEXT

    if question_type == SHORT_ANSWER:
        return answer.data if answer.data.strip() else NO_ANSWER_TEXT

    labels = option_labels(question)
    if question_type in SINGLE_OPTION_TYPES:
        if answer.data == NO_ANSWER:
            return NO_ANSWER_TEXT
        return labels.get(answer.data, str(answer.data))

    if question_type in MULTI_OPTION_TYPES and answer.data:
        return SEPARATOR.join(
            labels.get(option_id, str(option_id)) for option_id in answer.data
        )
    return NO_ANSWER_TEXT
