import pytest

from chaos.answer_data import NO_ANSWER
from chaos.client.widgets import (
    DropDownWidget,
    MultiSelectWidget,
    RankingWidget,
    ShortAnswerWidget,
    render_question,
)

PLATFORMS = [
    {"id": 3, "text": "Instagram"},
    {"id": 4, "text": "TikTok"},
    {"id": 5, "text": "LinkedIn"},
]


def ranking_question(options=PLATFORMS):
    return {
        "id": 30,
        "question_type": "Ranking",
        "title": "Rank these platforms",
        "data": {"options": list(options)},
    }


def dropdown_question():
    return {
        "id": 20,
        "question_type": "DropDown",
        "title": "Have you run an event <before>?",
        "required": True,
        "data": {"options": [{"id": 1, "text": "Yes"}, {"id": 2, "text": "No"}]},
    }


class Recorder:
    def __init__(self):
        self.submitted = []

    def __call__(self, question_id, value):
        self.submitted.append((question_id, value))
        return "sent"


def test_ranking_merges_stored_order_with_declared_options():
    widget = RankingWidget(ranking_question(), [5, 99, 3])
    assert widget.value == [5, 3, 4]

    widget.set_options(PLATFORMS + [{"id": 6, "text": "Discord"}])
    assert widget.value == [5, 3, 4, 6]

    widget.set_options(PLATFORMS[1:])
    assert widget.value == [5, 4]


def test_ranking_move_shifts_items_in_between():
    recorder = Recorder()
    widget = RankingWidget(ranking_question(), None, on_submit=recorder)
    assert widget.value == [3, 4, 5]

    assert widget.move(5, 0) == "sent"
    assert widget.value == [5, 3, 4]
    assert recorder.submitted == [(30, [5, 3, 4])]

    widget.move(5, 10)
    assert widget.value == [3, 4, 5]
    assert [option["rank"] for option in widget.ranked_options] == [1, 2, 3]


def test_ranking_noop_moves_do_not_submit():
    recorder = Recorder()
    widget = RankingWidget(ranking_question(), [3, 4, 5], on_submit=recorder)

    assert widget.move(4, 1) is None
    assert widget.move_up(3) is None
    assert widget.move_down(5) is None
    assert widget.move(99, 0) is None
    assert recorder.submitted == []

    widget.move_down(3)
    assert widget.value == [4, 3, 5]


def test_dropdown_clear_submits_sentinel():
    recorder = Recorder()
    widget = DropDownWidget(dropdown_question(), 2, on_submit=recorder)
    assert widget.selected_option["text"] == "No"

    widget.clear()
    assert widget.value == NO_ANSWER
    assert widget.selected_option is None
    assert recorder.submitted == [(20, NO_ANSWER)]

    with pytest.raises(ValueError):
        widget.select(7)


def test_multi_select_toggle():
    recorder = Recorder()
    question = {**dropdown_question(), "question_type": "MultiSelect"}
    widget = MultiSelectWidget(question, [1], on_submit=recorder)

    widget.toggle(2)
    widget.toggle(1)

    assert widget.value == [2]
    assert recorder.submitted == [(20, [1, 2]), (20, [2])]


def test_short_answer_submits_on_blur_only():
    recorder = Recorder()
    question = {"id": 10, "question_type": "ShortAnswer", "title": "Why?"}
    widget = ShortAnswerWidget(question, None, on_submit=recorder)

    widget.change("Because")
    assert recorder.submitted == []
    widget.blur()
    assert recorder.submitted == [(10, "Because")]


def test_disabled_widgets_ignore_input():
    recorder = Recorder()
    widget = render_question(dropdown_question(), 1, on_submit=recorder, disabled=True)

    assert widget.select(2) is None
    assert widget.value == 1
    assert recorder.submitted == []
    assert " disabled" in widget.render()


def test_render_dropdown_html():
    html = render_question(dropdown_question(), 1).render()

    assert 'data-question-id="20"' in html
    assert "&lt;before&gt;" in html
    assert '<span class="required">*</span>' in html
    assert '<option value="0">Select an option</option>' in html
    assert '<option value="1" selected>Yes</option>' in html


def test_render_ranking_html_lists_current_order():
    html = render_question(ranking_question(), [4, 3, 5]).render()

    positions = [html.index(text) for text in ("TikTok", "Instagram", "LinkedIn")]
    assert positions == sorted(positions)
    assert '<span class="rank">1</span> TikTok' in html


def test_unknown_question_type_is_rejected():
    with pytest.raises(ValueError):
        render_question({"id": 1, "question_type": "Essay", "title": "?"})


def test_multi_select_accepts_form_string_ids():
    recorder = Recorder()
    question = {**dropdown_question(), "question_type": "MultiSelect"}
    widget = MultiSelectWidget(question, [], on_submit=recorder)

    widget.toggle("2")
    assert widget.value == [2]
    assert widget.is_selected(2)

    widget.toggle(" 2 ")
    assert widget.value == []
    assert recorder.submitted == [(20, [2]), (20, [])]
